from dataclasses import replace

from .entities import Direction


def next_position(pos, direction, width):
    dx, dy = direction.delta
    x, y = pos[0] + dx, pos[1] + dy

    # Horizontal tunnel
    if x < 0:
        x = width - 1
    elif x >= width:
        x = 0
    return (x, y)


def resolve_player_move(player, grid):
    """
    Advance the player one cell.

    The queued direction is tried first so a turn is taken as soon as it
    opens up. The player then steps along its committed direction and stops
    dead in front of a wall.
    """
    direction = player.direction
    queued = player.next_direction
    if queued != Direction.STOP and not grid.is_wall(next_position(player.position, queued, grid.width)):
        direction = queued

    position = next_position(player.position, direction, grid.width)
    if grid.is_wall(position):
        position = player.position
        direction = Direction.STOP

    return replace(
        player,
        position=position,
        direction=direction,
        mouth_open=not player.mouth_open,
    )
