from .entities import Direction
from .movement import next_position

DIRECTION_TO_ACTION = {
    Direction.UP: 1,
    Direction.DOWN: 2,
    Direction.LEFT: 3,
    Direction.RIGHT: 4,
}


def _ghost_in_line(snapshot, grid):
    player = snapshot.player
    heading = player.facing
    if heading == Direction.STOP:
        return False
    threats = {g.position for g in snapshot.ghosts if not g.frightened}
    pos = player.position
    for _ in range(max(grid.width, grid.height)):
        pos = next_position(pos, heading, grid.width)
        if grid.is_wall(pos):
            return False
        if pos in threats:
            return True
    return False


def policy(env):
    # Strategy: Shoot any dangerous ghost standing in the line of fire. Otherwise
    # step to the open neighbour closest (Manhattan) to the nearest remaining pellet,
    # preferring to keep the current heading on ties.
    snapshot = env.session.snapshot
    grid = env.session.grid
    player = snapshot.player
    if player is None:
        return [0, 0, 0]

    if _ghost_in_line(snapshot, grid) and not env.space_pressed_last_frame:
        return [0, 1, 0]

    targets = snapshot.pellets | snapshot.power_pellets
    if not targets:
        return [0, 0, 0]

    def distance_from(pos):
        return min(abs(pos[0] - tx) + abs(pos[1] - ty) for tx, ty in targets)

    best_dir, best_dist = None, None
    for direction in DIRECTION_TO_ACTION:
        pos = next_position(player.position, direction, grid.width)
        if grid.is_wall(pos):
            continue
        dist = distance_from(pos)
        if best_dist is None or dist < best_dist or (dist == best_dist and direction == player.direction):
            best_dir, best_dist = direction, dist

    if best_dir is None:
        return [0, 0, 0]
    return [DIRECTION_TO_ACTION[best_dir], 0, 0]
