"""
Ghost movement policy.

Ghosts are memoryless random walkers: they keep their heading, avoid
doubling back at junctions and occasionally pick a new turn at random.
"""

from dataclasses import replace

from .config import GHOST_TURN_CHANCE
from .entities import Direction, MOVE_DIRECTIONS
from .movement import next_position


def legal_directions(pos, grid):
    return [d for d in MOVE_DIRECTIONS if not grid.is_wall(next_position(pos, d, grid.width))]


def choose_direction(ghost, grid, rng, turn_chance=GHOST_TURN_CHANCE):
    options = legal_directions(ghost.position, grid)
    if not options:
        return Direction.STOP

    # Only reverse out of a dead end
    reverse = ghost.direction.opposite
    if len(options) > 1 and reverse in options:
        options.remove(reverse)

    if ghost.direction not in options or (len(options) > 1 and rng.random() < turn_chance):
        return options[int(rng.integers(len(options)))]
    return ghost.direction


def step_ghost(ghost, grid, rng, frightened, turn_chance=GHOST_TURN_CHANCE):
    direction = choose_direction(ghost, grid, rng, turn_chance)
    return replace(
        ghost,
        position=next_position(ghost.position, direction, grid.width),
        direction=direction,
        frightened=frightened,
    )


def step_ghosts(ghosts, grid, rng, frightened, turn_chance=GHOST_TURN_CHANCE):
    return [step_ghost(ghost, grid, rng, frightened, turn_chance) for ghost in ghosts]
