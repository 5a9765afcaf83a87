"""
Records for everything the engine moves around.

All records are immutable; a tick builds new ones with ``dataclasses.replace``.
"""

import enum
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple


class Direction(enum.Enum):
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)
    STOP = (0, 0)

    @property
    def delta(self):
        return self.value

    @property
    def opposite(self):
        return _OPPOSITES[self]


_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
    Direction.STOP: Direction.STOP,
}

# Order in which ghosts consider their options
MOVE_DIRECTIONS = (Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT)


class GameStatus(enum.Enum):
    PLAYING = "PLAYING"
    WON = "WON"
    LOST = "LOST"
    PAUSED = "PAUSED"


@dataclass(frozen=True)
class Player:
    position: Tuple[int, int]
    direction: Direction = Direction.STOP
    next_direction: Direction = Direction.STOP
    mouth_open: bool = True

    @property
    def facing(self):
        """Committed heading, falling back to the queued one."""
        if self.direction != Direction.STOP:
            return self.direction
        return self.next_direction


@dataclass(frozen=True)
class Ghost:
    id: int
    position: Tuple[int, int]
    spawn: Tuple[int, int]
    color: Tuple[int, int, int]
    direction: Direction = Direction.UP
    frightened: bool = False

    def respawned(self):
        return replace(self, position=self.spawn, frightened=False)


@dataclass(frozen=True)
class Projectile:
    id: int
    position: Tuple[int, int]
    direction: Direction


@dataclass(frozen=True)
class PowerUpState:
    active: bool = False
    timer: int = 0


@dataclass(frozen=True)
class Snapshot:
    """
    One committed game state, as handed to renderers between ticks.

    Attributes:
        player: The player, or None when the layout has no player spawn.
        ghosts: Ghost roster in spawn order.
        projectiles: Live projectiles in firing order.
        pellets: Cells still holding a pellet.
        power_pellets: Cells still holding a power pellet.
        power_up: Global power-up timer.
        score: Running score.
        status: Current game status.
        initial_pellet_count: Pellets plus power pellets when the level loaded.
        next_projectile_id: Id handed to the next fired projectile.
        ticks: Ticks committed since the level loaded.
    """
    player: Optional[Player] = None
    ghosts: tuple = ()
    projectiles: tuple = ()
    pellets: frozenset = field(default_factory=frozenset)
    power_pellets: frozenset = field(default_factory=frozenset)
    power_up: PowerUpState = field(default_factory=PowerUpState)
    score: int = 0
    status: GameStatus = GameStatus.PAUSED
    initial_pellet_count: int = 0
    next_projectile_id: int = 1
    ticks: int = 0

    @property
    def pellets_left(self):
        return len(self.pellets) + len(self.power_pellets)
