from dataclasses import dataclass, field

import numpy as np

# --- Timing ---
TICK_INTERVAL_MS = 150
POWER_UP_DURATION_MS = 7000

# --- Scoring ---
PELLET_SCORE = 10
POWER_PELLET_SCORE = 50
GHOST_EAT_SCORE = 200
PROJECTILE_HIT_SCORE = 100

# --- Rules ---
MAX_PROJECTILES = 3
GHOST_TURN_CHANCE = 0.25

# Ghost roster, assigned to ghost spawn tiles in scan order
INITIAL_GHOSTS = [
    {"id": 1, "color": (255, 0, 0)},
    {"id": 2, "color": (255, 184, 255)},
    {"id": 3, "color": (0, 255, 255)},
    {"id": 4, "color": (255, 184, 82)},
]

# Tile codes used by level layouts
TILE_EMPTY = 0
TILE_WALL = 1
TILE_PELLET = 2
TILE_PLAYER_SPAWN = 3
TILE_GHOST_SPAWN = 4
TILE_POWER_PELLET = 5
TILE_CODES = (TILE_EMPTY, TILE_WALL, TILE_PELLET, TILE_PLAYER_SPAWN, TILE_GHOST_SPAWN, TILE_POWER_PELLET)


@dataclass(frozen=True)
class Scoring:
    pellet: int = PELLET_SCORE
    power_pellet: int = POWER_PELLET_SCORE
    ghost_eat: int = GHOST_EAT_SCORE
    projectile_hit: int = PROJECTILE_HIT_SCORE


@dataclass(frozen=True)
class LevelConfig:
    """
    Static description of one level.

    Attributes:
        layout: Rows of tile codes (see TILE_* above).
        tick_interval_ms: Scheduler period the level is tuned for.
        power_up_duration_ms: How long a power pellet frightens the ghosts.
        scoring: Score constants awarded on this level.
    """
    layout: tuple
    tick_interval_ms: int = TICK_INTERVAL_MS
    power_up_duration_ms: int = POWER_UP_DURATION_MS
    scoring: Scoring = field(default_factory=Scoring)

    def __post_init__(self):
        rows = tuple(tuple(int(tile) for tile in row) for row in self.layout)
        if not rows or not rows[0]:
            raise ValueError("level layout must have at least one row and one column")
        if any(len(row) != len(rows[0]) for row in rows):
            raise ValueError("level layout rows must all have the same length")
        unknown = {tile for row in rows for tile in row} - set(TILE_CODES)
        if unknown:
            raise ValueError(f"unknown tile codes in layout: {sorted(unknown)}")
        if self.tick_interval_ms <= 0:
            raise ValueError("tick_interval_ms must be positive")
        object.__setattr__(self, "layout", rows)

    @property
    def power_up_ticks(self):
        return self.power_up_duration_ms // self.tick_interval_ms

    def as_array(self):
        return np.array(self.layout, dtype=np.int8)
