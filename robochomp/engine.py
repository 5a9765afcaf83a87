"""
Tick engine and game session.

``tick`` is a pure function from one committed ``Snapshot`` to the next.
``GameSession`` holds the committed snapshot between ticks and takes the
out-of-band inputs (direction intents and fire requests).
"""

import logging
from dataclasses import dataclass, field, replace

import numpy as np

from .collision import resolve_player_contact
from .config import INITIAL_GHOSTS, TILE_GHOST_SPAWN, TILE_PELLET, TILE_PLAYER_SPAWN, TILE_POWER_PELLET
from .entities import Direction, GameStatus, Ghost, Player, PowerUpState, Snapshot
from .ghost_ai import step_ghosts
from .grid import Grid
from .levels import LEVELS
from .movement import resolve_player_move
from .pellets import consume
from .projectiles import advance_projectiles, fire_projectile

logger = logging.getLogger(__name__)


def initial_snapshot(level, grid=None, score=0):
    """Build a fresh PLAYING snapshot from the level's spawn and pellet tiles."""
    grid = grid or Grid.from_level(level)

    player_spawns = grid.cells_of(TILE_PLAYER_SPAWN)
    # The last marker wins if a layout has several
    player = Player(position=player_spawns[-1]) if player_spawns else None

    ghosts = tuple(
        Ghost(id=spec["id"], position=pos, spawn=pos, color=spec["color"])
        for spec, pos in zip(INITIAL_GHOSTS, grid.cells_of(TILE_GHOST_SPAWN))
    )

    pellets = frozenset(grid.cells_of(TILE_PELLET))
    power_pellets = frozenset(grid.cells_of(TILE_POWER_PELLET))

    return Snapshot(
        player=player,
        ghosts=ghosts,
        pellets=pellets,
        power_pellets=power_pellets,
        power_up=PowerUpState(),
        score=score,
        status=GameStatus.PLAYING,
        initial_pellet_count=len(pellets) + len(power_pellets),
    )


@dataclass
class TickTransaction:
    """Everything a tick computes, applied to the previous snapshot in one go."""
    previous: Snapshot
    player: Player = None
    ghosts: list = field(default_factory=list)
    projectiles: list = field(default_factory=list)
    pellets: frozenset = None
    power_pellets: frozenset = None
    power_up: PowerUpState = None
    score_delta: int = 0
    lost: bool = False

    def __post_init__(self):
        prev = self.previous
        self.player = prev.player
        self.ghosts = list(prev.ghosts)
        self.projectiles = list(prev.projectiles)
        self.pellets = prev.pellets
        self.power_pellets = prev.power_pellets
        self.power_up = prev.power_up

    def commit(self):
        status = GameStatus.LOST if self.lost else self.previous.status
        snapshot = replace(
            self.previous,
            player=self.player,
            ghosts=tuple(self.ghosts),
            projectiles=tuple(self.projectiles),
            pellets=self.pellets,
            power_pellets=self.power_pellets,
            power_up=self.power_up,
            score=self.previous.score + self.score_delta,
            status=status,
            ticks=self.previous.ticks + 1,
        )
        if (
            snapshot.status == GameStatus.PLAYING
            and snapshot.pellets_left == 0
            and snapshot.initial_pellet_count > 0
        ):
            snapshot = replace(snapshot, status=GameStatus.WON)
        return snapshot


def tick(snapshot, level, rng, grid=None):
    """
    Advance the game by one tick.

    Order: player move, ghost moves, projectiles, player/ghost contact,
    pellets and power-up. A lethal contact ends the tick before pellets and
    the power-up clock are touched.
    """
    if snapshot.status != GameStatus.PLAYING or snapshot.player is None:
        return snapshot
    grid = grid or Grid.from_level(level)
    txn = TickTransaction(snapshot)

    # --- Player ---
    txn.player = resolve_player_move(snapshot.player, grid)
    player_pos = txn.player.position

    # --- Ghosts ---
    # Frightened follows last tick's power-up; hits and captures below override it
    txn.ghosts = step_ghosts(snapshot.ghosts, grid, rng, snapshot.power_up.active)

    # --- Projectiles ---
    txn.projectiles, txn.ghosts, hit_score = advance_projectiles(
        snapshot.projectiles, txn.ghosts, grid, level.scoring.projectile_hit
    )
    txn.score_delta += hit_score

    # --- Player vs ghosts ---
    txn.ghosts, capture_score, txn.lost = resolve_player_contact(
        player_pos, txn.ghosts, level.scoring.ghost_eat
    )
    txn.score_delta += capture_score
    if txn.lost:
        return txn.commit()

    # --- Pellets & power-up ---
    txn.pellets, txn.power_pellets, txn.power_up, txn.ghosts, pellet_score = consume(
        player_pos, snapshot.pellets, snapshot.power_pellets, snapshot.power_up, txn.ghosts, level
    )
    txn.score_delta += pellet_score

    return txn.commit()


class GameSession:
    """
    Owns the committed snapshot and the level sequence.

    The caller schedules ``tick`` at the level's tick interval and forwards
    player input through ``queue_direction`` and ``fire`` between ticks.
    """

    def __init__(self, levels=None, rng=None, seed=None):
        self.levels = list(levels) if levels is not None else list(LEVELS)
        if not self.levels:
            raise ValueError("a session needs at least one level")
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.level_index = 0
        self.level = self.levels[0]
        self.grid = None
        self.snapshot = Snapshot()

    @property
    def status(self):
        return self.snapshot.status

    @property
    def is_last_level(self):
        return self.level_index >= len(self.levels) - 1

    def load_level(self, index, keep_score=False):
        if not 0 <= index < len(self.levels):
            raise IndexError(f"no level {index} (have {len(self.levels)})")
        score = self.snapshot.score if keep_score else 0
        self.level_index = index
        self.level = self.levels[index]
        self.grid = Grid.from_level(self.level)
        self.snapshot = initial_snapshot(self.level, self.grid, score=score)
        logger.info(
            "Loaded level %d: %d pellets, %d ghosts",
            index + 1, self.snapshot.initial_pellet_count, len(self.snapshot.ghosts),
        )
        return self.snapshot

    def restart(self):
        return self.load_level(0)

    def next_level(self):
        if self.status != GameStatus.WON or self.is_last_level:
            return self.snapshot
        return self.load_level(self.level_index + 1, keep_score=True)

    def queue_direction(self, direction):
        snapshot = self.snapshot
        if snapshot.status != GameStatus.PLAYING or snapshot.player is None or direction == Direction.STOP:
            return snapshot
        self.snapshot = replace(snapshot, player=replace(snapshot.player, next_direction=direction))
        return self.snapshot

    def fire(self):
        self.snapshot = fire_projectile(self.snapshot)
        return self.snapshot

    def tick(self):
        previous = self.snapshot
        self.snapshot = tick(previous, self.level, self.rng, self.grid)
        if self.snapshot.status != previous.status:
            logger.info(
                "Level %d %s after %d ticks, score %d",
                self.level_index + 1, self.snapshot.status.value, self.snapshot.ticks, self.snapshot.score,
            )
        return self.snapshot
