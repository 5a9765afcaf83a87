from .config import LevelConfig, Scoring
from .engine import GameSession, TickTransaction, initial_snapshot, tick
from .entities import Direction, GameStatus, Ghost, Player, PowerUpState, Projectile, Snapshot
from .grid import Grid
from .levels import LEVELS, parse_layout

__all__ = [
    "Direction",
    "GameSession",
    "GameStatus",
    "Ghost",
    "Grid",
    "LEVELS",
    "LevelConfig",
    "Player",
    "PowerUpState",
    "Projectile",
    "Scoring",
    "Snapshot",
    "TickTransaction",
    "initial_snapshot",
    "parse_layout",
    "tick",
]
