from .config import (
    LevelConfig,
    TILE_EMPTY, TILE_WALL, TILE_PELLET, TILE_PLAYER_SPAWN, TILE_GHOST_SPAWN, TILE_POWER_PELLET,
)

# Map drawing characters to tile codes
CHAR_TO_TILE = {
    " ": TILE_EMPTY,
    "#": TILE_WALL,
    ".": TILE_PELLET,
    "P": TILE_PLAYER_SPAWN,
    "G": TILE_GHOST_SPAWN,
    "o": TILE_POWER_PELLET,
}


def parse_layout(rows):
    """Convert a list of drawn rows into a tuple of tile-code rows."""
    try:
        return tuple(tuple(CHAR_TO_TILE[ch] for ch in row) for row in rows)
    except KeyError as e:
        raise ValueError(f"unknown layout character {e.args[0]!r}") from None


LEVEL_1 = parse_layout([
    "###################",
    "#o.......#.......o#",
    "#.##.###.#.###.##.#",
    "#.................#",
    "#.##.#.#####.#.##.#",
    "#....#...#...#....#",
    "####.### # ###.####",
    "####.#  GGGG #.####",
    "    .  #   #  .    ",
    "####.# ##### #.####",
    "#........#........#",
    "#.##.###.#.###.##.#",
    "#o.#.....P.....#.o#",
    "#.................#",
    "###################",
])

LEVEL_2 = parse_layout([
    "###################",
    "#o...#.......#...o#",
    "#.#.##.#####.##.#.#",
    "#.#.............#.#",
    "#...##.## ##.##...#",
    "###.#..#GG #..#.###",
    "    .#.#GG #.#.    ",
    "###.#..#####..#.###",
    "#...#.........#...#",
    "#.#.#.###.###.#.#.#",
    "#o.......P.......o#",
    "###################",
])

LEVELS = [
    LevelConfig(layout=LEVEL_1),
    LevelConfig(layout=LEVEL_2, tick_interval_ms=120, power_up_duration_ms=6000),
]
