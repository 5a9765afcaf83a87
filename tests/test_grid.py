import pytest

from robochomp.config import LevelConfig, TILE_GHOST_SPAWN, TILE_PELLET
from robochomp.grid import Grid
from robochomp.levels import LEVELS, parse_layout


def test_out_of_bounds_is_wall(make_grid):
    grid = make_grid([
        "   ",
        "   ",
    ])
    assert grid.width == 3 and grid.height == 2
    for pos in [(-1, 0), (3, 0), (0, -1), (0, 2), (100, 100)]:
        assert grid.is_wall(pos)
    assert not grid.is_wall((0, 0))
    assert not grid.is_wall((2, 1))


def test_only_wall_tiles_block(make_grid):
    grid = make_grid([
        "#.P",
        "Go ",
    ])
    assert grid.is_wall((0, 0))
    assert not any(grid.is_wall(pos) for pos in [(1, 0), (2, 0), (0, 1), (1, 1), (2, 1)])


def test_cells_of_scans_row_major(make_grid):
    grid = make_grid([
        "G.G",
        ".G.",
    ])
    assert grid.cells_of(TILE_GHOST_SPAWN) == [(0, 0), (2, 0), (1, 1)]
    assert grid.cells_of(TILE_PELLET) == [(1, 0), (0, 1), (2, 1)]


def test_grid_tiles_are_read_only(make_grid):
    grid = make_grid(["#."])
    with pytest.raises(ValueError):
        grid.tiles[0, 0] = 0


def test_level_config_rejects_bad_layouts():
    with pytest.raises(ValueError):
        LevelConfig(layout=())
    with pytest.raises(ValueError):
        LevelConfig(layout=((1, 1), (1,)))
    with pytest.raises(ValueError):
        LevelConfig(layout=((1, 9),))
    with pytest.raises(ValueError):
        LevelConfig(layout=((1,),), tick_interval_ms=0)


def test_parse_layout_rejects_unknown_characters():
    with pytest.raises(ValueError):
        parse_layout(["#x#"])


def test_power_up_ticks_floor_division():
    level = LevelConfig(layout=((0,),), tick_interval_ms=150, power_up_duration_ms=7000)
    assert level.power_up_ticks == 46


@pytest.mark.parametrize("level", LEVELS)
def test_builtin_levels_have_spawns_and_a_tunnel(level):
    grid = Grid.from_level(level)
    assert len(grid.cells_of(3)) == 1
    assert len(grid.cells_of(4)) == 4
    assert any(not grid.is_wall((0, y)) and not grid.is_wall((grid.width - 1, y)) for y in range(grid.height))
