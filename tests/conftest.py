import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import numpy as np
import pytest

from robochomp.config import LevelConfig
from robochomp.grid import Grid
from robochomp.levels import parse_layout


@pytest.fixture
def make_level():
    def _make(rows, **kwargs):
        return LevelConfig(layout=parse_layout(rows), **kwargs)
    return _make


@pytest.fixture
def make_grid():
    def _make(rows):
        return Grid(parse_layout(rows))
    return _make


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
