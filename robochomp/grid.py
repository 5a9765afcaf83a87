import numpy as np

from .config import TILE_WALL


class Grid:
    """Read-only wall and bounds queries over a level's tile layout."""

    def __init__(self, layout):
        tiles = np.array(layout, dtype=np.int8)
        if tiles.ndim != 2 or tiles.size == 0:
            raise ValueError("layout must be a non-empty rectangular table of tile codes")
        tiles.setflags(write=False)
        self.tiles = tiles
        self.height, self.width = tiles.shape

    @classmethod
    def from_level(cls, level):
        return cls(level.as_array())

    def in_bounds(self, pos):
        x, y = pos
        return 0 <= x < self.width and 0 <= y < self.height

    def is_wall(self, pos):
        # Anything off the board counts as a wall
        if not self.in_bounds(pos):
            return True
        x, y = pos
        return self.tiles[y, x] == TILE_WALL

    def cells_of(self, tile):
        """Cells holding the given tile code, in row-major order."""
        ys, xs = np.nonzero(self.tiles == tile)
        return [(int(x), int(y)) for y, x in zip(ys, xs)]
