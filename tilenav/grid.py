"""
Grid model for tile navigation.

This module holds the collision buffer supplied by the host world and the
per-cell navigation records derived from it. Rows grow upward: row 0 is the
bottom of the map and the cell below (x, z) is (x, z - 1). Cells are
addressed by the flat index z * width + x.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from .constants import OPEN, SOLID
from .errors import GridError


class NavType(IntEnum):
    """Standable classification of a cell."""

    NONE = 0  # Not standable
    LEFT_EDGE = 1  # Leftmost cell of a platform
    MIDDLE = 2  # Interior cell of a platform
    RIGHT_EDGE = 3  # Rightmost cell of a platform
    LONE = 4  # One-cell-wide platform


class CollisionGrid:
    """Open/solid tile buffer of a side-scrolling map.

    Attributes:
        tiles: uint8 array of shape [height, width], row 0 at the bottom
        width: Number of columns
        height: Number of rows
    """

    def __init__(self, tiles: np.ndarray):
        tiles = np.asarray(tiles)
        if tiles.ndim != 2:
            raise GridError(f"tiles must be 2-D, got shape {tiles.shape}")
        if tiles.shape[0] == 0 or tiles.shape[1] == 0:
            raise GridError(f"grid dimensions must be positive, got {tiles.shape}")
        # Anything non-zero counts as solid
        self.tiles = (tiles != OPEN).astype(np.uint8)
        self.height, self.width = self.tiles.shape

    @classmethod
    def from_buffer(
        cls,
        buffer: Union[bytes, Sequence[int], np.ndarray],
        width: int,
        height: int,
    ) -> "CollisionGrid":
        """Build a grid from a flat row-major buffer, bottom row first."""
        if width <= 0 or height <= 0:
            raise GridError(f"grid dimensions must be positive, got {width}x{height}")
        if isinstance(buffer, (bytes, bytearray)):
            flat = np.frombuffer(bytes(buffer), dtype=np.uint8)
        else:
            flat = np.asarray(buffer)
        if flat.ndim != 1:
            raise GridError(f"collision buffer must be flat, got shape {flat.shape}")
        if flat.size != width * height:
            raise GridError(
                f"collision buffer has {flat.size} values, expected {width * height}"
            )
        return cls(flat.reshape(height, width))

    @classmethod
    def from_rows(cls, rows: Sequence[Union[str, Sequence[int]]]) -> "CollisionGrid":
        """Build a grid from rows written top row first.

        String rows accept '#' or '1' for solid and anything else for open,
        which keeps hand-drawn test maps readable.
        """
        if len(rows) == 0:
            raise GridError("no rows given")
        parsed = []
        for row in rows:
            if isinstance(row, str):
                parsed.append([SOLID if ch in "#1" else OPEN for ch in row])
            else:
                parsed.append(list(row))
        widths = {len(row) for row in parsed}
        if len(widths) != 1:
            raise GridError(f"rows have differing widths: {sorted(widths)}")
        return cls(np.array(parsed[::-1], dtype=np.uint8))

    def in_bounds(self, x: int, z: int) -> bool:
        return 0 <= x < self.width and 0 <= z < self.height

    def index(self, x: int, z: int) -> int:
        return z * self.width + x

    def coords(self, index: int) -> Tuple[int, int]:
        return index % self.width, index // self.width

    def is_solid(self, x: int, z: int) -> bool:
        """True for solid tiles and for anything outside the grid."""
        if not self.in_bounds(x, z):
            return True
        return bool(self.tiles[z, x] == SOLID)

    def is_open(self, x: int, z: int) -> bool:
        """True only for open tiles inside the grid."""
        return self.in_bounds(x, z) and self.tiles[z, x] == OPEN

    def headroom_clear(self, x: int, z: int, body_height: int) -> bool:
        """Check that (x, z) and the body_height rows above it are open.

        Rows above the top of the map are open sky.
        """
        if not 0 <= x < self.width or z < 0:
            return False
        top = min(z + body_height, self.height - 1)
        if z > top:
            return True
        return not np.any(self.tiles[z : top + 1, x] == SOLID)

    def to_buffer(self) -> bytes:
        return self.tiles.tobytes()


@dataclass(frozen=True)
class JumpEdge:
    """A jump from the owning cell to `target`.

    `path` lists every cell the arc passes through, take-off cell first and
    landing cell last. `curve_hint` holds the two apex anchor cells used to
    draw the arc, or None when unset.
    """

    target: int
    horizontal: int
    height: int
    cost: float
    curve_hint: Optional[Tuple[int, int]]
    path: Tuple[int, ...]


@dataclass
class Cell:
    """Navigation record of one grid position."""

    x: int
    z: int
    collision: int
    nav_type: NavType = NavType.NONE
    run_links: List[int] = field(default_factory=list)
    fall_links: List[int] = field(default_factory=list)
    jump_links: List[JumpEdge] = field(default_factory=list)

    @property
    def navigable(self) -> bool:
        return self.nav_type != NavType.NONE

    @property
    def jump_targets(self) -> List[int]:
        return [jump.target for jump in self.jump_links]
