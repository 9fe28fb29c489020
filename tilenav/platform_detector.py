"""
Platform detection over a collision grid.

Scans the grid row by row, left to right, and classifies every cell the
agent can stand on as the left edge, middle or right edge of a platform, or
as a lone one-cell platform.
"""

import logging
from typing import List

from .grid import Cell, CollisionGrid, NavType

logger = logging.getLogger(__name__)


def detect_platforms(grid: CollisionGrid) -> List[Cell]:
    """Create one Cell per grid position with its NavType assigned.

    A platform run opens on an open cell resting on a solid one and stays
    open while the next cell to the right is also standable. Runs never wrap
    rows. The column past the right edge of the map counts as a wall, so a
    run reaching the last column closes there.

    Args:
        grid: Collision grid to scan

    Returns:
        Cells in flat index order (z * width + x)
    """
    cells = [
        Cell(x=x, z=z, collision=int(grid.tiles[z, x]))
        for z in range(grid.height)
        for x in range(grid.width)
    ]

    # Row 0 has nothing below it to stand on
    for z in range(1, grid.height):
        platform_started = False
        for x in range(grid.width):
            cell = cells[grid.index(x, z)]

            if not platform_started:
                if grid.is_open(x, z) and grid.is_solid(x, z - 1):
                    cell.nav_type = NavType.LEFT_EDGE
                    platform_started = True

            if platform_started:
                lower_right_solid = grid.in_bounds(x + 1, z - 1) and grid.is_solid(
                    x + 1, z - 1
                )
                right_open = grid.is_open(x + 1, z)

                if (
                    lower_right_solid
                    and right_open
                    and cell.nav_type != NavType.LEFT_EDGE
                ):
                    cell.nav_type = NavType.MIDDLE

                if not lower_right_solid or not right_open:
                    if cell.nav_type == NavType.LEFT_EDGE:
                        cell.nav_type = NavType.LONE
                    else:
                        cell.nav_type = NavType.RIGHT_EDGE
                    platform_started = False

    logger.debug(
        f"Detected {sum(1 for c in cells if c.navigable)} navigable cells "
        f"in {grid.width}x{grid.height} grid"
    )
    return cells
