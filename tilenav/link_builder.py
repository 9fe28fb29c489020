"""
Link building for the tile navigation graph.

Three independent passes connect classified cells:

- run links between horizontally adjacent standable cells (bidirectional)
- fall links from platform edges down to the first standable cell below
- jump links found by walking ballistic arcs of every allowed jump height

All walks are bounds-checked; leaving the grid simply means no link.
"""

import logging
import math
from typing import List

from .constants import DEFAULT_MAX_DROPS_AFTER_JUMP
from .grid import Cell, CollisionGrid, JumpEdge, NavType

logger = logging.getLogger(__name__)

# Horizontal step of the two arcs, in the order they are explored
ARC_DIRECTIONS = (1, -1)


class LinkBuilder:
    """Adds run, fall and jump links to a list of classified cells."""

    def __init__(
        self,
        grid: CollisionGrid,
        cells: List[Cell],
        body_height: int,
        max_drops_after_jump: int = DEFAULT_MAX_DROPS_AFTER_JUMP,
    ):
        self.grid = grid
        self.cells = cells
        self.body_height = body_height
        self.max_drops_after_jump = max_drops_after_jump

    def create_run_links(self):
        width = self.grid.width
        for i, cell in enumerate(self.cells):
            # Rightmost column has no right neighbour
            if not cell.navigable or (i + 1) % width == 0:
                continue
            if self.cells[i + 1].navigable:
                cell.run_links.append(i + 1)
                self.cells[i + 1].run_links.append(i)

    def create_fall_links(self):
        for i, cell in enumerate(self.cells):
            if cell.nav_type == NavType.RIGHT_EDGE:
                sides = (1,)
            elif cell.nav_type == NavType.LEFT_EDGE:
                sides = (-1,)
            elif cell.nav_type == NavType.LONE:
                sides = (-1, 1)
            else:
                continue

            for side in sides:
                side_x = cell.x + side
                if not self.grid.is_open(side_x, cell.z):
                    continue
                target_row = cell.z - 1
                while target_row > 0:
                    target = self.grid.index(side_x, target_row)
                    if self.cells[target].navigable:
                        if target not in cell.fall_links:
                            cell.fall_links.append(target)
                        break
                    target_row -= 1

    def create_jump_links(self, jump_height: int):
        for base, cell in enumerate(self.cells):
            if not cell.navigable:
                continue
            for height in range(1, jump_height + 1):
                self.calculate_jump_at_point(height, base)

    def calculate_jump_at_point(self, height: int, base: int):
        """Walk both arcs of a jump of `height` rows from `base`.

        For every ascent offset, the agent rises straight up `offset` rows,
        then drifts one column per row up to the apex, then one column per row
        on the way back down to the take-off row, and finally drops straight
        down a few rows. The first standable cell met on the way is the
        landing cell.
        """
        if not 0 <= base < len(self.cells):
            return

        grid = self.grid
        x = self.cells[base].x
        z = self.cells[base].z

        for direction in ARC_DIRECTIONS:
            for offset in range(height - 1, -1, -1):
                path = [base]
                skip = False

                for f in range(1, offset + 1):
                    if not grid.in_bounds(x, z + f) or not grid.headroom_clear(
                        x, z + f, self.body_height
                    ):
                        skip = True
                        break
                    path.append(grid.index(x, z + f))
                if skip:
                    continue

                # Take-off: the row above the straight climb must be clear
                if not grid.in_bounds(x, z + 1 + offset) or not grid.headroom_clear(
                    x, z + 1 + offset, self.body_height
                ):
                    continue

                horizontal = 1
                landed = False
                for j in range(1 + offset, height + 1):
                    column = x + horizontal * direction
                    if not self._passable(column, z + j):
                        skip = True
                        break
                    target = grid.index(column, z + j)
                    path.append(target)
                    if self.cells[target].navigable:
                        self.add_jump_link(target, base, height, horizontal, path)
                        landed = True
                        break
                    horizontal += 1
                if skip or landed:
                    continue

                for j in range(1, height + 1):
                    column = x + horizontal * direction
                    if not self._passable(column, z + height - j):
                        skip = True
                        break
                    target = grid.index(column, z + height - j)
                    path.append(target)
                    if self.cells[target].navigable:
                        self.add_jump_link(target, base, height, horizontal, path)
                        landed = True
                        break
                    if j < height - offset:
                        horizontal += 1
                if skip or landed:
                    continue

                column = x + horizontal * direction
                for j in range(1, self.max_drops_after_jump + 1):
                    if not grid.is_open(column, z - j):
                        break
                    target = grid.index(column, z - j)
                    path.append(target)
                    if self.cells[target].navigable:
                        self.add_jump_link(target, base, height + j, horizontal, path)
                        break

    def add_jump_link(
        self, target: int, base: int, height: int, horizontal: int, path: List[int]
    ) -> bool:
        """Record a jump from `base` to `target` unless one already exists.

        Returns:
            True if a new JumpEdge was added
        """
        if target in self.cells[base].jump_targets:
            return False

        width = self.grid.width
        curve_hint = None
        if path:
            highest = max(index // width for index in path)
            curve_hint = (
                highest * width + base % width,
                highest * width + target % width,
            )

        jump = JumpEdge(
            target=target,
            horizontal=horizontal,
            height=height,
            cost=math.sqrt(horizontal**2 + height**2),
            curve_hint=curve_hint,
            path=tuple(path),
        )
        self.cells[base].jump_links.append(jump)
        return True

    def _passable(self, x: int, z: int) -> bool:
        # The agent can occupy (x, z): open tile with clear headroom
        return self.grid.is_open(x, z) and self.grid.headroom_clear(
            x, z, self.body_height
        )
