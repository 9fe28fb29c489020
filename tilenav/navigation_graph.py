"""
Navigation graph built from a collision grid.

The graph owns every Cell and JumpEdge of one agent configuration. It is
rebuilt from scratch whenever the terrain, the jump height or the body
height changes; nothing here is updated incrementally.
"""

import logging
from typing import Dict, List, Optional, Tuple

import networkx as nx

from .constants import DEFAULT_MAX_DROPS_AFTER_JUMP
from .grid import Cell, CollisionGrid, NavType
from .link_builder import LinkBuilder
from .platform_detector import detect_platforms

logger = logging.getLogger(__name__)

# Characters used by NavigationGraph.describe()
NAV_TYPE_CHARS = {
    NavType.NONE: ".",
    NavType.LEFT_EDGE: "<",
    NavType.MIDDLE: "=",
    NavType.RIGHT_EDGE: ">",
    NavType.LONE: "o",
}
SOLID_CHAR = "#"


class NavigationGraph:
    """Standable cells of a grid plus their run, fall and jump links."""

    def __init__(
        self,
        grid: CollisionGrid,
        cells: List[Cell],
        jump_height: int,
        body_height: int,
        max_drops_after_jump: int = DEFAULT_MAX_DROPS_AFTER_JUMP,
    ):
        self.grid = grid
        self.cells = cells
        self.jump_height = jump_height
        self.body_height = body_height
        self.max_drops_after_jump = max_drops_after_jump

    @classmethod
    def build(
        cls,
        grid: CollisionGrid,
        jump_height: int,
        body_height: int,
        max_drops_after_jump: int = DEFAULT_MAX_DROPS_AFTER_JUMP,
    ) -> "NavigationGraph":
        """Classify platforms and run the three link passes."""
        cells = detect_platforms(grid)
        builder = LinkBuilder(grid, cells, body_height, max_drops_after_jump)
        builder.create_run_links()
        builder.create_fall_links()
        builder.create_jump_links(jump_height)

        graph = cls(grid, cells, jump_height, body_height, max_drops_after_jump)
        logger.debug(f"Built navigation graph: {graph.link_summary()}")
        return graph

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    def __len__(self) -> int:
        return len(self.cells)

    def index(self, x: int, z: int) -> int:
        return self.grid.index(x, z)

    def coords(self, index: int) -> Tuple[int, int]:
        return self.grid.coords(index)

    def in_bounds(self, x: int, z: int) -> bool:
        return self.grid.in_bounds(x, z)

    def cell(self, index: int) -> Optional[Cell]:
        if 0 <= index < len(self.cells):
            return self.cells[index]
        return None

    def cell_at(self, x: int, z: int) -> Optional[Cell]:
        if not self.in_bounds(x, z):
            return None
        return self.cells[self.index(x, z)]

    def is_navigable(self, index: int) -> bool:
        cell = self.cell(index)
        return cell is not None and cell.navigable

    def navigable_indices(self) -> List[int]:
        return [i for i, cell in enumerate(self.cells) if cell.navigable]

    @property
    def run_link_count(self) -> int:
        return sum(len(cell.run_links) for cell in self.cells)

    @property
    def fall_link_count(self) -> int:
        return sum(len(cell.fall_links) for cell in self.cells)

    @property
    def jump_link_count(self) -> int:
        return sum(len(cell.jump_links) for cell in self.cells)

    def link_summary(self) -> Dict[str, int]:
        return {
            "navigable": len(self.navigable_indices()),
            "run": self.run_link_count,
            "fall": self.fall_link_count,
            "jump": self.jump_link_count,
        }

    def to_networkx(self) -> nx.DiGraph:
        """Export the graph with the costs the path search charges.

        When several link kinds join the same pair of cells only the cheapest
        is kept as the edge.
        """
        # search imports this module
        from .search import EdgeType, fall_cost

        graph = nx.DiGraph()
        for i, cell in enumerate(self.cells):
            if cell.navigable:
                graph.add_node(i, x=cell.x, z=cell.z, nav_type=cell.nav_type)

        def add_edge(source, target, weight, edge_type):
            existing = graph.get_edge_data(source, target)
            if existing is None or weight < existing["weight"]:
                graph.add_edge(source, target, weight=weight, edge_type=edge_type)

        for i, cell in enumerate(self.cells):
            for target in cell.run_links:
                add_edge(i, target, 1.0, EdgeType.RUN)
            for target in cell.fall_links:
                add_edge(i, target, fall_cost(cell.z, self.cells[target].z), EdgeType.FALL)
            for jump in cell.jump_links:
                add_edge(i, jump.target, jump.cost, EdgeType.JUMP)
        return graph

    def describe(self) -> str:
        """ASCII view of the classification, top row first."""
        lines = []
        for z in range(self.height - 1, -1, -1):
            row = []
            for x in range(self.width):
                cell = self.cells[self.index(x, z)]
                if self.grid.is_solid(x, z):
                    row.append(SOLID_CHAR)
                else:
                    row.append(NAV_TYPE_CHARS[cell.nav_type])
            lines.append("".join(row))
        return "\n".join(lines)
