"""
Path query façade for a side-scrolling agent.

Each agent owns one NavSystem: the navigation graph depends on the agent's
jump height and body height, so graphs are never shared between agents.
The host world supplies the collision buffer and world-space positions and
gets back a world-space anchor for the goal plus the waypoint list.

World to grid mapping (cell_size defaults to 32 units):

    grid_x = floor(world_x / cell_size)
    grid_z = floor(world_z / cell_size)

Start positions are measured one row above the cell the agent stands in, so
they get a row offset of -1.
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple

from .config import NavConfig
from .errors import NavigationError
from .grid import CollisionGrid
from .navigation_graph import NavigationGraph
from .search import PathSearch, SearchNode, SearchStatus

logger = logging.getLogger(__name__)

START_ROW_OFFSET = -1


def world_to_grid(
    position: Sequence[float], cell_size: int, row_offset: int = 0
) -> Tuple[int, int]:
    """Convert a world (x, z) position to grid coordinates."""
    x = int(math.floor(position[0] / cell_size))
    z = int(math.floor(position[1] / cell_size)) + row_offset
    return x, z


def grid_to_world(x: int, z: int, cell_size: int) -> Tuple[float, float]:
    """World-space centre of grid cell (x, z)."""
    return x * cell_size + cell_size / 2, z * cell_size + cell_size / 2


class NavSystem:
    """Builds the navigation graph for one agent and answers path queries."""

    def __init__(self, config: Optional[NavConfig] = None):
        self.config = config or NavConfig()
        self.graph: Optional[NavigationGraph] = None
        self.search: Optional[PathSearch] = None

    def build_navigation(
        self,
        jump_height: int,
        pawn_height: int,
        world_width: int,
        world_height: int,
        collision_map,
    ) -> bool:
        """Rebuild the navigation graph from a flat collision buffer.

        Args:
            jump_height: Maximum jump height in rows
            pawn_height: Agent body height in rows, used for headroom checks
            world_width: Grid width in cells
            world_height: Grid height in cells
            collision_map: Row-major buffer, bottom row first, 0 open / 1 solid

        Returns:
            True if a graph was built; False leaves the system without a graph
        """
        self.delete_all()
        config = NavConfig(
            jump_height=jump_height,
            body_height=pawn_height,
            cell_size=self.config.cell_size,
            max_drops_after_jump=self.config.max_drops_after_jump,
            anchor_height=self.config.anchor_height,
            max_search_steps=self.config.max_search_steps,
        )
        try:
            config.validate()
            grid = CollisionGrid.from_buffer(collision_map, world_width, world_height)
        except NavigationError as e:
            logger.error(f"Navigation build rejected: {e}")
            return False

        self.config = config
        return self.build_from_grid(grid)

    def build_from_grid(self, grid: CollisionGrid) -> bool:
        """Rebuild the navigation graph using the current config."""
        self.delete_all()
        try:
            self.config.validate()
        except NavigationError as e:
            logger.error(f"Navigation build rejected: {e}")
            return False

        self.graph = NavigationGraph.build(
            grid,
            self.config.jump_height,
            self.config.body_height,
            self.config.max_drops_after_jump,
        )
        self.search = PathSearch(self.graph, self.config.max_search_steps)
        logger.info(
            f"Navigation built for {grid.width}x{grid.height} grid "
            f"(jump {self.config.jump_height}, body {self.config.body_height}): "
            f"{self.graph.link_summary()}"
        )
        return True

    def find_path(
        self, start: Sequence[float], goal: Sequence[float]
    ) -> Optional[Tuple[float, float, float]]:
        """Search a path between two world positions.

        Returns:
            World-space anchor (x, height, z) of the resolved goal, or None
            when the positions cannot be resolved or no path exists
        """
        self.delete_path()
        if self.graph is None or self.search is None:
            logger.warning("find_path called before build_navigation")
            return None

        if not all(math.isfinite(v) for v in (*start[:2], *goal[:2])):
            logger.debug(f"Non-finite query position: start {start}, goal {goal}")
            return None

        graph = self.graph
        cell_size = self.config.cell_size
        start_x, start_z = world_to_grid(start, cell_size, START_ROW_OFFSET)
        goal_x, goal_z = world_to_grid(goal, cell_size)

        if not graph.in_bounds(start_x, start_z) or not graph.in_bounds(goal_x, goal_z):
            logger.debug(
                f"Query outside grid: start ({start_x}, {start_z}), "
                f"goal ({goal_x}, {goal_z})"
            )
            return None

        # Snap a start inside the floor to the standable cell right above it
        if not graph.is_navigable(graph.index(start_x, start_z)):
            if graph.in_bounds(start_x, start_z + 1) and graph.is_navigable(
                graph.index(start_x, start_z + 1)
            ):
                start_z += 1

        if not graph.is_navigable(graph.index(goal_x, goal_z)):
            if graph.in_bounds(goal_x, goal_z + 1) and graph.is_navigable(
                graph.index(goal_x, goal_z + 1)
            ):
                goal_z += 1
            else:
                for z in range(goal_z - 1, 0, -1):
                    if graph.is_navigable(graph.index(goal_x, z)):
                        goal_z = z
                        break

        if graph.grid.is_solid(start_x, start_z) or graph.grid.is_solid(goal_x, goal_z):
            logger.debug(
                f"Start ({start_x}, {start_z}) or goal ({goal_x}, {goal_z}) is solid"
            )
            return None

        self.search.set_start_and_goal(start_x, start_z, goal_x, goal_z)
        return self._finish(self.search.run())

    def continue_path(self) -> Optional[Tuple[float, float, float]]:
        """Resume a query that ran out of its step budget."""
        if self.search is None:
            return None
        return self._finish(self.search.resume())

    def get_path(self, forward: bool = False) -> List[SearchNode]:
        """Nodes of the last path found, goal first unless `forward` is set."""
        if self.search is None:
            return []
        return self.search.path_nodes(forward)

    def waypoint_positions(self) -> List[Tuple[float, float]]:
        """World-space centres of every cell along the last path, in travel order."""
        if self.graph is None:
            return []
        indices: List[int] = []
        for node in self.get_path(forward=True):
            for index in node.waypoints + (node.index,):
                if not indices or indices[-1] != index:
                    indices.append(index)
        return [
            grid_to_world(*self.graph.coords(index), self.config.cell_size)
            for index in indices
        ]

    def delete_all(self):
        self.delete_nav()
        self.delete_path()

    def delete_nav(self):
        self.graph = None
        self.search = None

    def delete_path(self):
        if self.search is not None:
            self.search.context.clear()

    def _finish(self, status: SearchStatus) -> Optional[Tuple[float, float, float]]:
        if status != SearchStatus.FOUND:
            return None
        goal = self.search.context.goal
        cell_size = self.config.cell_size
        return (
            goal.x * cell_size + cell_size / 2,
            self.config.anchor_height,
            float((goal.z + 1) * cell_size),
        )
