"""
Best-first path search over a NavigationGraph.

The search is A*-like: the open node with the lowest F = G + H is expanded
next, where G is the cost paid so far and H the straight-line grid distance
to the goal. Run, fall and jump links are expanded into one open set with
their own costs and intermediate waypoints.

Nodes live in an arena (SearchContext.nodes) and refer to their parent by
arena index, so reconstruction is a walk over indices.
"""

import logging
import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional, Set, Tuple

from .navigation_graph import NavigationGraph

logger = logging.getLogger(__name__)

RUN_COST = 1.0


class EdgeType(IntEnum):
    """Kind of link used to reach a search node."""

    START = 0  # Start node, reached by nothing
    RUN = 1
    FALL = 2
    JUMP = 3


class SearchStatus(IntEnum):
    SEARCHING = 0
    FOUND = 1
    NO_PATH = 2
    BUDGET_EXHAUSTED = 3


def fall_cost(from_z: int, to_z: int) -> float:
    """One column sideways plus the vertical drop."""
    if from_z > to_z:
        return math.sqrt(1.0 + (from_z - to_z) ** 2)
    return 1.0


@dataclass
class SearchNode:
    """Node in the path search, and one record of a returned path."""

    x: int
    z: int
    index: int
    g: float  # Cost from start
    h: float  # Heuristic cost to goal
    parent: Optional[int] = None  # Arena index of the parent node
    edge_type: EdgeType = EdgeType.START
    waypoints: Tuple[int, ...] = ()  # Cells traversed from the parent
    curve_hint: Optional[Tuple[int, int]] = None

    @property
    def f(self) -> float:
        return self.g + self.h


class SearchContext:
    """State of one path query. Cleared before the next query."""

    def __init__(self):
        self.clear()

    def clear(self):
        self.nodes: List[SearchNode] = []
        self.open_set: List[int] = []
        self.open_lookup: Dict[int, int] = {}  # grid index -> arena index
        self.visited: Set[int] = set()  # grid indices
        self.visited_order: List[int] = []  # arena indices, expansion order
        self.start: Optional[SearchNode] = None
        self.goal: Optional[SearchNode] = None
        self.path: List[SearchNode] = []  # goal first
        self.status = SearchStatus.SEARCHING
        self.steps = 0

    def add_node(self, node: SearchNode) -> int:
        self.nodes.append(node)
        return len(self.nodes) - 1


class PathSearch:
    """Path search over one NavigationGraph.

    Args:
        graph: Graph to search
        max_steps: Optional cap on expansions per run() call; None runs to
            completion
    """

    def __init__(self, graph: NavigationGraph, max_steps: Optional[int] = None):
        self.graph = graph
        self.max_steps = max_steps
        self.context = SearchContext()

    def heuristic(self, x: int, z: int) -> float:
        """Euclidean distance in cells from (x, z) to the goal."""
        goal = self.context.goal
        return math.sqrt((x - goal.x) ** 2 + (z - goal.z) ** 2)

    def set_start_and_goal(
        self, start_x: int, start_z: int, goal_x: int, goal_z: int
    ) -> bool:
        """Reset the context and seed the open set with the start node.

        Returns:
            False if either position lies outside the grid
        """
        self.context.clear()
        graph = self.graph
        if not graph.in_bounds(start_x, start_z) or not graph.in_bounds(goal_x, goal_z):
            logger.debug(
                f"Start ({start_x}, {start_z}) or goal ({goal_x}, {goal_z}) "
                f"outside {graph.width}x{graph.height} grid"
            )
            self.context.status = SearchStatus.NO_PATH
            return False

        self.context.goal = SearchNode(
            x=goal_x, z=goal_z, index=graph.index(goal_x, goal_z), g=0.0, h=0.0
        )
        start = SearchNode(
            x=start_x,
            z=start_z,
            index=graph.index(start_x, start_z),
            g=0.0,
            h=0.0,
        )
        start.h = self.heuristic(start_x, start_z)
        self.context.start = start
        start_id = self.context.add_node(start)
        self.context.open_set.append(start_id)
        self.context.open_lookup[start.index] = start_id
        return True

    def run(self) -> SearchStatus:
        """Step until the goal is reached, the open set empties or the budget ends."""
        steps = 0
        while self.context.status == SearchStatus.SEARCHING:
            if self.max_steps is not None and steps >= self.max_steps:
                logger.debug(f"Search budget of {self.max_steps} steps exhausted")
                self.context.status = SearchStatus.BUDGET_EXHAUSTED
                break
            self.step()
            steps += 1
        return self.context.status

    def resume(self) -> SearchStatus:
        """Continue a search that stopped on its step budget."""
        if self.context.status != SearchStatus.BUDGET_EXHAUSTED:
            return self.context.status
        self.context.status = SearchStatus.SEARCHING
        return self.run()

    def step(self) -> SearchStatus:
        """Expand the best open node."""
        ctx = self.context
        if ctx.status != SearchStatus.SEARCHING:
            return ctx.status
        if ctx.goal is None:
            ctx.status = SearchStatus.NO_PATH
            return ctx.status
        if not ctx.open_set:
            logger.warning(
                f"No path to goal ({ctx.goal.x}, {ctx.goal.z}) found "
                f"after {ctx.steps} steps"
            )
            ctx.status = SearchStatus.NO_PATH
            return ctx.status

        ctx.steps += 1
        current_id = self._next_node()
        current = ctx.nodes[current_id]

        if current.index == ctx.goal.index:
            ctx.path = self._reconstruct(current_id)
            ctx.status = SearchStatus.FOUND
            logger.debug(
                f"Goal reached in {ctx.steps} steps, cost {current.g:.3f}, "
                f"{len(ctx.path)} nodes"
            )
            return ctx.status

        graph = self.graph
        width = graph.width
        cell = graph.cells[current.index]

        for target in cell.run_links:
            target_cell = graph.cells[target]
            step = 1 if target_cell.x > cell.x else -1
            self._add_to_open(
                target_cell.x,
                target_cell.z,
                current.g + RUN_COST,
                current_id,
                (current.index, current.index + step),
                EdgeType.RUN,
            )

        for target in cell.fall_links:
            target_cell = graph.cells[target]
            step = 0
            if target_cell.x > cell.x:
                step = 1
            elif target_cell.x < cell.x:
                step = -1
            waypoints = (
                current.index,
                current.index + step,
                target_cell.z * width + cell.x + step,
            )
            self._add_to_open(
                target_cell.x,
                target_cell.z,
                current.g + fall_cost(cell.z, target_cell.z),
                current_id,
                waypoints,
                EdgeType.FALL,
            )

        for jump in cell.jump_links:
            target_cell = graph.cells[jump.target]
            self._add_to_open(
                target_cell.x,
                target_cell.z,
                current.g + jump.cost,
                current_id,
                jump.path,
                EdgeType.JUMP,
                jump.curve_hint,
            )

        return ctx.status

    def path_nodes(self, forward: bool = False) -> List[SearchNode]:
        """Reconstructed path, goal first unless `forward` is set."""
        if forward:
            return list(reversed(self.context.path))
        return list(self.context.path)

    def _next_node(self) -> int:
        # Lowest F wins, earliest entry on ties
        ctx = self.context
        best = 0
        best_f = ctx.nodes[ctx.open_set[0]].f
        for position in range(1, len(ctx.open_set)):
            f = ctx.nodes[ctx.open_set[position]].f
            if f < best_f:
                best_f = f
                best = position

        node_id = ctx.open_set.pop(best)
        del ctx.open_lookup[ctx.nodes[node_id].index]
        ctx.visited.add(ctx.nodes[node_id].index)
        ctx.visited_order.append(node_id)
        return node_id

    def _add_to_open(
        self,
        x: int,
        z: int,
        g: float,
        parent: int,
        waypoints: Tuple[int, ...],
        edge_type: EdgeType,
        curve_hint: Optional[Tuple[int, int]] = None,
    ):
        ctx = self.context
        index = self.graph.index(x, z)
        if index in ctx.visited:
            return

        existing_id = ctx.open_lookup.get(index)
        if existing_id is not None:
            existing = ctx.nodes[existing_id]
            # H only depends on the cell, so comparing G + existing H is comparing F
            if g + existing.h < existing.f:
                existing.g = g
                existing.parent = parent
                existing.waypoints = tuple(waypoints)
                existing.edge_type = edge_type
                existing.curve_hint = curve_hint
            return

        node = SearchNode(
            x=x,
            z=z,
            index=index,
            g=g,
            h=self.heuristic(x, z),
            parent=parent,
            edge_type=edge_type,
            waypoints=tuple(waypoints),
            curve_hint=curve_hint,
        )
        node_id = ctx.add_node(node)
        ctx.open_set.append(node_id)
        ctx.open_lookup[index] = node_id

    def _reconstruct(self, node_id: int) -> List[SearchNode]:
        path = []
        current: Optional[int] = node_id
        while current is not None:
            node = self.context.nodes[current]
            path.append(node)
            current = node.parent
        return path
