"""
Tile-based navigation for 2D side-scrolling agents.

Builds a navigation graph of run, fall and jump links from a collision grid
and searches paths over it.
"""

from .config import NavConfig
from .errors import ConfigError, GridError, NavigationError
from .grid import Cell, CollisionGrid, JumpEdge, NavType
from .navigation_graph import NavigationGraph
from .nav_system import NavSystem, grid_to_world, world_to_grid
from .search import EdgeType, PathSearch, SearchContext, SearchNode, SearchStatus

__all__ = [
    # Grid model
    "CollisionGrid",
    "Cell",
    "JumpEdge",
    "NavType",
    # Graph and search
    "NavigationGraph",
    "PathSearch",
    "SearchContext",
    "SearchNode",
    "SearchStatus",
    "EdgeType",
    # Façade
    "NavSystem",
    "NavConfig",
    "world_to_grid",
    "grid_to_world",
    # Errors
    "NavigationError",
    "GridError",
    "ConfigError",
]
