"""
Command line tool to build a navigation graph from a text map and query a path.

Map files hold one row per line, top row first. '#' or '1' is solid, '.'
or '0' is open; spaces are ignored. Start and goal are grid cells.
"""

import argparse
import logging
import sys

from .config import NavConfig
from .errors import NavigationError
from .grid import CollisionGrid
from .nav_system import NavSystem
from .search import EdgeType


def load_map(path: str) -> CollisionGrid:
    with open(path) as f:
        rows = [line.strip().replace(" ", "") for line in f]
    return CollisionGrid.from_rows([row for row in rows if row])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Tile navigation path finder")
    parser.add_argument("map", help="Text map file")
    parser.add_argument("--jump-height", type=int, default=3,
                        help="Maximum jump height in rows")
    parser.add_argument("--body-height", type=int, default=1,
                        help="Agent body height in rows")
    parser.add_argument("--cell-size", type=int, default=32,
                        help="World units per grid cell")
    parser.add_argument("--max-drops", type=int, default=10,
                        help="Rows probed below the take-off row after a jump")
    parser.add_argument("--max-steps", type=int, default=None,
                        help="Search step budget (default: unbounded)")
    parser.add_argument("--start", type=int, nargs=2, metavar=("X", "Z"),
                        help="Start cell (row 0 is the bottom row)")
    parser.add_argument("--goal", type=int, nargs=2, metavar=("X", "Z"),
                        help="Goal cell (row 0 is the bottom row)")
    parser.add_argument("--show", action="store_true",
                        help="Print the platform classification")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")
    return parser


def main(argv=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        grid = load_map(args.map)
    except (OSError, NavigationError) as e:
        print(f"Could not load map {args.map}: {e}", file=sys.stderr)
        return 2

    nav = NavSystem(NavConfig.from_args(args))
    if not nav.build_from_grid(grid):
        print("Navigation build failed", file=sys.stderr)
        return 2

    summary = nav.graph.link_summary()
    print(
        f"{grid.width}x{grid.height} grid: {summary['navigable']} navigable cells, "
        f"{summary['run']} run, {summary['fall']} fall, {summary['jump']} jump links"
    )
    if args.show:
        print(nav.graph.describe())

    if args.start is None or args.goal is None:
        return 0

    # Cell coordinates to the world positions find_path expects
    cell_size = nav.config.cell_size
    start = (args.start[0] * cell_size, (args.start[1] + 1) * cell_size)
    goal = (args.goal[0] * cell_size, args.goal[1] * cell_size)
    anchor = nav.find_path(start, goal)
    if anchor is None:
        print("No path found")
        return 1

    path = nav.get_path(forward=True)
    print(f"Path to {anchor} with cost {path[-1].g:.3f}:")
    for node in path:
        line = f"  ({node.x}, {node.z}) {node.edge_type.name:<5} g={node.g:.3f}"
        if node.edge_type == EdgeType.JUMP and node.curve_hint is not None:
            line += f" apex={nav.graph.coords(node.curve_hint[0])[1]}"
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
