"""
Tests for run, fall and jump link construction.
"""

import math

import pytest

from tilenav import CollisionGrid, NavigationGraph
from tilenav.grid import NavType
from tilenav.link_builder import LinkBuilder
from tilenav.platform_detector import detect_platforms


def build_links(grid, jump_height=0, body_height=1, max_drops=10):
    cells = detect_platforms(grid)
    builder = LinkBuilder(grid, cells, body_height, max_drops)
    builder.create_run_links()
    builder.create_fall_links()
    builder.create_jump_links(jump_height)
    return cells


class TestRunLinks:
    def test_flat_platform_run_links(self, flat_grid):
        cells = build_links(flat_grid)
        index = flat_grid.index

        assert cells[index(0, 1)].run_links == [index(1, 1)]
        assert cells[index(2, 1)].run_links == [index(1, 1), index(3, 1)]
        assert cells[index(4, 1)].run_links == [index(3, 1)]
        # Four bidirectional links
        assert sum(len(c.run_links) for c in cells) == 8

    def test_no_run_link_across_rows(self):
        grid = CollisionGrid.from_rows(["...", "#..", "###"])
        cells = build_links(grid)

        # (2, 1) ends row 1 and (0, 2) starts row 2; their indices are adjacent
        assert cells[grid.index(2, 1)].navigable
        assert cells[grid.index(0, 2)].navigable
        assert grid.index(0, 2) not in cells[grid.index(2, 1)].run_links
        assert grid.index(2, 1) not in cells[grid.index(0, 2)].run_links

    def test_run_links_are_symmetric_and_adjacent(self, example_graph):
        for i, cell in enumerate(example_graph.cells):
            for target in cell.run_links:
                other = example_graph.cells[target]
                assert i in other.run_links
                assert cell.navigable and other.navigable
                assert other.z == cell.z
                assert abs(other.x - cell.x) == 1


class TestFallLinks:
    def test_lone_cell_falls_only_on_open_side(self, lone_grid):
        cells = build_links(lone_grid)
        lone = cells[lone_grid.index(1, 3)]

        assert lone.nav_type == NavType.LONE
        assert lone.fall_links == [lone_grid.index(2, 2)]
        assert sum(len(c.fall_links) for c in cells) == 1

    def test_flat_platform_has_no_fall_links(self, flat_grid):
        cells = build_links(flat_grid)

        assert sum(len(c.fall_links) for c in cells) == 0

    def test_fall_into_bottomless_pit_creates_no_link(self, step_grid):
        cells = build_links(step_grid)

        # The pit at column 2 runs down to row 0, which is never standable
        assert cells[step_grid.index(1, 1)].fall_links == []
        assert cells[step_grid.index(3, 3)].fall_links == []

    def test_fall_from_both_edges(self):
        grid = CollisionGrid.from_rows(
            [
                ".....",
                ".###.",
                ".....",
                "#####",
            ]
        )
        cells = build_links(grid)

        assert cells[grid.index(1, 3)].nav_type == NavType.LEFT_EDGE
        assert cells[grid.index(1, 3)].fall_links == [grid.index(0, 1)]
        assert cells[grid.index(3, 3)].fall_links == [grid.index(4, 1)]

    def test_fall_links_land_on_first_cell_below(self, example_graph):
        graph = example_graph
        for i, cell in enumerate(graph.cells):
            for target in cell.fall_links:
                other = graph.cells[target]
                assert other.navigable
                assert abs(other.x - cell.x) == 1
                assert other.z < cell.z
                assert cell.nav_type in (
                    NavType.LEFT_EDGE,
                    NavType.RIGHT_EDGE,
                    NavType.LONE,
                )
                for z in range(other.z + 1, cell.z):
                    assert not graph.cell_at(other.x, z).navigable

    def test_fall_links_are_one_directional(self, lone_grid):
        cells = build_links(lone_grid)

        assert cells[lone_grid.index(2, 2)].fall_links == []


class TestJumpLinks:
    def test_step_up_jump(self, step_grid):
        cells = build_links(step_grid, jump_height=2)
        index = step_grid.index
        base = cells[index(1, 1)]

        assert len(base.jump_links) == 1
        jump = base.jump_links[0]
        assert jump.target == index(3, 3)
        assert jump.horizontal == 2
        assert jump.height == 2
        assert jump.cost == pytest.approx(math.sqrt(8))
        assert jump.path == (index(1, 1), index(2, 2), index(3, 3))
        # Apex row 3, above the take-off and the landing columns
        assert jump.curve_hint == (index(1, 3), index(3, 3))

    def test_higher_jump_reaches_further(self, step_grid):
        cells = build_links(step_grid, jump_height=3)
        index = step_grid.index
        base = cells[index(1, 1)]

        assert base.jump_targets == [index(3, 3), index(4, 3)]
        far = base.jump_links[1]
        assert far.horizontal == 3
        assert far.height == 3
        assert far.cost == pytest.approx(math.sqrt(18))

    def test_jump_too_low_for_step(self, step_grid):
        cells = build_links(step_grid, jump_height=1)

        assert cells[step_grid.index(1, 1)].jump_links == []

    def test_jump_followed_by_drop(self, step_grid):
        cells = build_links(step_grid, jump_height=1)
        index = step_grid.index
        base = cells[index(3, 3)]

        drop = next(j for j in base.jump_links if j.target == index(1, 1))
        # One row up, two rows of drop below the take-off row
        assert drop.height == 3
        assert drop.horizontal == 2
        assert drop.cost == pytest.approx(math.sqrt(13))
        assert drop.path == (
            index(3, 3),
            index(2, 4),
            index(1, 3),
            index(1, 2),
            index(1, 1),
        )
        assert drop.curve_hint == (index(3, 4), index(1, 4))

    def test_drop_limit(self, step_grid):
        cells = build_links(step_grid, jump_height=1, max_drops=1)

        assert step_grid.index(1, 1) not in cells[step_grid.index(3, 3)].jump_targets

    def test_jump_along_own_platform(self, step_grid):
        cells = build_links(step_grid, jump_height=1)
        index = step_grid.index

        hop = next(
            j for j in cells[index(3, 3)].jump_links if j.target == index(5, 3)
        )
        assert hop.cost == pytest.approx(math.sqrt(5))
        assert hop.path == (index(3, 3), index(4, 4), index(5, 3))

    def test_zero_jump_height_has_no_jumps(self, example_grid):
        cells = build_links(example_grid, jump_height=0)

        assert sum(len(c.jump_links) for c in cells) == 0

    def test_low_ceiling_blocks_jump(self):
        grid = CollisionGrid.from_rows(
            [
                "######",
                "......",
                "...###",
                "...###",
                "##.###",
            ]
        )
        cells = build_links(grid, jump_height=2, body_height=1)

        # Landing on (3, 3) needs rows 3 and 4 clear above it
        assert grid.index(3, 3) not in cells[grid.index(1, 1)].jump_targets

    def test_jump_links_are_unique_per_target(self, example_graph):
        for cell in example_graph.cells:
            targets = cell.jump_targets
            assert len(targets) == len(set(targets))

    def test_jump_cost_matches_offsets(self, example_graph):
        for cell in example_graph.cells:
            for jump in cell.jump_links:
                assert jump.cost == pytest.approx(
                    math.sqrt(jump.horizontal**2 + jump.height**2)
                )

    def test_jump_paths_stay_in_open_cells(self, example_graph):
        graph = example_graph
        for i, cell in enumerate(graph.cells):
            for jump in cell.jump_links:
                assert jump.path[0] == i
                assert jump.path[-1] == jump.target
                assert graph.is_navigable(jump.target)
                for index in jump.path:
                    x, z = graph.coords(index)
                    assert graph.grid.is_open(x, z)

    def test_jump_curve_hint_sits_on_apex_row(self, example_graph):
        graph = example_graph
        width = graph.width
        for i, cell in enumerate(graph.cells):
            for jump in cell.jump_links:
                apex = max(index // width for index in jump.path)
                assert jump.curve_hint == (
                    apex * width + cell.x,
                    apex * width + graph.cells[jump.target].x,
                )

    def test_add_jump_link_skips_known_target(self, step_grid):
        cells = detect_platforms(step_grid)
        builder = LinkBuilder(step_grid, cells, body_height=1)
        base = step_grid.index(1, 1)
        target = step_grid.index(3, 3)

        assert builder.add_jump_link(target, base, 2, 2, [base, target])
        assert not builder.add_jump_link(target, base, 3, 1, [base, target])
        assert len(cells[base].jump_links) == 1

    def test_empty_path_leaves_curve_hint_unset(self, step_grid):
        cells = detect_platforms(step_grid)
        builder = LinkBuilder(step_grid, cells, body_height=1)
        builder.add_jump_link(step_grid.index(3, 3), step_grid.index(1, 1), 2, 2, [])

        assert cells[step_grid.index(1, 1)].jump_links[0].curve_hint is None

    def test_out_of_range_base_is_ignored(self, step_grid):
        cells = detect_platforms(step_grid)
        builder = LinkBuilder(step_grid, cells, body_height=1)
        builder.calculate_jump_at_point(2, len(cells) + 5)

        assert all(c.jump_links == [] for c in cells)

    @pytest.mark.parametrize("jump_height", [1, 2, 3])
    def test_direct_arc_walks_match_full_pass(self, step_grid, jump_height):
        expected = build_links(step_grid, jump_height=jump_height)
        cells = detect_platforms(step_grid)
        builder = LinkBuilder(step_grid, cells, body_height=1)
        for height in range(1, jump_height + 1):
            for base, cell in enumerate(cells):
                if cell.navigable:
                    builder.calculate_jump_at_point(height, base)

        # Targets reached from one base stay reachable from the others
        assert [c.jump_targets for c in cells] == [c.jump_targets for c in expected]


class TestDeterminism:
    def test_rebuild_gives_identical_graph(self, example_grid):
        first = NavigationGraph.build(example_grid, jump_height=3, body_height=1)
        second = NavigationGraph.build(example_grid, jump_height=3, body_height=1)

        assert first.cells == second.cells
