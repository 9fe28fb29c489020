import pytest

from tilenav import CollisionGrid, NavigationGraph

from maps import EXAMPLE_MAP, FLAT_MAP, LONE_MAP, STEP_MAP


@pytest.fixture
def example_grid():
    return CollisionGrid.from_rows(EXAMPLE_MAP)


@pytest.fixture
def example_graph(example_grid):
    return NavigationGraph.build(example_grid, jump_height=3, body_height=1)


@pytest.fixture
def flat_grid():
    return CollisionGrid.from_rows(FLAT_MAP)


@pytest.fixture
def step_grid():
    return CollisionGrid.from_rows(STEP_MAP)


@pytest.fixture
def lone_grid():
    return CollisionGrid.from_rows(LONE_MAP)
