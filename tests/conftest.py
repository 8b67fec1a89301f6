"""
Pytest configuration and shared fixtures.

This file is automatically loaded by pytest and provides
fixtures available to all test files.
"""

from pathlib import Path

import pytest

from pathtrace.core.astar import AStarAlgo
from pathtrace.core.bellman_ford import BellmanFordAlgo
from pathtrace.core.dijkstra import DijkstraAlgo
from pathtrace.core.floyd_warshall import FloydWarshallAlgo
from pathtrace.core.node_graph import NodeGraph
from pathtrace.core.playback import ManualClock
from pathtrace.core.types import Grid

GRID_ALGOS = [DijkstraAlgo, AStarAlgo, BellmanFordAlgo, FloydWarshallAlgo]


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(params=GRID_ALGOS, ids=lambda cls: cls.__name__)
def grid_algo(request):
    """Each grid algorithm in turn."""
    return request.param()


@pytest.fixture
def open_grid() -> Grid:
    """5x5, no walls, corner to corner."""
    return Grid(5, 5, start=(0, 0), end=(4, 4))


@pytest.fixture
def walled_grid() -> Grid:
    """
    7x7 with a wall column open only at the bottom.

        S . . # . . .
        . . . # . . .
        . . . # . . E
        . . . # . . .
        . . . # . . .
        . . . # . . .
        . . . . . . .
    """
    walls = {(r, 3) for r in range(6)}
    return Grid(7, 7, walls=walls, start=(0, 0), end=(2, 6))


@pytest.fixture
def sealed_grid() -> Grid:
    """End boxed in by walls."""
    walls = {(1, 3), (3, 3), (2, 2), (2, 4)}
    return Grid(5, 5, walls=walls, start=(0, 0), end=(2, 3))


@pytest.fixture
def triangle_graph() -> NodeGraph:
    """A->B (5), A->C (1), C->B (1); start A, goal B."""
    g = NodeGraph()
    for x in (0, 100, 200):
        g.add_node(x, 0)
    g.add_edge("A", "B", 5)
    g.add_edge("A", "C", 1)
    g.add_edge("C", "B", 1)
    g.set_marker("start", "A")
    g.set_marker("goal", "B")
    return g


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()
