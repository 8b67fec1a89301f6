"""
Tests for the four grid algorithms: shared contract, path shape,
branch traces, and the per-algorithm exploration order.
"""

import random

import pytest

from pathtrace.core.astar import AStarAlgo, manhattan
from pathtrace.core.bellman_ford import BellmanFordAlgo
from pathtrace.core.dijkstra import DijkstraAlgo
from pathtrace.core.floyd_warshall import FloydWarshallAlgo
from pathtrace.core.registry import GRID_ALGORITHMS, make_grid_algo
from pathtrace.core.types import Grid

GRID_ALGOS = [DijkstraAlgo, AStarAlgo, BellmanFordAlgo, FloydWarshallAlgo]


def assert_valid_route(grid, route, start, end):
    assert route[0] == start
    assert route[-1] == end
    for cell in route:
        assert grid.is_open(cell)
    for a, b in zip(route, route[1:]):
        assert manhattan(a, b) == 1


class TestSharedContract:
    """Properties every grid algorithm must satisfy."""

    @pytest.mark.parametrize("start,end", [
        ((0, 0), (4, 4)),
        ((4, 0), (0, 4)),
        ((2, 2), (0, 1)),
        ((3, 1), (3, 4)),
    ])
    def test_open_grid_length_is_manhattan(self, grid_algo, start, end):
        """With no walls the path has Manhattan distance + 1 cells."""
        grid = Grid(5, 5, start=start, end=end)
        res = grid_algo.compute(grid)
        assert len(res.path) == manhattan(start, end) + 1
        assert_valid_route(grid, res.path, start, end)

    def test_five_by_five_example(self, grid_algo, open_grid):
        """Corner to corner on 5x5 is 9 cells, 8 edges."""
        res = grid_algo.compute(open_grid)
        assert len(res.path) == 9
        assert res.metrics["total_cost"] == 8
        assert_valid_route(open_grid, res.path, (0, 0), (4, 4))

    def test_path_goes_around_walls(self, grid_algo, walled_grid):
        res = grid_algo.compute(walled_grid)
        assert len(res.path) == 17
        assert (6, 3) in res.path
        assert_valid_route(walled_grid, res.path, walled_grid.start, walled_grid.end)

    def test_start_equals_end(self, grid_algo):
        """Single-cell path and no branches."""
        grid = Grid(4, 4, start=(1, 2), end=(1, 2))
        res = grid_algo.compute(grid)
        assert res.path == [(1, 2)]
        assert res.branches == []

    @pytest.mark.parametrize("start,end", [(None, (1, 1)), ((1, 1), None), (None, None)])
    def test_unset_endpoints_give_empty_result(self, grid_algo, start, end):
        res = grid_algo.compute(Grid(3, 3, start=start, end=end))
        assert res.path == []
        assert res.branches == []
        assert res.metrics["explored"] == 0

    def test_disconnected_gives_empty_result(self, grid_algo, sealed_grid):
        res = grid_algo.compute(sealed_grid)
        assert res.path == []
        assert res.branches == []
        assert not res.found

    def test_walled_start_is_unreachable(self, grid_algo):
        grid = Grid(3, 3, walls={(0, 0)}, start=(0, 0), end=(2, 2))
        assert grid_algo.compute(grid).path == []

    def test_out_of_bounds_end_is_unreachable(self, grid_algo):
        grid = Grid(3, 3, start=(0, 0), end=(5, 5))
        assert grid_algo.compute(grid).path == []

    def test_deterministic(self, grid_algo, walled_grid):
        """Two runs on an unchanged grid agree exactly."""
        a = grid_algo.compute(walled_grid)
        b = grid_algo.compute(walled_grid)
        assert a.path == b.path
        assert a.branches == b.branches

    def test_does_not_mutate_grid(self, grid_algo, walled_grid):
        walls = set(walled_grid.walls)
        rev = walled_grid.revision
        grid_algo.compute(walled_grid)
        assert walled_grid.walls == walls
        assert walled_grid.revision == rev

    def test_without_branches_keeps_path(self, grid_algo, walled_grid):
        full = grid_algo.compute(walled_grid)
        bare = grid_algo.compute(walled_grid, with_branches=False)
        assert bare.path == full.path
        assert bare.branches == []

    def test_branches_start_at_start_and_leave_path(self, grid_algo, walled_grid):
        res = grid_algo.compute(walled_grid)
        on_path = set(res.path)
        assert res.branches
        assert res.metrics["branch_count"] == len(res.branches)
        for branch in res.branches:
            assert len(branch) <= walled_grid.size
            assert branch[-1] not in on_path
            assert_valid_route(walled_grid, branch, walled_grid.start, branch[-1])


class TestAgreement:
    """All four algorithms find equally short routes."""

    @pytest.mark.parametrize("seed", range(8))
    def test_random_mazes_same_length(self, seed):
        grid = Grid(8, 8, start=(0, 0), end=(7, 7))
        grid.random_fill(0.3, random.Random(seed))
        lengths = {cls.__name__: len(cls().compute(grid).path) for cls in GRID_ALGOS}
        assert len(set(lengths.values())) == 1, lengths


class TestExplorationOrder:
    """Hand-traced corridors pin down each algorithm's branch log."""

    @pytest.fixture
    def corridor(self):
        # single row, start in the middle, end on the right
        return Grid(1, 5, start=(0, 2), end=(0, 4))

    def test_dijkstra_branches_from_popped_cells(self, corridor):
        res = DijkstraAlgo().compute(corridor)
        assert res.path == [(0, 2), (0, 3), (0, 4)]
        # pops: (0,2) (0,3) (0,1) (0,4); only (0,1) is off the path
        assert res.branches == [[(0, 2), (0, 1)]]
        assert res.metrics["explored"] == 4

    def test_astar_does_not_pop_away_from_goal(self, corridor):
        res = AStarAlgo().compute(corridor)
        assert res.path == [(0, 2), (0, 3), (0, 4)]
        assert res.branches == []
        assert res.metrics["explored"] == 3

    def test_bellman_ford_branches_in_first_reached_order(self, corridor):
        res = BellmanFordAlgo().compute(corridor)
        assert res.path == [(0, 2), (0, 3), (0, 4)]
        # reached order: (0,3) (0,1) (0,4) in sweep 1, (0,0) in sweep 2
        assert res.branches == [[(0, 2), (0, 1)], [(0, 2), (0, 1), (0, 0)]]
        assert res.metrics["sweeps"] == 3

    def test_floyd_warshall_branches_from_improved_destinations(self, corridor):
        res = FloydWarshallAlgo().compute(corridor)
        assert res.path == [(0, 2), (0, 3), (0, 4)]
        # (0,1) and (0,3) start adjacent to start and are never improved
        assert res.branches == [[(0, 2), (0, 1), (0, 0)]]
        assert res.metrics["explored"] == 2

    def test_astar_explores_no_more_than_dijkstra(self, walled_grid):
        d = DijkstraAlgo().compute(walled_grid)
        a = AStarAlgo().compute(walled_grid)
        assert a.metrics["explored"] <= d.metrics["explored"]


def _reference_floyd_warshall(grid):
    """Plain triple loop with in-place updates."""
    V = grid.size
    INF = float("inf")
    dist = [[INF] * V for _ in range(V)]
    nxt = [[None] * V for _ in range(V)]
    for c in grid.cells():
        v = grid.index(c)
        dist[v][v] = 0
        nxt[v][v] = v
        if c in grid.walls:
            continue
        for n in grid.neighbors4(c):
            u = grid.index(n)
            dist[v][u] = 1
            nxt[v][u] = u
    s = grid.index(grid.start)
    improved = []
    for k in range(V):
        for i in range(V):
            if dist[i][k] == INF:
                continue
            for j in range(V):
                alt = dist[i][k] + dist[k][j]
                if alt < dist[i][j]:
                    dist[i][j] = alt
                    nxt[i][j] = nxt[i][k]
                    if i == s and j not in improved:
                        improved.append(j)
    return improved, nxt


class TestFloydWarshallMatchesScalarLoop:

    def test_same_path_and_branches(self):
        grid = Grid(3, 4, walls={(1, 1), (1, 2)}, start=(2, 0), end=(0, 3))
        improved, nxt = _reference_floyd_warshall(grid)
        s, t = grid.index(grid.start), grid.index(grid.end)

        def walk(dest):
            out, cur = [s], s
            while cur != dest:
                cur = nxt[cur][dest]
                out.append(cur)
            return [grid.cell_at(v) for v in out]

        path = walk(t)
        expected_branches = [walk(j) for j in improved if grid.cell_at(j) not in path]

        res = FloydWarshallAlgo().compute(grid)
        assert res.path == path
        assert res.branches == expected_branches


class TestRegistry:

    @pytest.mark.parametrize("key,cls", [
        ("dijkstra", DijkstraAlgo),
        ("A*", AStarAlgo),
        ("Bellman-Ford", BellmanFordAlgo),
        ("floyd_warshall", FloydWarshallAlgo),
    ])
    def test_make_grid_algo(self, key, cls):
        assert isinstance(make_grid_algo(key), cls)

    def test_unknown_name_raises(self):
        with pytest.raises(KeyError):
            make_grid_algo("greedy")

    def test_all_registered(self):
        assert set(GRID_ALGORITHMS) == {"dijkstra", "astar", "bellman_ford", "floyd_warshall"}
