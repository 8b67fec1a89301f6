"""Tests for the bounded walks and the tagged exploration log."""

from pathtrace.core.bellman_ford import grid_edges, has_negative_cycle
from pathtrace.core.trace import (TraceLog, POPPED, REACHED, walk_back, walk_forward,
                                  collect_branches)
from pathtrace.core.types import Grid


class TestTraceLog:

    def test_first_seen_keeps_first_occurrence_order(self):
        log = TraceLog()
        for kind, item in [(REACHED, "b"), (POPPED, "a"), (REACHED, "c"),
                           (REACHED, "b"), (POPPED, "b")]:
            log.record(kind, item)
        assert log.first_seen(REACHED) == ["b", "c"]
        assert log.first_seen(POPPED) == ["a", "b"]
        assert log.count(REACHED) == 3


class TestWalkBack:

    def test_simple_chain(self):
        prev = {"b": "a", "c": "b"}
        assert walk_back(prev, "a", "c", limit=3) == ["a", "b", "c"]

    def test_end_is_start(self):
        assert walk_back({}, "a", "a", limit=1) == ["a"]

    def test_cycle_terminates_empty(self):
        """A looping chain is cut off by the bound instead of spinning."""
        prev = {"c": "b", "b": "c"}
        assert walk_back(prev, "a", "c", limit=10) == []

    def test_broken_link_is_empty(self):
        prev = {"c": "b"}
        assert walk_back(prev, "a", "c", limit=10) == []

    def test_broken_link_partial(self):
        prev = {"c": "b"}
        assert walk_back(prev, "a", "c", limit=10, partial=True) == ["b", "c"]

    def test_chain_longer_than_limit_is_empty(self):
        prev = {2: 1, 3: 2, 4: 3}
        assert walk_back(prev, 1, 4, limit=3) == []
        assert walk_back(prev, 1, 4, limit=4) == [1, 2, 3, 4]


class TestWalkForward:

    def test_follows_hops(self):
        hops = {(0, 3): 1, (1, 3): 2, (2, 3): 3}
        assert walk_forward(lambda u, d: hops.get((u, d)), 0, 3, limit=4) == [0, 1, 2, 3]

    def test_missing_hop_is_empty(self):
        assert walk_forward(lambda u, d: None, 0, 3, limit=4) == []

    def test_cycle_is_empty(self):
        hops = {(0, 3): 1, (1, 3): 0}
        assert walk_forward(lambda u, d: hops.get((u, d)), 0, 3, limit=4) == []


class TestCollectBranches:

    def test_skips_path_and_failed_traces(self):
        prev = {"b": "a", "c": "b", "x": "a"}
        branches = collect_branches(
            ["a", "x", "c", "ghost"], ["a", "b", "c"],
            lambda item: walk_back(prev, "a", item, limit=4))
        assert branches == [["a", "x"]]


class TestNegativeCycle:

    def test_unit_grid_has_none(self):
        grid = Grid(3, 3, start=(0, 0))
        dist = {c: abs(c[0]) + abs(c[1]) for c in grid.cells()}
        assert not has_negative_cycle(dist, grid_edges(grid))

    def test_detects_relaxable_edge(self):
        edges = [("a", "b", 1), ("b", "c", -3), ("c", "a", 1)]
        dist = {"a": 0, "b": 1, "c": -2}
        assert has_negative_cycle(dist, edges)

    def test_unreached_sources_ignored(self):
        assert not has_negative_cycle({"a": 0}, [("z", "a", -5)])
