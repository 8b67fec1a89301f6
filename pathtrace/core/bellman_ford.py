# pathtrace/core/bellman_ford.py
#!/usr/bin/env python3
"""
Bellman-Ford on the grid, sweeping every edge in row-major order.

Up to V-1 sweeps, stopping early on a sweep that relaxes nothing. Cells
are logged the first time they become reachable, so branches replay the
order in which the sweeps spread out from start.

Grid edges all weigh 1 so a negative cycle cannot occur here, but the
relaxation is written against (u, v, w) edges and is followed by the
usual extra pass; a detected cycle yields an empty result.
"""

from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, Iterator, Tuple
from math import inf

from loguru import logger

from pathtrace.core.types import Grid, GridResult, Cell
from pathtrace.core.trace import TraceLog, REACHED, precheck, finish_with_predecessors, metrics

WeightedEdge = Tuple[Hashable, Hashable, float]


def grid_edges(grid: Grid) -> Iterator[Tuple[Cell, Cell, int]]:
    """Every open->open unit edge, sources in row-major order."""
    for u in grid.cells():
        if u in grid.walls:
            continue
        for v in grid.neighbors4(u):
            yield u, v, 1


def has_negative_cycle(dist: Dict[Hashable, float], edges: Iterable[WeightedEdge]) -> bool:
    """True if any edge can still be relaxed after the main sweeps."""
    for u, v, w in edges:
        du = dist.get(u, inf)
        if du != inf and du + w < dist.get(v, inf):
            return True
    return False


@dataclass
class BellmanFordAlgo:
    name: str = "Bellman-Ford"

    def compute(self, grid: Grid, with_branches: bool = True) -> GridResult:
        early = precheck(grid, self.name)
        if early is not None:
            return early

        s = grid.start
        edges = list(grid_edges(grid))
        dist: Dict[Cell, float] = {s: 0}
        parent: Dict[Cell, Cell] = {}
        log = TraceLog()
        sweeps = 0

        for _ in range(grid.size - 1):
            sweeps += 1
            changed = False
            for u, v, w in edges:
                du = dist.get(u, inf)
                if du == inf:
                    continue
                nd = du + w
                if nd < dist.get(v, inf):
                    if v not in dist:
                        log.record(REACHED, v)
                    dist[v] = nd
                    parent[v] = u
                    changed = True
            if not changed:
                break

        if has_negative_cycle(dist, edges):
            logger.warning("{}: negative cycle reachable from {}", self.name, s)
            return GridResult(metrics=metrics(self.name, sweeps=sweeps, negative_cycle=True))

        visited_order = log.first_seen(REACHED)
        result = finish_with_predecessors(grid, self.name, parent, grid.end in dist,
                                          visited_order, with_branches,
                                          explored=len(visited_order),
                                          partial_branches=True)
        result.metrics["sweeps"] = sweeps
        return result


def bellman_ford_shortest_path(grid: Grid, with_branches: bool = True) -> GridResult:
    return BellmanFordAlgo().compute(grid, with_branches)
