# pathtrace/core/floyd_warshall.py
#!/usr/bin/env python3
"""
Floyd-Warshall all-pairs on the grid, with (dist, next-hop) matrices.

O(V^3) over every cell of the grid. Only meant for small grids; the k
loop is vectorised with numpy so a 20x20 board stays interactive.
Iteration k never changes row k or column k (dist[k][k] == 0), so
updating a whole matrix at once gives the same result as the scalar
triple loop, including the order in which start's row improves.
"""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np
from loguru import logger

from pathtrace.core.types import Grid, GridResult, Cell
from pathtrace.core.trace import (TraceLog, IMPROVED, precheck, walk_forward,
                                  collect_branches, metrics)

NO_HOP = -1
LARGE_GRID_CELLS = 900  # 30x30


def init_matrices(grid: Grid):
    """dist/next seeded with 0 on the diagonal and 1 on each open edge."""
    V = grid.size
    dist = np.full((V, V), np.inf)
    nxt = np.full((V, V), NO_HOP, dtype=np.int64)
    diag = np.arange(V)
    dist[diag, diag] = 0
    nxt[diag, diag] = diag
    for c in grid.cells():
        if c in grid.walls:
            continue
        v = grid.index(c)
        for n in grid.neighbors4(c):
            u = grid.index(n)
            dist[v, u] = 1
            nxt[v, u] = u
    return dist, nxt


@dataclass
class FloydWarshallAlgo:
    name: str = "Floyd-Warshall"

    def compute(self, grid: Grid, with_branches: bool = True) -> GridResult:
        early = precheck(grid, self.name)
        if early is not None:
            return early

        V = grid.size
        if V > LARGE_GRID_CELLS:
            logger.warning("{}: {} cells, all-pairs search will be slow", self.name, V)

        s = grid.index(grid.start)
        t = grid.index(grid.end)
        dist, nxt = init_matrices(grid)
        log = TraceLog()

        for k in range(V):
            via = dist[:, k, None] + dist[None, k, :]
            better = via < dist
            if not better.any():
                continue
            for j in np.flatnonzero(better[s]):
                log.record(IMPROVED, int(j))
            dist = np.where(better, via, dist)
            nxt = np.where(better, nxt[:, k, None], nxt)

        improved = log.first_seen(IMPROVED)
        if np.isinf(dist[s, t]):
            logger.debug("{}: end {} unreached", self.name, grid.end)
            return GridResult(metrics=metrics(self.name, explored=len(improved)))
        if (np.diag(dist) < 0).any():
            logger.warning("{}: negative cycle detected", self.name)
            return GridResult(metrics=metrics(self.name, explored=len(improved),
                                              negative_cycle=True))

        def hop(u: int, dest: int) -> Optional[int]:
            h = int(nxt[u, dest])
            return None if h == NO_HOP else h

        def trace(dest: int) -> List[Cell]:
            return [grid.cell_at(v) for v in walk_forward(hop, s, dest, V)]

        path = trace(t)
        if not path:
            return GridResult(metrics=metrics(self.name, explored=len(improved)))

        branches: List[List[Cell]] = []
        if with_branches:
            on_path = [grid.index(c) for c in path]
            branches = collect_branches(improved, on_path, trace)

        logger.debug("{}: path of {} cells, {} branches", self.name, len(path), len(branches))
        return GridResult(path=path, branches=branches,
                          metrics=metrics(self.name, path, branches, len(improved)))


def floyd_warshall_shortest_path(grid: Grid, with_branches: bool = True) -> GridResult:
    return FloydWarshallAlgo().compute(grid, with_branches)
