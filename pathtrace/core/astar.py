# pathtrace/core/astar.py
#!/usr/bin/env python3
"""
A* over the unit-weight grid.

Heuristic:
- Manhattan distance to end. Admissible and consistent on a 4-connected
  grid with no diagonal moves, so the first pop of end is optimal.

Tie-breaking in the PQ:
- (f, g, seq, cell): lower f, then lower g, then FIFO by seq.
"""

from dataclasses import dataclass
from typing import Dict, Tuple, List
import heapq
from math import inf

from pathtrace.core.types import Grid, GridResult, Cell
from pathtrace.core.trace import TraceLog, POPPED, precheck, finish_with_predecessors


def manhattan(a: Cell, b: Cell) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


@dataclass
class AStarAlgo:
    name: str = "A*"

    def compute(self, grid: Grid, with_branches: bool = True) -> GridResult:
        early = precheck(grid, self.name)
        if early is not None:
            return early

        s, goal = grid.start, grid.end
        g: Dict[Cell, int] = {s: 0}
        parent: Dict[Cell, Cell] = {}
        log = TraceLog()
        open_pq: List[Tuple[int, int, int, Cell]] = [(manhattan(s, goal), 0, 0, s)]
        seq = 1
        reached = False

        while open_pq:
            _, g_u, _, u = heapq.heappop(open_pq)
            if g_u != g.get(u, inf):
                continue
            log.record(POPPED, u)
            if u == goal:
                reached = True
                break

            for v in grid.neighbors4(u):
                tentative = g_u + 1
                if tentative < g.get(v, inf):
                    g[v] = tentative
                    parent[v] = u
                    heapq.heappush(open_pq, (tentative + manhattan(v, goal), tentative, seq, v))
                    seq += 1

        popped = log.first_seen(POPPED)
        return finish_with_predecessors(grid, self.name, parent, reached, popped,
                                        with_branches, explored=len(popped))


def astar_shortest_path(grid: Grid, with_branches: bool = True) -> GridResult:
    return AStarAlgo().compute(grid, with_branches)
