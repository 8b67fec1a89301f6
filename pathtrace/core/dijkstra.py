# pathtrace/core/dijkstra.py
#!/usr/bin/env python3

from dataclasses import dataclass
from typing import Dict, Tuple, List
import heapq
from math import inf

from loguru import logger

from pathtrace.core.types import Grid, GridResult, Cell
from pathtrace.core.node_graph import NodeGraph, NodeId
from pathtrace.core.trace import (TraceLog, POPPED, precheck,
                                  finish_with_predecessors, walk_back)


@dataclass
class DijkstraAlgo:
    name: str = "Dijkstra"

    def compute(self, grid: Grid, with_branches: bool = True) -> GridResult:
        early = precheck(grid, self.name)
        if early is not None:
            return early

        s, goal = grid.start, grid.end
        dist: Dict[Cell, int] = {s: 0}
        parent: Dict[Cell, Cell] = {}
        log = TraceLog()
        open_pq: List[Tuple[int, int, Cell]] = [(0, 0, s)]   # (g, seq, cell)
        seq = 1
        reached = False

        while open_pq:
            g_u, _, u = heapq.heappop(open_pq)
            # stale entry, u was improved after this push
            if g_u != dist.get(u, inf):
                continue
            log.record(POPPED, u)
            if u == goal:
                reached = True
                break

            for v in grid.neighbors4(u):
                alt = g_u + 1
                if alt < dist.get(v, inf):
                    dist[v] = alt
                    parent[v] = u
                    heapq.heappush(open_pq, (alt, seq, v))
                    seq += 1

        popped = log.first_seen(POPPED)
        return finish_with_predecessors(grid, self.name, parent, reached, popped,
                                        with_branches, explored=len(popped))


def dijkstra_shortest_path(grid: Grid, with_branches: bool = True) -> GridResult:
    return DijkstraAlgo().compute(grid, with_branches)


def dijkstra_node_path(graph: NodeGraph) -> List[NodeId]:
    """Least-weight path from graph.start to graph.goal as node ids."""
    start, goal = graph.start, graph.goal
    if start is None or goal is None:
        return []
    if not graph.has_node(start) or not graph.has_node(goal):
        logger.warning("Dijkstra: marker refers to a missing node ({} -> {})", start, goal)
        return []

    dist: Dict[NodeId, float] = {start: 0}
    prev: Dict[NodeId, NodeId] = {}
    pq: List[Tuple[float, int, NodeId]] = [(0, 0, start)]
    seq = 1

    while pq:
        d, _, u = heapq.heappop(pq)
        if d != dist.get(u, inf):
            continue
        if u == goal:
            break
        for node, edge in graph.neighbours(u):
            if node is None:
                continue
            alt = d + edge.w
            if alt < dist.get(node.id, inf):
                dist[node.id] = alt
                prev[node.id] = u
                heapq.heappush(pq, (alt, seq, node.id))
                seq += 1

    if goal not in dist:
        return []
    return walk_back(prev, start, goal, len(graph.nodes))
