# pathtrace/core/traversals.py
#!/usr/bin/env python3
"""BFS / DFS over a NodeGraph. Both return the path as a list of node ids."""

from collections import deque
from typing import Dict, List

from pathtrace.core.node_graph import NodeGraph, NodeId
from pathtrace.core.trace import walk_back


def _endpoints_ok(graph: NodeGraph) -> bool:
    start, goal = graph.start, graph.goal
    if start is None or goal is None:
        return False
    return graph.has_node(start) and graph.has_node(goal)


def bfs_node_path(graph: NodeGraph) -> List[NodeId]:
    """Fewest-edges path from start to goal; weights are ignored."""
    if not _endpoints_ok(graph):
        return []
    start, goal = graph.start, graph.goal

    queue = deque([start])
    seen = {start}
    prev: Dict[NodeId, NodeId] = {}

    while queue:
        u = queue.popleft()
        if u == goal:
            break
        for node, _ in graph.neighbours(u):
            if node is None or node.id in seen:
                continue
            seen.add(node.id)
            prev[node.id] = u
            queue.append(node.id)

    if goal not in seen:
        return []
    return walk_back(prev, start, goal, len(graph.nodes))


def dfs_node_path(graph: NodeGraph) -> List[NodeId]:
    """First path found depth-first; no guarantee it is the shortest."""
    if not _endpoints_ok(graph):
        return []
    start, goal = graph.start, graph.goal

    stack = [start]
    seen = {start}
    prev: Dict[NodeId, NodeId] = {}
    found = False

    while stack:
        u = stack.pop()
        if u == goal:
            found = True
            break
        # reversed so the first listed neighbour is popped first
        nbrs = [node for node, _ in graph.neighbours(u) if node is not None]
        for node in reversed(nbrs):
            if node.id in seen:
                continue
            seen.add(node.id)
            prev[node.id] = u
            stack.append(node.id)

    if not found:
        return []
    return walk_back(prev, start, goal, len(graph.nodes))
