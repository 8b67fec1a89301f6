# pathtrace/core/registry.py
#!/usr/bin/env python3
"""Name -> algorithm lookup for both substrates."""

from typing import Callable, Dict, List, Tuple

from pathtrace.core.astar import AStarAlgo
from pathtrace.core.bellman_ford import BellmanFordAlgo
from pathtrace.core.dijkstra import DijkstraAlgo, dijkstra_node_path
from pathtrace.core.floyd_warshall import FloydWarshallAlgo
from pathtrace.core.node_graph import NodeGraph, NodeId
from pathtrace.core.traversals import bfs_node_path, dfs_node_path

GRID_ALGORITHMS: Dict[str, type] = {
    "dijkstra": DijkstraAlgo,
    "astar": AStarAlgo,
    "bellman_ford": BellmanFordAlgo,
    "floyd_warshall": FloydWarshallAlgo,
}

GRAPH_ALGORITHMS: Dict[str, Tuple[str, Callable[[NodeGraph], List[NodeId]]]] = {
    "bfs": ("BFS", bfs_node_path),
    "dfs": ("DFS", dfs_node_path),
    "dijkstra": ("Dijkstra", dijkstra_node_path),
}

_ALIASES = {
    "a*": "astar",
    "a_star": "astar",
    "bellman-ford": "bellman_ford",
    "bellmanford": "bellman_ford",
    "floyd-warshall": "floyd_warshall",
    "floydwarshall": "floyd_warshall",
}


def normalize(key: str) -> str:
    key = key.strip().lower()
    return _ALIASES.get(key, key)


def make_grid_algo(key: str):
    key = normalize(key)
    if key not in GRID_ALGORITHMS:
        raise KeyError(f"unknown grid algorithm {key!r}; choose from {sorted(GRID_ALGORITHMS)}")
    return GRID_ALGORITHMS[key]()


def get_graph_algo(key: str) -> Tuple[str, Callable[[NodeGraph], List[NodeId]]]:
    key = normalize(key)
    if key not in GRAPH_ALGORITHMS:
        raise KeyError(f"unknown graph algorithm {key!r}; choose from {sorted(GRAPH_ALGORITHMS)}")
    return GRAPH_ALGORITHMS[key]
