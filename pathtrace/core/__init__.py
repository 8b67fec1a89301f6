from pathtrace.core.types import Grid, GridResult, Cell
from pathtrace.core.node_graph import NodeGraph, Node, Edge
from pathtrace.core.dijkstra import DijkstraAlgo, dijkstra_shortest_path, dijkstra_node_path
from pathtrace.core.astar import AStarAlgo, astar_shortest_path
from pathtrace.core.bellman_ford import BellmanFordAlgo, bellman_ford_shortest_path
from pathtrace.core.floyd_warshall import FloydWarshallAlgo, floyd_warshall_shortest_path
from pathtrace.core.traversals import bfs_node_path, dfs_node_path
from pathtrace.core.playback import PlaybackController, PlaybackConfig, PlaybackSnapshot

__all__ = [
    "Grid", "GridResult", "Cell", "NodeGraph", "Node", "Edge",
    "DijkstraAlgo", "AStarAlgo", "BellmanFordAlgo", "FloydWarshallAlgo",
    "dijkstra_shortest_path", "astar_shortest_path", "bellman_ford_shortest_path",
    "floyd_warshall_shortest_path", "dijkstra_node_path", "bfs_node_path", "dfs_node_path",
    "PlaybackController", "PlaybackConfig", "PlaybackSnapshot",
]
