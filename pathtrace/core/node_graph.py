# pathtrace/core/node_graph.py
#!/usr/bin/env python3
"""
Directed weighted node graph edited by dragging nodes around a canvas.

Node ids are short labels handed out in spreadsheet-column order
(A, B, ..., Z, AA, AB, ...). Radius is drawing metadata only.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

NodeId = str

DEFAULT_RADIUS = 22
MARKERS = ("start", "goal")


def label_for(n: int) -> NodeId:
    """0 -> 'A', 25 -> 'Z', 26 -> 'AA', 27 -> 'AB' ..."""
    out = ""
    while True:
        out = chr(65 + n % 26) + out
        n = n // 26 - 1
        if n < 0:
            return out


@dataclass
class Node:
    id: NodeId
    x: float
    y: float
    r: float = DEFAULT_RADIUS


@dataclass
class Edge:
    src: NodeId
    dst: NodeId
    w: float = 1


@dataclass
class NodeGraph:
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    start: Optional[NodeId] = None
    goal: Optional[NodeId] = None
    revision: int = 0
    _counter: int = 0

    # -------------------- queries --------------------

    def node(self, node_id: NodeId) -> Optional[Node]:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None

    def has_node(self, node_id: NodeId) -> bool:
        return self.node(node_id) is not None

    def node_at(self, x: float, y: float) -> Optional[Node]:
        # topmost (last added) wins when circles overlap
        for n in reversed(self.nodes):
            if (x - n.x) ** 2 + (y - n.y) ** 2 <= n.r ** 2:
                return n
        return None

    def edge(self, src: NodeId, dst: NodeId) -> Optional[Edge]:
        for e in self.edges:
            if e.src == src and e.dst == dst:
                return e
        return None

    def neighbours(self, node_id: NodeId) -> List[Tuple[Optional[Node], Edge]]:
        """Outgoing (target node, edge) pairs in insertion order.

        The target is None when an edge dangles; algorithms skip those.
        """
        return [(self.node(e.dst), e) for e in self.edges if e.src == node_id]

    # -------------------- editing --------------------

    def _touch(self) -> None:
        self.revision += 1

    def _require(self, node_id: NodeId) -> Node:
        n = self.node(node_id)
        if n is None:
            raise KeyError(f"no node {node_id!r}")
        return n

    def add_node(self, x: float, y: float, r: float = DEFAULT_RADIUS,
                 node_id: Optional[NodeId] = None) -> Node:
        if node_id is None:
            node_id = label_for(self._counter)
            while self.has_node(node_id):
                self._counter += 1
                node_id = label_for(self._counter)
            self._counter += 1
        elif self.has_node(node_id):
            raise ValueError(f"duplicate node id {node_id!r}")
        n = Node(node_id, x, y, r)
        self.nodes.append(n)
        self._touch()
        return n

    def move_node(self, node_id: NodeId, x: float, y: float) -> None:
        n = self._require(node_id)
        n.x, n.y = x, y
        # position is not read by any algorithm, so no revision bump

    def remove_node(self, node_id: NodeId) -> None:
        n = self._require(node_id)
        self.nodes.remove(n)
        self.edges = [e for e in self.edges if e.src != node_id and e.dst != node_id]
        if self.start == node_id:
            self.start = None
        if self.goal == node_id:
            self.goal = None
        self._touch()

    def add_edge(self, src: NodeId, dst: NodeId, w: float = 1) -> Optional[Edge]:
        """Add src->dst. Self-loops and duplicate ordered pairs are ignored."""
        self._require(src)
        self._require(dst)
        if w <= 0:
            raise ValueError(f"edge weight must be positive, got {w}")
        if src == dst or self.edge(src, dst) is not None:
            return None
        e = Edge(src, dst, w)
        self.edges.append(e)
        self._touch()
        return e

    def remove_edge(self, src: NodeId, dst: NodeId) -> bool:
        e = self.edge(src, dst)
        if e is None:
            return False
        self.edges.remove(e)
        self._touch()
        return True

    def set_weight(self, src: NodeId, dst: NodeId, w: float) -> None:
        if w <= 0:
            raise ValueError(f"edge weight must be positive, got {w}")
        e = self.edge(src, dst)
        if e is None:
            raise KeyError(f"no edge {src}->{dst}")
        e.w = w
        self._touch()

    def set_marker(self, kind: str, node_id: NodeId) -> None:
        if kind not in MARKERS:
            raise ValueError(f"unknown marker {kind!r}")
        self._require(node_id)
        setattr(self, kind, node_id)
        self._touch()

    def clear_marker(self, kind: str) -> None:
        if kind not in MARKERS:
            raise ValueError(f"unknown marker {kind!r}")
        setattr(self, kind, None)
        self._touch()

    def path_weight(self, path: List[NodeId]) -> Optional[float]:
        """Sum of edge weights along path, None if some hop has no edge."""
        total = 0
        for a, b in zip(path, path[1:]):
            e = self.edge(a, b)
            if e is None:
                return None
            total += e.w
        return total

    def as_dict(self) -> Dict:
        return {
            "nodes": [{"id": n.id, "x": n.x, "y": n.y, "r": n.r} for n in self.nodes],
            "edges": [{"from": e.src, "to": e.dst, "w": e.w} for e in self.edges],
            "start": self.start,
            "goal": self.goal,
        }
