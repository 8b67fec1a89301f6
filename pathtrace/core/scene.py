# pathtrace/core/scene.py
#!/usr/bin/env python3
"""
JSON scenes for both substrates.

Grid:
    {"kind": "grid", "rows": 19, "cols": 22, "walls": [[r, c], ...],
     "start": [r, c] | null, "end": [r, c] | null}

Node graph:
    {"kind": "graph",
     "nodes": [{"id": "A", "x": 120, "y": 80, "r": 22}, ...],
     "edges": [{"from": "A", "to": "B", "w": 5}, ...],
     "start": "A" | null, "goal": "B" | null}
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from loguru import logger

from pathtrace.core.types import Grid, Cell
from pathtrace.core.node_graph import NodeGraph, DEFAULT_RADIUS

Scene = Union[Grid, NodeGraph]


class SceneError(ValueError):
    """Raised for scene files that cannot be turned into a model."""


def _cell(raw: Any, what: str) -> Optional[Cell]:
    if raw is None:
        # only markers may be unset
        if what == "wall":
            raise SceneError("wall must be [row, col], got null")
        return None
    try:
        r, c = raw
        return (int(r), int(c))
    except (TypeError, ValueError) as e:
        raise SceneError(f"{what} must be [row, col], got {raw!r}") from e


def grid_from_dict(data: Dict[str, Any]) -> Grid:
    try:
        rows = int(data["rows"])
        cols = int(data["cols"])
    except (KeyError, TypeError, ValueError) as e:
        raise SceneError(f"grid scene needs integer rows/cols: {e}") from e
    if rows <= 0 or cols <= 0:
        raise SceneError(f"grid must be at least 1x1, got {rows}x{cols}")

    walls = {_cell(w, "wall") for w in data.get("walls", [])}
    start = _cell(data.get("start"), "start")
    end = _cell(data.get("end"), "end")
    grid = Grid(rows, cols)
    for name, c in [("start", start), ("end", end)] + [("wall", w) for w in walls]:
        if c is not None and not grid.in_bounds(c):
            raise SceneError(f"{name} {c} out of bounds for {rows}x{cols} grid")
    grid.walls = walls
    grid.start = start
    grid.end = end
    return grid


def graph_from_dict(data: Dict[str, Any]) -> NodeGraph:
    graph = NodeGraph()
    try:
        for n in data.get("nodes", []):
            graph.add_node(float(n["x"]), float(n["y"]), float(n.get("r", DEFAULT_RADIUS)),
                           node_id=str(n["id"]) if "id" in n else None)
        for e in data.get("edges", []):
            graph.add_edge(str(e["from"]), str(e["to"]), float(e.get("w", 1)))
        for kind in ("start", "goal"):
            if data.get(kind) is not None:
                graph.set_marker(kind, str(data[kind]))
    except (KeyError, TypeError, ValueError) as e:
        raise SceneError(f"bad graph scene: {e}") from e
    return graph


def load_scene(path: Union[str, Path]) -> Scene:
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Failed to read scene {}: {}", path, e)
        raise SceneError(f"cannot read {path}: {e}") from e

    kind = data.get("kind", "grid") if isinstance(data, dict) else None
    try:
        if kind == "grid":
            return grid_from_dict(data)
        if kind == "graph":
            return graph_from_dict(data)
        raise SceneError(f"unknown scene kind {kind!r}")
    except SceneError as e:
        logger.error("Invalid scene {}: {}", path, e)
        raise


def scene_to_dict(model: Scene) -> Dict[str, Any]:
    if isinstance(model, Grid):
        return {
            "kind": "grid",
            "rows": model.rows,
            "cols": model.cols,
            "walls": sorted([list(w) for w in model.walls]),
            "start": list(model.start) if model.start is not None else None,
            "end": list(model.end) if model.end is not None else None,
        }
    if isinstance(model, NodeGraph):
        return {"kind": "graph", **model.as_dict()}
    raise TypeError(f"not a scene model: {type(model).__name__}")


def save_scene(model: Scene, path: Union[str, Path]) -> None:
    path = Path(path)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(scene_to_dict(model), f, indent=2)
    logger.info("Saved scene to {}", path)
