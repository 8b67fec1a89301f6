"""Tests for JSON scene loading and saving."""

import json

import pytest

from pathtrace.config import MAP_DIR
from pathtrace.core.dijkstra import DijkstraAlgo, dijkstra_node_path
from pathtrace.core.node_graph import NodeGraph
from pathtrace.core.scene import (SceneError, load_scene, save_scene, scene_to_dict,
                                  grid_from_dict, graph_from_dict)
from pathtrace.core.types import Grid


def write(tmp_path, data, name="scene.json"):
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestGridScenes:

    def test_load_grid(self, tmp_path):
        path = write(tmp_path, {"kind": "grid", "rows": 3, "cols": 4,
                                "walls": [[1, 1], [1, 2]], "start": [0, 0], "end": [2, 3]})
        grid = load_scene(path)
        assert isinstance(grid, Grid)
        assert (grid.rows, grid.cols) == (3, 4)
        assert grid.walls == {(1, 1), (1, 2)}
        assert grid.start == (0, 0) and grid.end == (2, 3)

    def test_kind_defaults_to_grid(self):
        grid = grid_from_dict({"rows": 2, "cols": 2})
        assert grid.start is None and not grid.walls

    def test_save_then_load(self, tmp_path, walled_grid):
        path = tmp_path / "out.json"
        save_scene(walled_grid, path)
        again = load_scene(path)
        assert scene_to_dict(again) == scene_to_dict(walled_grid)

    @pytest.mark.parametrize("data", [
        {"rows": 0, "cols": 3},
        {"rows": "x", "cols": 3},
        {"cols": 3},
        {"rows": 3, "cols": 3, "walls": [[5, 5]]},
        {"rows": 3, "cols": 3, "walls": [None]},
        {"rows": 3, "cols": 3, "start": [0]},
        {"rows": 3, "cols": 3, "end": [-1, 0]},
    ])
    def test_bad_grids_rejected(self, data):
        with pytest.raises(SceneError):
            grid_from_dict(data)


class TestGraphScenes:

    def test_load_graph(self, tmp_path):
        path = write(tmp_path, {
            "kind": "graph",
            "nodes": [{"id": "A", "x": 0, "y": 0}, {"id": "B", "x": 50, "y": 0}],
            "edges": [{"from": "A", "to": "B"}],
            "start": "A", "goal": "B",
        })
        graph = load_scene(path)
        assert isinstance(graph, NodeGraph)
        assert graph.edge("A", "B").w == 1
        assert graph.node("A").r == 22
        assert dijkstra_node_path(graph) == ["A", "B"]

    def test_save_then_load(self, tmp_path, triangle_graph):
        path = tmp_path / "graph.json"
        save_scene(triangle_graph, path)
        again = load_scene(path)
        assert scene_to_dict(again) == scene_to_dict(triangle_graph)

    @pytest.mark.parametrize("data", [
        {"nodes": [{"id": "A", "y": 0}]},
        {"nodes": [{"id": "A", "x": 0, "y": 0}, {"id": "A", "x": 1, "y": 1}]},
        {"nodes": [{"id": "A", "x": 0, "y": 0}], "edges": [{"from": "A", "to": "Q"}]},
        {"nodes": [{"id": "A", "x": 0, "y": 0}, {"id": "B", "x": 0, "y": 0}],
         "edges": [{"from": "A", "to": "B", "w": -1}]},
        {"nodes": [{"id": "A", "x": 0, "y": 0}], "start": "Z"},
    ])
    def test_bad_graphs_rejected(self, data):
        with pytest.raises(SceneError):
            graph_from_dict(data)


class TestFileErrors:

    def test_missing_file(self, tmp_path):
        with pytest.raises(SceneError):
            load_scene(tmp_path / "nope.json")

    def test_not_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{rows: 3", encoding="utf-8")
        with pytest.raises(SceneError):
            load_scene(path)

    def test_unknown_kind(self, tmp_path):
        with pytest.raises(SceneError):
            load_scene(write(tmp_path, {"kind": "hexgrid"}))

    def test_top_level_list(self, tmp_path):
        with pytest.raises(SceneError):
            load_scene(write(tmp_path, [1, 2, 3]))

    def test_scene_error_is_value_error(self):
        assert issubclass(SceneError, ValueError)


class TestBundledMaps:

    @pytest.mark.parametrize("path", sorted(MAP_DIR.glob("*.json")), ids=lambda p: p.name)
    def test_bundled_maps_have_routes(self, path):
        model = load_scene(path)
        if isinstance(model, Grid):
            assert DijkstraAlgo().compute(model).found
        else:
            assert dijkstra_node_path(model)

    def test_detour_graph_prefers_light_edges(self):
        graph = load_scene(MAP_DIR / "03_detour_graph.json")
        path = dijkstra_node_path(graph)
        assert path == ["A", "C", "B", "E"]
        assert graph.path_weight(path) == 5
