import json

import pytest

from feedgraph.force_atlas import LayoutValidationError
from feedgraph.main import load_graph_file, main


def test_headless_run_prints_positions(capsys):
    assert main(["--headless", "--ticks", "5", "--seed", "1"]) == 0
    positions = json.loads(capsys.readouterr().out)
    assert len(positions) == 24
    for x, y in positions.values():
        assert 0.0 <= x <= 800.0
        assert 0.0 <= y <= 600.0


def test_load_graph_file(tmp_path):
    path = tmp_path / "graph.json"
    path.write_text(json.dumps({
        "articles": [{"id": "a"}, {"id": "b"}, {"id": "c"}],
        "similarity": [[1, 0.5, -0.5], [0.5, 1, 0.2], [-0.5, 0.2, 1]],
        "negative_edges": True,
    }))
    graph = load_graph_file(str(path))
    assert graph.number_of_edges() == 3
    assert graph["a"]["c"]["weight"] == -0.5


def test_headless_run_from_file(tmp_path, capsys):
    path = tmp_path / "graph.json"
    path.write_text(json.dumps({"articles": [{"id": "x"}, {"id": "y"}]}))
    assert main([str(path), "--headless", "--ticks", "3", "--width", "200", "--height", "100"]) == 0
    positions = json.loads(capsys.readouterr().out)
    assert set(positions) == {"x", "y"}
    for x, y in positions.values():
        assert 0.0 <= x <= 200.0
        assert 0.0 <= y <= 100.0


def test_missing_file_raises():
    with pytest.raises(OSError):
        load_graph_file("/nonexistent/graph.json")


@pytest.mark.parametrize("payload", [
    [{"id": "a"}],
    {"articles": {"id": "a"}},
    {"articles": ["a", "b"]},
])
def test_malformed_graph_file_is_rejected(tmp_path, payload):
    path = tmp_path / "graph.json"
    path.write_text(json.dumps(payload))
    with pytest.raises(LayoutValidationError):
        load_graph_file(str(path))
