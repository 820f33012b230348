import pytest

from feedgraph.force_atlas import LayoutValidationError
from feedgraph.similarity import (
    INITIAL_EDGE_WEIGHT,
    build_similarity_graph,
    filter_edges_by_percentile,
    normalize_edge_weight,
)

ARTICLES = [
    {"id": "a", "title": "Alpha", "feedColor": "#f00"},
    {"id": "b", "title": "Beta", "feedColor": "#0f0"},
    {"id": "c", "title": "Gamma", "feedColor": "#00f"},
    {"id": "d", "title": "Delta"},
]

MATRIX = [
    [1.0, 0.8, -0.4, 0.2],
    [0.8, 1.0, 0.6, -0.9],
    [-0.4, 0.6, 1.0, 0.1],
    [0.2, -0.9, 0.1, 1.0],
]


def test_complete_graph_without_matrix():
    graph = build_similarity_graph(ARTICLES)
    assert graph.number_of_nodes() == 4
    assert graph.number_of_edges() == 6
    assert all(data["weight"] == INITIAL_EDGE_WEIGHT for _, _, data in graph.edges(data=True))
    assert graph.nodes["a"]["title"] == "Alpha"
    assert graph.nodes["a"]["color"] == "#f00"
    assert graph.nodes["d"]["color"] == ""


def test_raw_weights_with_negative_edges():
    graph = build_similarity_graph(ARTICLES, MATRIX, negative_edges=True)
    assert graph.number_of_edges() == 6
    assert graph["a"]["c"]["weight"] == -0.4
    assert graph["b"]["d"]["weight"] == -0.9


def test_normalized_and_filtered_without_negative_edges():
    graph = build_similarity_graph(ARTICLES, MATRIX, negative_edges=False)
    weights = sorted(data["weight"] for _, _, data in graph.edges(data=True))
    # Normalized: 0.05, 0.3, 0.55, 0.6, 0.8, 0.9 -> keeps the upper half
    assert weights == pytest.approx([0.6, 0.8, 0.9])
    assert graph.number_of_nodes() == 4


def test_missing_matrix_entries_get_zero_weight():
    matrix = [row[:] for row in MATRIX]
    matrix[0][1] = None
    graph = build_similarity_graph(ARTICLES, matrix)
    assert graph["a"]["b"]["weight"] == 0.0


def test_matrix_shape_is_checked():
    with pytest.raises(LayoutValidationError):
        build_similarity_graph(ARTICLES, [[1.0, 0.5], [0.5, 1.0]])


def test_article_without_id_is_rejected():
    with pytest.raises(LayoutValidationError):
        build_similarity_graph([{"title": "nameless"}])


def test_non_object_article_is_rejected():
    with pytest.raises(LayoutValidationError):
        build_similarity_graph(["just-a-string"])


def test_normalize_edge_weight():
    assert normalize_edge_weight(-1.0) == 0.0
    assert normalize_edge_weight(0.0) == 0.5
    assert normalize_edge_weight(1.0) == 1.0


def test_filter_edges_by_percentile():
    edges = [("a", "b", {"weight": w}) for w in [0.5, 0.1, 0.9, 0.3, 0.7]]
    kept = filter_edges_by_percentile(edges, 0.4)
    assert sorted(e[2]["weight"] for e in kept) == [0.5, 0.7, 0.9]
    assert filter_edges_by_percentile([], 0.5) == []
