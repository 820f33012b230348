"""
Turns a list of articles and their pairwise similarity matrix into the
weighted graph the layout runs on.

The similarity values come from the embedding workers in [-1, 1]. With
negative edges disabled they are mapped to [0, 1] and the weaker half of
the edges is dropped.
"""

import logging
import math

import networkx as nx

from .force_atlas import LayoutValidationError

logger = logging.getLogger(__name__)

INITIAL_EDGE_WEIGHT = 0.1
NEGATIVE_EDGE_FILTER_PERCENTILE = 0.5


def normalize_edge_weight(weight):
    return (weight + 1) / 2


def filter_edges_by_percentile(edges, percentile=0.2):
    """
    Keeps the (u, v, data) edges whose weight reaches the weight found at
    `percentile` of the sorted weights.
    """
    if not edges:
        return []
    weights = sorted(data["weight"] for _, _, data in edges)
    index = min(int(math.floor(percentile * len(weights))), len(weights) - 1)
    threshold = weights[index]
    return [edge for edge in edges if edge[2]["weight"] >= threshold]


def _matrix_value(matrix, i, j):
    try:
        value = matrix[i][j]
    except (IndexError, KeyError, TypeError):
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        return None
    return float(value)


def _check_matrix(matrix, size):
    try:
        rows = len(matrix)
        ragged = any(len(row) != size for row in matrix)
    except TypeError:
        raise LayoutValidationError("Similarity matrix must be a list of rows")
    if rows != size or ragged:
        raise LayoutValidationError(f"Similarity matrix must be {size}x{size} for {size} articles")


def build_similarity_graph(articles, similarity_matrix=None, negative_edges=True):
    """
    Builds a complete graph over `articles`.

    Each article is a dict with an `id` and optionally a `title` and
    `feedColor`. Row/column i of `similarity_matrix` belongs to articles[i].
    """
    graph = nx.Graph()
    ids = []
    for article in articles:
        if not isinstance(article, dict):
            raise LayoutValidationError(f"Article must be an object, got {article!r}")
        uid = article.get("id")
        if uid in (None, ""):
            raise LayoutValidationError(f"Article without id: {article!r}")
        ids.append(uid)
        graph.add_node(
            uid,
            title=article.get("title") or "",
            color=article.get("feedColor") or "",
        )

    if similarity_matrix is not None:
        _check_matrix(similarity_matrix, len(ids))

    edges = []
    for i in range(len(ids)):
        for j in range(i + 1, len(ids)):
            weight = INITIAL_EDGE_WEIGHT
            if similarity_matrix is not None:
                value = _matrix_value(similarity_matrix, i, j)
                if value is None:
                    weight = 0.0
                elif negative_edges:
                    weight = value
                else:
                    weight = normalize_edge_weight(value)
            edges.append((ids[i], ids[j], {"weight": weight}))

    if similarity_matrix is not None and not negative_edges:
        before = len(edges)
        edges = filter_edges_by_percentile(edges, NEGATIVE_EDGE_FILTER_PERCENTILE)
        logger.info(f"Percentile filter kept {len(edges)} of {before} edges")

    graph.add_edges_from(edges)
    logger.info(f"Built similarity graph: {graph.number_of_nodes()} articles, {graph.number_of_edges()} edges")
    return graph
