import os

import pytest

from feedgraph.graph_engine import Edge, Node

# Qt widgets are created without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


def make_node(uid, x, y, vx=0.0, vy=0.0, **kwargs):
    return Node(uid, x=x, y=y, vx=vx, vy=vy, **kwargs)


@pytest.fixture
def chain():
    """A-B (weight 2) and B-C (weight 3)."""
    nodes = [
        make_node("A", 100.0, 100.0),
        make_node("B", 300.0, 200.0),
        make_node("C", 500.0, 400.0),
    ]
    edges = [Edge(0, 1, 2.0), Edge(1, 2, 3.0)]
    return nodes, edges
