from .force_atlas import LayoutValidationError, initialize_elements, step
from .graph_engine import Edge, GraphEngine, Node
from .quadtree import QuadTree, build_quadtree
from .settings import Settings, make_settings
from .similarity import build_similarity_graph

__all__ = [
    "Edge",
    "GraphEngine",
    "LayoutValidationError",
    "Node",
    "QuadTree",
    "Settings",
    "build_quadtree",
    "build_similarity_graph",
    "initialize_elements",
    "make_settings",
    "step",
]
