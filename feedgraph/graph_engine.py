import logging

from . import force_atlas
from .force_atlas import LayoutValidationError, initialize_elements
from .settings import Settings, make_settings

logger = logging.getLogger(__name__)

__all__ = ["Node", "Edge", "GraphEngine", "LayoutValidationError"]


class Node:
    def __init__(self, uid, label=None, data=None, x=None, y=None, vx=None, vy=None, mass=None):
        self.id = uid
        self.label = label if label is not None else str(uid)
        self.data = data or {}
        self.x = x
        self.y = y
        self.vx = vx
        self.vy = vy
        self.degree = 1.0
        self.mass = mass

    def __repr__(self):
        return f"Node({self.id!r}, x={self.x}, y={self.y})"


class Edge:
    """Undirected link between two nodes, stored as indices into the node list."""

    def __init__(self, source, target, weight=1.0):
        self.source = source
        self.target = target
        self.weight = weight

    def __repr__(self):
        return f"Edge({self.source}, {self.target}, weight={self.weight})"


class GraphEngine:
    # Alpha schedule, same numbers as a d3 force simulation
    ALPHA_MIN = 0.001
    ALPHA_DECAY = 1 - ALPHA_MIN ** (1 / 300)
    ALPHA_TARGET = 0.0

    def __init__(self, settings=None):
        self.nodes = []  # dense, edges index into it
        self.edges = []
        self.index = {}  # uid -> position in self.nodes
        self.settings = settings if isinstance(settings, Settings) else make_settings(settings)
        self.alpha = 1.0
        self.ticks = 0

    def clear(self):
        self.nodes = []
        self.edges = []
        self.index = {}
        self.ticks = 0

    def add_node(self, uid, label=None, data=None, **kwargs):
        if uid in self.index:
            raise LayoutValidationError(f"Duplicate node id {uid!r}")
        node = Node(uid, label, data, **kwargs)
        self.index[uid] = len(self.nodes)
        self.nodes.append(node)
        return node

    def add_edge(self, source_uid, target_uid, weight=1.0):
        for uid in (source_uid, target_uid):
            if uid not in self.index:
                raise LayoutValidationError(f"Edge references unknown node {uid!r}")
        edge = Edge(self.index[source_uid], self.index[target_uid], weight)
        self.edges.append(edge)
        return edge

    def load_from_networkx(self, nx_graph):
        self.clear()

        for n, data in nx_graph.nodes(data=True):
            attrs = dict(data)
            self.add_node(
                n,
                label=attrs.get("title") or attrs.get("label"),
                data=attrs,
                x=attrs.get("x"),
                y=attrs.get("y"),
                mass=attrs.get("mass"),
            )

        for u, v, data in nx_graph.edges(data=True):
            self.add_edge(u, v, data.get("weight", 1.0))

        initialize_elements(self.nodes, self.edges, self.settings.width, self.settings.height)
        logger.info(f"Loaded graph with {len(self.nodes)} nodes and {len(self.edges)} edges")
        self.restart()

    def get_node(self, uid):
        i = self.index.get(uid)
        return self.nodes[i] if i is not None else None

    def neighbors(self, uid):
        """Ids of the nodes sharing an edge with `uid`."""
        i = self.index.get(uid)
        if i is None:
            return []
        result = []
        for edge in self.edges:
            if edge.source == i and edge.target != i:
                result.append(self.nodes[edge.target].id)
            elif edge.target == i and edge.source != i:
                result.append(self.nodes[edge.source].id)
        return result

    def update_settings(self, overrides=None, **kwargs):
        self.settings = make_settings(overrides, base=self.settings, **kwargs)
        self.restart()

    def resize(self, width, height):
        self.settings = make_settings(base=self.settings, width=width, height=height)

    def restart(self, alpha=1.0):
        self.alpha = alpha

    @property
    def running(self):
        return self.alpha >= self.ALPHA_MIN

    def step(self):
        """Advances the layout one tick. Returns False once it has cooled down."""
        was_running = self.running
        force_atlas.step(self.alpha, self.settings, self.nodes, self.edges)
        self.ticks += 1
        self.alpha += (self.ALPHA_TARGET - self.alpha) * self.ALPHA_DECAY
        if was_running and not self.running:
            logger.info(f"Layout settled after {self.ticks} ticks")
        return self.running

    def run(self, max_ticks=300):
        """Steps until the layout settles or max_ticks is reached."""
        count = 0
        while count < max_ticks and self.running:
            self.step()
            count += 1
        return count

    def positions(self):
        return {node.id: (node.x, node.y) for node in self.nodes}
