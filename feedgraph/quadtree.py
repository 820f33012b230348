"""
Barnes-Hut quadtree used for approximate node repulsion.

The tree is rebuilt from the current node positions on every tick and
thrown away afterwards. Each region is either a Leaf holding up to
`capacity` nodes or an Internal region owning its four quadrants.
"""

import logging
import math

from .geometry import safe_direction

logger = logging.getLogger(__name__)

# Coincident nodes never separate by subdividing, so stop splitting here
MAX_DEPTH = 32


class Leaf:
    __slots__ = ("points",)

    def __init__(self):
        self.points = []


class Internal:
    __slots__ = ("northwest", "northeast", "southwest", "southeast")

    def __init__(self, northwest, northeast, southwest, southeast):
        self.northwest = northwest
        self.northeast = northeast
        self.southwest = southwest
        self.southeast = southeast

    def children(self):
        return (self.northwest, self.northeast, self.southwest, self.southeast)


def repulsion_force(dx, dy, strength):
    """
    Force of magnitude strength / distance^2 along (dx, dy).

    (dx, dy) points from the repelling point to the repelled one. Zero
    distance and non-finite results give no force; the latter are logged.
    """
    ux, uy, dist = safe_direction(dx, dy)
    dist_sq = dist * dist
    if dist_sq == 0:
        return 0.0, 0.0
    magnitude = strength / dist_sq
    fx = ux * magnitude
    fy = uy * magnitude
    if not (math.isfinite(fx) and math.isfinite(fy)):
        logger.warning(f"Dropping degenerate repulsion ({fx}, {fy}) at distance {dist}")
        return 0.0, 0.0
    return fx, fy


class QuadTree:
    def __init__(self, x_min, x_max, y_min, y_max, capacity=1, depth=0):
        self.bounds = (x_min, x_max, y_min, y_max)
        self.capacity = capacity
        self.depth = depth
        self.count = 0  # points in this region and below
        self.state = Leaf()

    @property
    def divided(self):
        return isinstance(self.state, Internal)

    @property
    def side(self):
        x_min, x_max, y_min, y_max = self.bounds
        return max(x_max - x_min, y_max - y_min)

    @property
    def center(self):
        x_min, x_max, y_min, y_max = self.bounds
        return (x_min + x_max) / 2, (y_min + y_max) / 2

    def contains(self, node):
        x_min, x_max, y_min, y_max = self.bounds
        return x_min <= node.x <= x_max and y_min <= node.y <= y_max

    def insert(self, node):
        if not self.contains(node):
            return False

        if isinstance(self.state, Leaf):
            if len(self.state.points) < self.capacity or self.depth >= MAX_DEPTH:
                self.state.points.append(node)
                self.count += 1
                return True
            self.subdivide()

        if self._child_for(node).insert(node):
            self.count += 1
            return True
        return False

    def subdivide(self):
        x_min, x_max, y_min, y_max = self.bounds
        x_mid = (x_min + x_max) / 2
        y_mid = (y_min + y_max) / 2
        depth = self.depth + 1

        points = self.state.points
        self.state = Internal(
            QuadTree(x_min, x_mid, y_min, y_mid, self.capacity, depth),
            QuadTree(x_mid, x_max, y_min, y_mid, self.capacity, depth),
            QuadTree(x_min, x_mid, y_mid, y_max, self.capacity, depth),
            QuadTree(x_mid, x_max, y_mid, y_max, self.capacity, depth),
        )
        # Points already counted here, only push them down
        for point in points:
            self._child_for(point).insert(point)

    def _child_for(self, node):
        # Midpoint ties go north-west
        x_mid, y_mid = self.center
        east = node.x > x_mid
        south = node.y > y_mid
        if south:
            return self.state.southeast if east else self.state.southwest
        return self.state.northeast if east else self.state.northwest

    def calculate_repulsion(self, node, theta, strength):
        """Approximate repulsion on `node` from every other point in the tree."""
        if self.count == 0:
            return 0.0, 0.0

        # Far enough away: the whole region acts as one mass at its center.
        # Never aggregate a region the node sits in, it would repel itself.
        if self.count > 1 and not self.contains(node):
            cx, cy = self.center
            d = math.hypot(node.x - cx, node.y - cy)
            if d > 0 and self.side / d < theta:
                return repulsion_force(node.x - cx, node.y - cy, strength * self.count)

        force_x = 0.0
        force_y = 0.0
        if isinstance(self.state, Leaf):
            for other in self.state.points:
                if other is node:
                    continue
                fx, fy = repulsion_force(node.x - other.x, node.y - other.y, strength)
                force_x += fx
                force_y += fy
        else:
            for child in self.state.children():
                fx, fy = child.calculate_repulsion(node, theta, strength)
                force_x += fx
                force_y += fy
        return force_x, force_y


def build_quadtree(nodes, capacity=1):
    """Builds a tree over the smallest box enclosing every node."""
    if not nodes:
        return QuadTree(0.0, 0.0, 0.0, 0.0, capacity)

    x_min = min(node.x for node in nodes)
    x_max = max(node.x for node in nodes)
    y_min = min(node.y for node in nodes)
    y_max = max(node.y for node in nodes)

    root = QuadTree(x_min, x_max, y_min, y_max, capacity)
    for node in nodes:
        if not root.insert(node):
            logger.warning(f"Node {node.id} at ({node.x}, {node.y}) fell outside the quadtree bounds")
    return root
