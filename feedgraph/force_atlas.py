"""
ForceAtlas2-style layout step.

`step` advances the layout by one tick, mutating node positions and
velocities in place. Edges reference nodes by their index in the node
list. Forces follow one rule for degenerate geometry: two points at the
same spot have no direction between them, so they exert no force on each
other.
"""

import logging
import math
import random

from .geometry import is_finite_number, safe_direction
from .quadtree import build_quadtree, repulsion_force
from .settings import DEFAULT_HEIGHT, DEFAULT_WIDTH, Settings, make_settings

logger = logging.getLogger(__name__)

# Half-width of the square around the center that fresh nodes land in
INITIAL_JITTER = 10.0


class LayoutValidationError(ValueError):
    pass


def validate_elements(nodes, edges):
    if not isinstance(nodes, (list, tuple)):
        raise LayoutValidationError(f"nodes must be a list, got {type(nodes).__name__}")
    if not isinstance(edges, (list, tuple)):
        raise LayoutValidationError(f"edges must be a list, got {type(edges).__name__}")

    seen = set()
    for index, node in enumerate(nodes):
        node_id = getattr(node, "id", None)
        if node_id is None:
            raise LayoutValidationError(f"Node at index {index} has no id")
        try:
            if node_id in seen:
                raise LayoutValidationError(f"Duplicate node id {node_id!r}")
            seen.add(node_id)
        except TypeError:
            raise LayoutValidationError(f"Node id {node_id!r} is not hashable")

    count = len(nodes)
    for index, edge in enumerate(edges):
        for end in ("source", "target"):
            ref = getattr(edge, end, None)
            if isinstance(ref, bool) or not isinstance(ref, int) or not 0 <= ref < count:
                raise LayoutValidationError(f"Edge {index} {end} {ref!r} does not reference a known node")


def _dimension(value, default, name):
    if is_finite_number(value) and value > 0:
        return float(value)
    logger.warning(f"Invalid {name} {value!r}, using default {default}")
    return default


def jittered_center(width, height):
    return (
        width / 2 + random.uniform(-INITIAL_JITTER, INITIAL_JITTER),
        height / 2 + random.uniform(-INITIAL_JITTER, INITIAL_JITTER),
    )


def initialize_elements(nodes, edges, width=DEFAULT_WIDTH, height=DEFAULT_HEIGHT):
    """
    Gives fresh nodes and edges usable starting values.

    Nodes without a valid position are placed near the center of the
    viewport with a little jitter so they don't sit exactly on top of each
    other. Missing velocities become zero, missing edge weights become 1.
    """
    width = _dimension(width, DEFAULT_WIDTH, "width")
    height = _dimension(height, DEFAULT_HEIGHT, "height")

    for node in nodes:
        if not (is_finite_number(node.x) and is_finite_number(node.y)):
            node.x, node.y = jittered_center(width, height)
        if not is_finite_number(node.vx):
            node.vx = 0.0
        if not is_finite_number(node.vy):
            node.vy = 0.0

    for edge in edges:
        if not is_finite_number(edge.weight):
            edge.weight = 1.0


def sanitize_elements(nodes, edges, width, height):
    reset = 0
    for node in nodes:
        if not all(is_finite_number(v) for v in (node.x, node.y, node.vx, node.vy)):
            node.x, node.y = jittered_center(width, height)
            node.vx = 0.0
            node.vy = 0.0
            reset += 1
    if reset:
        logger.debug(f"Reset {reset} nodes with non-finite position or velocity")

    for edge in edges:
        if not is_finite_number(edge.weight):
            edge.weight = 1.0


def compute_degrees(nodes, edges):
    # Every node counts itself once
    for node in nodes:
        node.degree = 1.0
    for edge in edges:
        nodes[edge.source].degree += edge.weight
        nodes[edge.target].degree += edge.weight
    # Dissimilar (negative) edges can pull the sum below the self term
    for node in nodes:
        node.degree = max(1.0, node.degree)


def _weight_power(weight, exponent):
    # Keeps the sign so dissimilar (negative) edges push instead of pull
    return math.copysign(abs(weight) ** exponent, weight)


def apply_attraction(nodes, edges, k, edge_weight_influence):
    for edge in edges:
        source = nodes[edge.source]
        target = nodes[edge.target]

        ux, uy, dist = safe_direction(target.x - source.x, target.y - source.y)
        if dist == 0:
            continue

        try:
            denominator = k * _weight_power(edge.weight, edge_weight_influence)
            force = dist * dist / denominator
        except (ZeroDivisionError, OverflowError):
            continue
        if not math.isfinite(force):
            logger.warning(f"Dropping degenerate attraction between {source.id} and {target.id}")
            continue

        source.vx += ux * force
        source.vy += uy * force
        target.vx -= ux * force
        target.vy -= uy * force


def apply_gravity(nodes, gravity, scaling_ratio, center):
    cx, cy = center
    for node in nodes:
        mass = node.mass if node.mass is not None else node.degree + 1
        ux, uy, dist = safe_direction(cx - node.x, cy - node.y)
        if dist == 0:
            continue
        force = gravity * mass * scaling_ratio
        node.vx += ux * force
        node.vy += uy * force


def hub_factor(degree):
    if is_finite_number(degree) and degree > 0:
        return degree
    return 1.0


def apply_repulsion(nodes, tree, theta, strength, dissuade_hubs):
    for node in nodes:
        fx, fy = tree.calculate_repulsion(node, theta, strength)
        if dissuade_hubs:
            factor = hub_factor(node.degree)
            fx *= factor
            fy *= factor
        node.vx += fx
        node.vy += fy


def exact_repulsion(node, nodes, strength):
    """All-pairs repulsion on `node`, the value the quadtree approximates."""
    force_x = 0.0
    force_y = 0.0
    for other in nodes:
        if other is node:
            continue
        fx, fy = repulsion_force(node.x - other.x, node.y - other.y, strength)
        force_x += fx
        force_y += fy
    return force_x, force_y


def apply_exact_repulsion(nodes, strength, dissuade_hubs=False):
    # Compute everything first, positions don't change but keep it order-independent
    forces = [exact_repulsion(node, nodes, strength) for node in nodes]
    for node, (fx, fy) in zip(nodes, forces):
        factor = hub_factor(node.degree) if dissuade_hubs else 1.0
        node.vx += fx * factor
        node.vy += fy * factor


def apply_prevent_overlap(nodes, node_radius):
    radii = [node_radius(node) for node in nodes]
    for i in range(len(nodes)):
        a = nodes[i]
        for j in range(i + 1, len(nodes)):
            b = nodes[j]
            ux, uy, dist = safe_direction(b.x - a.x, b.y - a.y)
            min_dist = radii[i] + radii[j]
            if dist == 0 or dist >= min_dist:
                continue

            push = (min_dist - dist) / 2
            a.x -= ux * push
            a.y -= uy * push
            b.x += ux * push
            b.y += uy * push


def cooling_factor(alpha, cooling_rate):
    return min(1.0, max(0.0, (1 - alpha) * (1 - cooling_rate)))


def update_velocity(node, cooling, max_velocity):
    node.vx *= cooling
    node.vy *= cooling

    length = math.hypot(node.vx, node.vy)
    if not math.isfinite(length):
        logger.warning(f"Velocity of node {node.id} overflowed, stopping it")
        node.vx = 0.0
        node.vy = 0.0
    elif length > max_velocity:
        node.vx *= max_velocity / length
        node.vy *= max_velocity / length


def update_position(node, width, height):
    node.x += node.vx
    node.y += node.vy

    # Keep the node inside the viewport
    node.x = min(width, max(0.0, node.x))
    node.y = min(height, max(0.0, node.y))


def step(alpha, settings, nodes, edges):
    """
    Runs one layout tick.

    Raises LayoutValidationError before touching any node when the input
    is malformed. `settings` may be a Settings or a mapping of overrides.
    """
    if not isinstance(settings, Settings):
        settings = make_settings(settings)

    validate_elements(nodes, edges)
    if not nodes:
        return

    width, height = settings.width, settings.height

    sanitize_elements(nodes, edges, width, height)
    compute_degrees(nodes, edges)

    # Characteristic edge length for this many nodes in this viewport
    k = math.sqrt(width * height / len(nodes))

    apply_attraction(nodes, edges, k, settings.edge_weight_influence)
    apply_gravity(nodes, settings.gravity, settings.scaling_ratio, settings.center)

    tree = build_quadtree(nodes)
    apply_repulsion(nodes, tree, settings.barnes_hut_theta, settings.repulsion_strength, settings.dissuade_hubs)

    if settings.prevent_overlap:
        apply_prevent_overlap(nodes, settings.node_radius)

    cooling = cooling_factor(alpha, settings.cooling_rate)
    for node in nodes:
        update_velocity(node, cooling, settings.max_velocity)
        update_position(node, width, height)

    logger.debug(f"Layout tick: alpha={alpha:.4f} cooling={cooling:.4f} nodes={len(nodes)} edges={len(edges)}")
