import math
import random

import pytest

from feedgraph.force_atlas import exact_repulsion
from feedgraph.quadtree import Internal, Leaf, QuadTree, build_quadtree, repulsion_force

from conftest import make_node


def random_nodes(count, seed=7):
    rng = random.Random(seed)
    return [make_node(i, rng.uniform(0, 800), rng.uniform(0, 600)) for i in range(count)]


def test_insert_outside_bounds_is_rejected():
    tree = QuadTree(0, 10, 0, 10)
    assert tree.insert(make_node("out", 11, 5)) is False
    assert tree.count == 0
    assert isinstance(tree.state, Leaf)


def test_second_point_subdivides_and_pushes_points_down():
    tree = QuadTree(0, 10, 0, 10)
    assert tree.insert(make_node("a", 9, 9))
    assert not tree.divided

    assert tree.insert(make_node("b", 2, 1))
    assert tree.divided
    assert isinstance(tree.state, Internal)
    assert tree.count == 2
    assert tree.state.southeast.count == 1
    assert tree.state.northwest.count == 1


def test_midpoint_ties_go_north_west():
    tree = QuadTree(0, 10, 0, 10)
    tree.insert(make_node("a", 9, 9))
    tree.insert(make_node("mid", 5, 5))
    assert tree.state.northwest.count == 1
    assert tree.state.northeast.count == 0
    assert tree.state.southwest.count == 0


def test_build_covers_every_node():
    nodes = random_nodes(50)
    tree = build_quadtree(nodes)
    assert tree.count == 50
    x_min, x_max, y_min, y_max = tree.bounds
    assert x_min == min(n.x for n in nodes)
    assert y_max == max(n.y for n in nodes)


def test_empty_tree_has_no_force():
    tree = build_quadtree([])
    assert tree.calculate_repulsion(make_node("x", 1, 1), 1.2, 100.0) == (0.0, 0.0)


def test_single_point_does_not_repel_itself():
    node = make_node("solo", 3, 4)
    tree = build_quadtree([node])
    assert tree.calculate_repulsion(node, 1.2, 1000.0) == (0.0, 0.0)


def test_coincident_points_are_stored_and_exert_no_force():
    nodes = [make_node(i, 50.0, 50.0) for i in range(3)]
    tree = build_quadtree(nodes)
    assert tree.count == 3
    for node in nodes:
        fx, fy = tree.calculate_repulsion(node, 1.2, 1000.0)
        assert (fx, fy) == (0.0, 0.0)


def test_direct_repulsion_points_away_from_other():
    a = make_node("a", 0.0, 0.0)
    b = make_node("b", 10.0, 0.0)
    tree = build_quadtree([a, b])
    fx, fy = tree.calculate_repulsion(a, 1.2, 100.0)
    assert fx == pytest.approx(-1.0)
    assert fy == pytest.approx(0.0)


def test_zero_theta_matches_exact_pairwise_sum():
    nodes = random_nodes(40)
    tree = build_quadtree(nodes)
    for node in nodes:
        approx = tree.calculate_repulsion(node, 0.0, 5000.0)
        exact = exact_repulsion(node, nodes, 5000.0)
        assert approx[0] == pytest.approx(exact[0], rel=1e-9, abs=1e-9)
        assert approx[1] == pytest.approx(exact[1], rel=1e-9, abs=1e-9)


def test_distant_cluster_is_aggregated_at_region_center():
    query = make_node("q", 0.0, 0.0)
    cluster = [make_node("c1", 1000.0, 1000.0), make_node("c2", 1000.0, 999.0)]
    tree = QuadTree(999.0, 1001.0, 999.0, 1001.0)
    for node in cluster:
        tree.insert(node)

    fx, fy = tree.calculate_repulsion(query, 1.2, 100.0)
    expected = repulsion_force(-1000.0, -1000.0, 200.0)
    assert fx == pytest.approx(expected[0])
    assert fy == pytest.approx(expected[1])


def test_repulsion_force_degenerate_cases():
    assert repulsion_force(0.0, 0.0, 100.0) == (0.0, 0.0)
    assert repulsion_force(1.0, 0.0, float("nan")) == (0.0, 0.0)
    fx, fy = repulsion_force(3.0, 4.0, 25.0)
    assert math.hypot(fx, fy) == pytest.approx(1.0)
