import random

from conftest import make_node
from topology import advance, build_nodes, distance


def test_build_nodes_places_single_jammer_inside_arena(rng):
    nodes = build_nodes(40, (800.0, 500.0), 0.25, 0, rng)
    assert [n.nid for n in nodes] == list(range(40))
    assert [n.nid for n in nodes if n.is_jammer] == [0]
    for n in nodes:
        assert 0 <= n.x <= 800 and 0 <= n.y <= 500
        assert abs(n.vx) <= 0.25 and abs(n.vy) <= 0.25
        assert not n.is_target


def test_advance_moves_by_velocity():
    n = make_node(1, 10.0, 20.0, vx=0.5, vy=-0.25)
    advance([n], 800, 500)
    assert (n.x, n.y) == (10.5, 19.75)
    assert (n.vx, n.vy) == (0.5, -0.25)


def test_bounce_flips_after_the_move():
    n = make_node(1, 799.9, 250.0, vx=0.25)
    advance([n], 800, 500)
    assert n.x > 800
    assert n.vx == -0.25
    advance([n], 800, 500)
    assert n.x < 800
    assert n.vx == -0.25


def test_bounce_on_lower_wall():
    n = make_node(1, 100.0, 0.1, vy=-0.2)
    advance([n], 800, 500)
    assert n.y < 0
    assert n.vy == 0.2


def test_nodes_stay_within_arena_for_long_run():
    rng = random.Random(7)
    nodes = build_nodes(30, (800.0, 500.0), 0.25, 0, rng)
    for _ in range(5000):
        advance(nodes, 800, 500)
        for n in nodes:
            assert -0.25 <= n.x <= 800.25
            assert -0.25 <= n.y <= 500.25


def test_advance_keeps_identity_and_roles():
    nodes = [make_node(0, 5, 5, 1, 1, jammer=True), make_node(1, 50, 50, -1, 0)]
    advance(nodes, 800, 500)
    assert [n.nid for n in nodes] == [0, 1]
    assert nodes[0].is_jammer and not nodes[1].is_jammer
    assert all(n.battery == 100.0 for n in nodes)


def test_distance():
    assert distance(make_node(0, 0, 0), make_node(1, 3, 4)) == 5.0
