import pytest

from edge import Edge
from intersections import (
    NodeLookupError, compute_crossing_flags, count_crossings,
    crossing_edges_for_node, is_solved, shares_endpoint, update_intersections,
)
from node import Node


def square():
    return [
        Node(0, (0, 0)),
        Node(1, (100, 0)),
        Node(2, (100, 100)),
        Node(3, (0, 100)),
    ]


def sides():
    return [Edge(0, 1), Edge(1, 2), Edge(2, 3), Edge(3, 0)]


def test_square_has_no_crossings():
    nodes, edges = square(), sides()
    update_intersections(nodes, edges)
    assert [e.isCrossing() for e in edges] == [False] * 4
    assert is_solved(edges)


def test_single_diagonal_does_not_cross():
    nodes, edges = square(), sides() + [Edge(0, 2)]
    update_intersections(nodes, edges)
    assert not any(e.isCrossing() for e in edges)


def test_both_diagonals_cross_and_sides_are_unaffected():
    nodes, edges = square(), sides() + [Edge(0, 2), Edge(1, 3)]
    update_intersections(nodes, edges)
    assert [e.isCrossing() for e in edges] == [False, False, False, False, True, True]
    assert not is_solved(edges)
    assert count_crossings(nodes, edges) == 1


def test_update_is_idempotent():
    nodes, edges = square(), sides() + [Edge(0, 2), Edge(1, 3)]
    update_intersections(nodes, edges)
    first = [e.isCrossing() for e in edges]
    update_intersections(nodes, edges)
    assert [e.isCrossing() for e in edges] == first


def test_stale_flags_are_reset():
    nodes = square()
    edges = [Edge(0, 1, crossing=True), Edge(2, 3, crossing=True)]
    update_intersections(nodes, edges)
    assert not any(e.isCrossing() for e in edges)


def test_adjacent_collinear_overlap_is_exempt():
    nodes = [Node(0, (0, 0)), Node(1, (100, 0)), Node(2, (50, 0))]
    edges = [Edge(0, 1), Edge(0, 2)]
    assert shares_endpoint(edges[0], edges[1])
    update_intersections(nodes, edges)
    assert not any(e.isCrossing() for e in edges)


def test_adjacent_edges_touching_only_at_shared_vertex():
    nodes = [Node(0, (0, 0)), Node(1, (100, 0)), Node(2, (0, 100))]
    edges = [Edge(0, 1), Edge(0, 2), Edge(1, 2)]
    update_intersections(nodes, edges)
    assert is_solved(edges)


def test_compute_crossing_flags_leaves_edges_untouched():
    nodes, edges = square(), [Edge(0, 2), Edge(1, 3)]
    assert compute_crossing_flags(nodes, edges) == [True, True]
    assert not any(e.isCrossing() for e in edges)


def test_moving_a_node_resolves_crossing():
    nodes, edges = square(), sides() + [Edge(0, 2), Edge(1, 3)]
    update_intersections(nodes, edges)
    nodes[3].setPosition((150, 50))
    update_intersections(nodes, edges)
    assert not edges[4].isCrossing()


def test_unknown_node_fails_fast():
    nodes = square()
    edges = [Edge(0, 1), Edge(2, 7)]
    with pytest.raises(NodeLookupError):
        update_intersections(nodes, edges)
    with pytest.raises(LookupError):
        compute_crossing_flags(nodes, edges)


def test_crossing_edges_for_node():
    nodes, edges = square(), sides() + [Edge(0, 2), Edge(1, 3)]
    crossing = crossing_edges_for_node(0, nodes, edges)
    assert [e.key() for e in crossing] == [(1, 3)]
    assert crossing_edges_for_node(42, nodes, edges) == []
