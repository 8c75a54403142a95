import pytest
from PyQt5.QtCore import QPointF

from edge import Edge
from level import (
    LevelConfig, Solution, calculate_level_parameters,
    edge_from_dict, node_from_dict, node_to_dict, topology,
)
from node import Node


@pytest.mark.parametrize(
    "level, nodes, degree",
    [(1, 6, 3), (2, 6, 4), (3, 6, 5), (4, 7, 3), (6, 7, 5), (7, 8, 3), (10, 9, 3)],
)
def test_level_parameters(level, nodes, degree):
    p = calculate_level_parameters(level)
    assert (p.node_count, p.target_degree) == (nodes, degree)


def test_level_parameters_never_decrease():
    prev = calculate_level_parameters(1)
    for level in range(2, 40):
        cur = calculate_level_parameters(level)
        assert (cur.node_count, cur.target_degree) != (prev.node_count, prev.target_degree)
        assert cur.node_count >= prev.node_count
        prev = cur


def test_level_below_one_is_clamped():
    assert calculate_level_parameters(0) == calculate_level_parameters(1)


def test_edge_rejects_loops_and_keys_are_unordered():
    with pytest.raises(ValueError):
        Edge(3, 3)
    assert Edge(5, 2).key() == Edge(2, 5).key() == (2, 5)
    assert topology([Edge(5, 2), Edge(1, 0)]) == {(2, 5), (0, 1)}


def test_node_neighbors():
    n = Node(0, (1, 2), neighbors=[3, 3, 4])
    assert n.getDegree() == 2
    with pytest.raises(ValueError):
        n.connect(0)


def test_node_record_round_trip_drops_dragging():
    n = Node(4, (10.5, 20.0), 20.0, [1, 2])
    n.setDragging(True)
    data = node_to_dict(n)
    assert data == {
        "id": 4, "position": {"x": 10.5, "y": 20.0}, "radius": 20.0,
        "isDragging": False, "connections": [1, 2],
    }
    back = node_from_dict(data)
    assert back.pos_tuple() == (10.5, 20.0) and back.getNeighbors() == (1, 2)


@pytest.mark.parametrize("record", [{"id": 1}, {"position": {"x": 1, "y": 2}}])
def test_malformed_node_record(record):
    with pytest.raises(ValueError):
        node_from_dict(record)


def test_malformed_edge_record():
    with pytest.raises(ValueError):
        edge_from_dict({"from": 1})


def _config():
    nodes = [Node(0, (0, 0), neighbors=[1]), Node(1, (10, 0), neighbors=[0])]
    edges = [Edge(0, 1)]
    return LevelConfig(2, QPointF(800, 600), nodes, edges, Solution(
        [Node(0, (1, 1), neighbors=[1]), Node(1, (5, 5), neighbors=[0])], [Edge(0, 1)]))


def test_level_config_matches_exact_request():
    cfg = _config()
    assert cfg.matches(2, (800, 600))
    assert not cfg.matches(2, (800, 601))
    assert not cfg.matches(3, (800, 600))


def test_level_config_copy_is_independent():
    cfg = _config()
    dup = cfg.copy()
    assert dup == cfg
    dup.nodes[0].setPosition((77, 77))
    dup.solution.nodes[1].connect(9)
    dup.canvas_size.setX(1.0)
    assert cfg.nodes[0].pos_tuple() == (0.0, 0.0)
    assert cfg.solution.nodes[1].getNeighbors() == (0,)
    assert cfg.canvas_size.x() == 800.0


def test_level_config_dict_round_trip():
    cfg = _config()
    back = LevelConfig.from_dict(cfg.to_dict())
    assert back == cfg
    assert back.to_dict()["canvasSize"] == {"x": 800.0, "y": 600.0}
