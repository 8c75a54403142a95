import random

import pytest

from game import Game
from generator import PuzzleGenerator
from intersections import is_solved
from node import Node
from edge import Edge
from store import LevelStore

EXTENT = (800.0, 600.0)


@pytest.fixture
def game():
    g = Game(EXTENT, LevelStore(), PuzzleGenerator(rng=random.Random(4)))
    g.initialize()
    return g


def positions(nodes):
    return [n.pos_tuple() for n in nodes]


def test_initialize_generates_and_stores_level(game):
    assert game.current_level == 1
    assert len(game.nodes) == 6
    assert game.store.levels() == [1]
    stats = game.get_stats()
    assert stats["nodes"] == 6 and stats["target_degree"] == 3
    assert stats["solved"] == is_solved(game.edges)


def test_drag_clamps_into_canvas(game):
    node = game.nodes[0]
    assert game.start_drag(node.getId())
    assert node.isDragging()
    game.drag(node.getId(), (-100.0, 10000.0))
    assert node.pos_tuple() == (20.0, 580.0)
    game.end_drag(node.getId())
    assert not node.isDragging()
    assert game.dragged_node_id is None


def test_drag_unknown_node_is_ignored(game):
    assert not game.start_drag(99)
    assert not game.drag(99, (10.0, 10.0))
    assert not game.end_drag(99)


def test_find_node_at(game):
    node = game.nodes[2]
    x, y = node.pos_tuple()
    assert game.find_node_at((x + 5.0, y - 5.0)) is not None
    assert game.find_node_at((-500.0, -500.0)) is None


def test_progress_survives_a_new_session(game):
    node_id = game.nodes[1].getId()
    game.start_drag(node_id)
    game.drag(node_id, (400.0, 300.0))
    game.end_drag(node_id)

    resumed = Game(EXTENT, game.store)
    resumed.initialize()
    assert positions(resumed.nodes) == positions(game.nodes)
    assert resumed.solution == game.solution


def test_restart_restores_generated_layout(game):
    generated = positions(game.nodes)
    node_id = game.nodes[0].getId()
    game.start_drag(node_id)
    game.drag(node_id, (123.0, 321.0))
    game.end_drag(node_id)

    game.restart_level()
    assert positions(game.nodes) == generated
    assert game.store.load_progress(1) is None


def test_solving_completes_the_level(game):
    results = []
    for target in game.solution.nodes:
        nid = target.getId()
        game.start_drag(nid)
        game.drag(nid, target.getPosition())
        results.append(game.end_drag(nid))
    assert game.is_completed
    assert results.count(True) == 1
    assert is_solved(game.edges)


def test_show_and_hide_solution(game):
    before = positions(game.nodes)
    assert game.show_solution()
    assert game.is_revealing()
    assert is_solved(game.edges)
    assert not game.start_drag(game.nodes[0].getId())

    game.hide_solution()
    assert not game.is_revealing()
    assert positions(game.nodes) == before


def test_reveal_does_not_mutate_solution(game):
    snapshot = positions(game.solution.nodes)
    game.show_solution()
    game.nodes[0].setPosition((1.0, 1.0))
    game.hide_solution()
    assert positions(game.solution.nodes) == snapshot


def test_show_solution_without_solution():
    store = LevelStore()
    store.save_progress(1, [Node(0, (100, 100), neighbors=[1]), Node(1, (200, 200), neighbors=[0])],
                        [Edge(0, 1)])
    g = Game(EXTENT, store)
    g.initialize()
    assert g.solution is None
    assert not g.show_solution()


def test_next_level_and_new_game(game):
    game.next_level()
    assert game.current_level == 2
    assert game.parameters.target_degree == 4
    assert game.store.levels() == [1, 2]

    game.new_game()
    assert game.current_level == 1
    assert game.store.levels() == [1]


def test_resize_forces_regeneration_on_restart(game):
    stored_before = game.store.get_config(1)
    game.resize((1024.0, 768.0))
    game.restart_level()
    stored_after = game.store.get_config(1)
    assert stored_after.matches(1, (1024.0, 768.0))
    assert not stored_before.matches(1, (1024.0, 768.0))


def test_crossings_for_node_follow_the_flags(game):
    crossing_ids = {e.key() for e in game.edges if e.isCrossing()}
    for n in game.nodes:
        for e in game.crossings_for_node(n.getId()):
            assert e.key() in crossing_ids
    assert game.crossings_for_node(99) == []


def test_drag_released_during_reveal_is_dropped(game):
    node_id = game.nodes[0].getId()
    game.start_drag(node_id)
    assert game.show_solution()

    assert not game.end_drag(node_id)
    assert game.dragged_node_id is None
    assert not game.is_completed
    assert game.store.load_progress(1) is None

    game.hide_solution()
    assert not game.is_completed
    assert not any(n.isDragging() for n in game.nodes)
    assert game.get_stats()["solved"] == is_solved(game.edges)


def test_restart_resets_parameters_and_drag_state(game):
    game.next_level()
    node_id = game.nodes[0].getId()
    game.start_drag(node_id)
    game.restart_level()
    assert game.parameters.level_number == 2
    assert game.parameters.target_degree == 4
    assert game.dragged_node_id is None
