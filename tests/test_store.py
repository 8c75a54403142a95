import random

from edge import Edge
from generator import generate_level
from node import Node
from store import LevelStore

EXTENT = (800.0, 600.0)


def _stored_level(store, level=1):
    result = generate_level(level, EXTENT, rng=random.Random(level))
    store.put_config(result.to_config(EXTENT))
    return result


def test_configs_are_stored_and_returned_as_copies():
    store = LevelStore()
    result = _stored_level(store, 2)
    got = store.get_config(2)
    assert got.nodes == result.nodes
    got.nodes[0].setPosition((3.0, 3.0))
    assert store.get_config(2).nodes[0].pos_tuple() == result.nodes[0].pos_tuple()
    assert store.get_config(5) is None
    assert store.levels() == [2]


def test_progress_is_per_level():
    store = LevelStore()
    nodes = [Node(0, (10, 10), neighbors=[1]), Node(1, (50, 50), neighbors=[0])]
    nodes[0].setDragging(True)
    store.save_progress(3, nodes, [Edge(0, 1)])
    assert store.load_progress(2) is None
    progress = store.load_progress(3)
    assert [n.pos_tuple() for n in progress.nodes] == [(10.0, 10.0), (50.0, 50.0)]
    assert not progress.nodes[0].isDragging()
    store.clear_progress()
    assert store.load_progress(3) is None


def test_empty_progress_means_generate_fresh():
    store = LevelStore()
    store.save_progress(1, [], [])
    assert store.load_progress(1) is None


def test_json_round_trip(tmp_path):
    store = LevelStore()
    result = _stored_level(store, 1)
    store.current_level = 4
    store.save_progress(1, result.nodes, result.edges, completed=True)

    path = tmp_path / "save.json"
    assert store.save_to_json(path)

    loaded = LevelStore()
    assert loaded.load_from_json(path)
    assert loaded.current_level == 4
    assert loaded.get_config(1) == store.get_config(1)
    progress = loaded.load_progress(1)
    assert progress.completed
    assert progress.nodes == store.load_progress(1).nodes


def test_load_rejects_bad_files(tmp_path):
    store = LevelStore()
    _stored_level(store, 1)

    garbage = tmp_path / "garbage.json"
    garbage.write_text("not json")
    assert not store.load_from_json(garbage)
    assert not store.load_from_json(tmp_path / "missing.json")

    malformed = tmp_path / "malformed.json"
    malformed.write_text('{"levelConfigs": [{"levelNumber": 1}]}')
    assert not store.load_from_json(malformed)

    # Failed loads leave the store untouched
    assert store.levels() == [1]


def test_reset():
    store = LevelStore()
    _stored_level(store, 1)
    store.current_level = 3
    store.reset()
    assert store.current_level == 1
    assert store.levels() == []
