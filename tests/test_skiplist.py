import random
import threading

import pytest

from kvraft.skiplist import Node, SkipList


@pytest.fixture
def filled():
    sl = SkipList(6)
    for key, value in [(5, "e"), (1, "a"), (3, "c"), (2, "b"), (4, "d")]:
        sl.insert_element(key, value)
    return sl


def test_node_has_one_link_per_level():
    node = Node("k", "v", 3)
    assert node.forward == [None, None, None]
    assert node.key == "k"
    assert node.value == "v"


def test_invalid_max_level():
    with pytest.raises(ValueError):
        SkipList(0)


def test_insert_and_search(filled):
    assert filled.search_element(3) == "c"
    assert filled.search_element(1) == "a"
    assert filled.size() == 5
    assert len(filled) == 5


def test_search_missing_raises(filled):
    with pytest.raises(KeyError):
        filled.search_element(42)


def test_search_on_empty_list():
    sl = SkipList(4)
    with pytest.raises(KeyError):
        sl.search_element("x")
    assert sl.size() == 0


def test_duplicate_insert_keeps_first_value(filled):
    assert filled.insert_element(3, "other") is False
    assert filled.search_element(3) == "c"
    assert filled.size() == 5


def test_insert_reports_new_key():
    sl = SkipList(3)
    assert sl.insert_element("k", "v") is True
    assert "k" in sl


def test_iteration_is_sorted(filled):
    assert [k for k, _ in filled] == [1, 2, 3, 4, 5]
    assert [v for _, v in filled] == ["a", "b", "c", "d", "e"]


def test_delete_element(filled):
    assert filled.delete_element(3) is True
    assert 3 not in filled
    assert filled.size() == 4
    assert [k for k, _ in filled] == [1, 2, 4, 5]


def test_delete_missing_is_noop(filled):
    assert filled.delete_element(99) is False
    assert filled.size() == 5


def test_delete_everything_empties_levels(filled):
    for key in [1, 2, 3, 4, 5]:
        filled.delete_element(key)
    assert filled.size() == 0
    assert filled.level == 0
    assert list(filled) == []


def test_insert_set_element_overwrites(filled):
    filled.insert_set_element(2, "new")
    assert filled.search_element(2) == "new"
    assert filled.size() == 5
    filled.insert_set_element(9, "z")
    assert filled.search_element(9) == "z"
    assert filled.size() == 6


def test_random_level_bounds():
    sl = SkipList(4)
    levels = {sl.get_random_level() for _ in range(2000)}
    assert levels <= {1, 2, 3, 4}
    assert 1 in levels


def test_random_level_capped_at_one():
    sl = SkipList(1)
    assert all(sl.get_random_level() == 1 for _ in range(200))


def test_level_never_exceeds_max():
    sl = SkipList(3)
    for i in range(200):
        sl.insert_element(i, str(i))
    assert 1 <= sl.level <= sl.max_level


def test_dump_and_load_round_trip(filled):
    snapshot = filled.dump_file()
    restored = SkipList(6)
    restored.load_file(snapshot)
    assert list(restored) == list(filled)
    assert restored.size() == filled.size()


def test_load_empty_string_does_nothing():
    sl = SkipList(4)
    sl.load_file("")
    assert sl.size() == 0


def test_load_keeps_existing_keys():
    source = SkipList(4)
    source.insert_element("a", "1")
    source.insert_element("b", "2")
    target = SkipList(4)
    target.insert_element("a", "keep")
    target.load_file(source.dump_file())
    assert target.search_element("a") == "keep"
    assert target.search_element("b") == "2"


@pytest.mark.parametrize("bad", ["not json", "[1, 2]", '{"keys": [1], "values": []}', '{"keys": 1}'])
def test_load_malformed_snapshot(bad):
    sl = SkipList(4)
    with pytest.raises(ValueError):
        sl.load_file(bad)


def test_display_list_shows_bottom_level(capsys):
    sl = SkipList(4)
    sl.insert_element(1, "a")
    sl.insert_element(2, "b")
    capsys.readouterr()
    sl.display_list()
    out = capsys.readouterr().out
    assert "*****Skip List*****" in out
    assert "Level 0: 1:a;2:b;" in out


def test_matches_dict_under_random_operations():
    rng = random.Random(7)
    sl = SkipList(8)
    model = {}
    for _ in range(500):
        key = rng.randrange(50)
        action = rng.random()
        if action < 0.5:
            sl.insert_set_element(key, key * 2)
            model[key] = key * 2
        elif action < 0.8:
            assert sl.delete_element(key) == (key in model)
            model.pop(key, None)
        else:
            assert sl.insert_element(key, -1) == (key not in model)
            model.setdefault(key, -1)
    assert list(sl) == sorted(model.items())
    assert sl.size() == len(model)


def test_concurrent_inserts():
    sl = SkipList(10)

    def worker(start):
        for i in range(start, start + 100):
            sl.insert_element(i, i)

    threads = [threading.Thread(target=worker, args=(n * 100,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert sl.size() == 400
    assert [k for k, _ in sl] == list(range(400))