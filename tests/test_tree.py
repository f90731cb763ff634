"""Tests for rebuilding the task hierarchy."""

import pytest

from todoist_org.errors import CyclicHierarchy, DuplicateIdentifier
from todoist_org.tree import build_forest, count_nodes


def _parents(forest):
    out = {}
    for root in forest:
        out[root.id] = None
        for node in root.walk():
            for child in node.children:
                out[child.id] = node
    return out


def test_every_task_appears_once(make_task):
    tasks = [
        make_task("c", "b"),
        make_task("a"),
        make_task("b", "a"),
        make_task("d", "a"),
        make_task("e"),
        make_task("f", "e"),
    ]
    forest = build_forest(tasks)
    ids = [n.id for root in forest for n in root.walk()]
    assert sorted(ids) == ["a", "b", "c", "d", "e", "f"]
    assert count_nodes(forest) == len(tasks)


def test_depth_is_parent_depth_plus_one(make_task):
    tasks = [make_task("d", "c"), make_task("c", "b"), make_task("b", "a"), make_task("a"), make_task("x")]
    forest = build_forest(tasks)
    parents = _parents(forest)
    for root in forest:
        assert root.depth == 0
        for node in root.walk():
            parent = parents[node.id]
            if parent is not None:
                assert node.depth == parent.depth + 1
    assert {t.id: t.depth for t in tasks} == {"a": 0, "b": 1, "c": 2, "d": 3, "x": 0}


def test_order_follows_input_sequence(make_task):
    tasks = [make_task("z"), make_task("z2", "z"), make_task("a"), make_task("z1", "z")]
    forest = build_forest(tasks)
    assert [r.id for r in forest] == ["z", "a"]
    assert [c.id for c in forest[0].children] == ["z2", "z1"]


def test_dangling_parent_becomes_root(make_task):
    forest = build_forest([make_task("a"), make_task("b", "missing")])
    assert [r.id for r in forest] == ["a", "b"]
    assert forest[1].depth == 0


def test_self_reference_is_cyclic(make_task):
    with pytest.raises(CyclicHierarchy):
        build_forest([make_task("a", "a")])


def test_two_task_cycle(make_task):
    with pytest.raises(CyclicHierarchy):
        build_forest([make_task("a", "b"), make_task("b", "a")])


def test_cycle_among_other_tasks(make_task):
    tasks = [make_task("root"), make_task("a", "c"), make_task("b", "a"), make_task("c", "b")]
    with pytest.raises(CyclicHierarchy):
        build_forest(tasks)


def test_duplicate_id_is_flagged(make_task):
    with pytest.raises(DuplicateIdentifier) as exc:
        build_forest([make_task("a"), make_task("b"), make_task("a")])
    assert exc.value.task_ids == ["a"]


def test_empty_input():
    assert build_forest([]) == []


def test_reported_depth_is_ignored(make_task):
    t = make_task("a")
    t.depth = 7
    build_forest([t])
    assert t.depth == 0
