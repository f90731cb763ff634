"""
Rebuild the task hierarchy of one project from the flat list the API returns.

Roots and siblings keep the order in which the tasks were fetched, so the same
input always produces the same forest.
"""
from __future__ import annotations

from collections import Counter, defaultdict
from typing import Iterable

from .errors import CyclicHierarchy, DuplicateIdentifier
from .models import Task


def _index(tasks: list[Task]) -> dict[str, Task]:
    counts = Counter(t.id for t in tasks)
    dupes = [tid for tid, n in counts.items() if n > 1]
    if dupes:
        raise DuplicateIdentifier(dupes)
    return {t.id: t for t in tasks}


def _depth(task: Task, by_id: dict[str, Task]) -> int:
    """Count hops up the parent chain; a dangling parent ends the chain."""
    limit = len(by_id)
    hops = 0
    cur = task
    while cur.parent_id is not None and cur.parent_id in by_id:
        hops += 1
        if hops >= limit:
            raise CyclicHierarchy(task.id)
        cur = by_id[cur.parent_id]
    return hops


def build_forest(tasks: Iterable[Task]) -> list[Task]:
    """
    Attach every task to its parent and set its depth.

    Returns the root tasks; every other task is reachable exactly once through
    some root's ``children``. Raises DuplicateIdentifier or CyclicHierarchy.
    """
    flat = list(tasks)
    by_id = _index(flat)

    for t in flat:
        t.depth = _depth(t, by_id)

    roots: list[Task] = []
    children: dict[str, list[Task]] = defaultdict(list)
    for t in flat:
        if t.parent_id is not None and t.parent_id in by_id:
            children[t.parent_id].append(t)
        else:
            roots.append(t)

    for t in flat:
        t.children = children.get(t.id, [])
    return roots


def count_nodes(forest: Iterable[Task]) -> int:
    return sum(1 for root in forest for _ in root.walk())
