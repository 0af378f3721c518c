"""Unit tests for lane packing, row computation and parent/child nesting."""

from __future__ import annotations

import random
from datetime import date, timedelta
from typing import Any

from trackline.core.contracts import TimelineEvent
from trackline.core.layout import compute_rows, group_by_category, nesting, overlap, pack_lanes


def d(day: int, month: int = 1) -> date:
    return date(2023, month, day)


def test_overlap_is_strict(make_event: Any) -> None:
    """Touching spans and zero-length points never overlap."""
    a = make_event(1, d(1), d(10))
    assert overlap(a, make_event(2, d(5), d(20)))
    assert not overlap(a, make_event(3, d(10), d(15)))
    assert not overlap(make_event(4, d(5), type="milestone"), make_event(5, d(5), type="milestone"))


def test_overlapping_work_events_get_two_rows(make_event: Any) -> None:
    """[Jan 1-10] and [Jan 5-20] in "Work" land on rows 0 and 1."""
    events = [make_event(1, d(1), d(10)), make_event(2, d(5), d(20))]
    rows = {ev.id: ev.row for ev in compute_rows(events)}
    assert rows == {1: 0, 2: 1}

    # Insertion order does not matter: the earlier start still gets row 0.
    rows = {ev.id: ev.row for ev in compute_rows(list(reversed(events)))}
    assert rows == {1: 0, 2: 1}


def test_free_row_is_reused(make_event: Any) -> None:
    """A later event reuses the lowest row no overlapping event occupies."""
    events = [
        make_event(1, d(1), d(10)),
        make_event(2, d(5), d(20)),
        make_event(3, d(11), d(15)),
    ]
    assert pack_lanes(events) == {1: 0, 2: 1, 3: 0}


def test_ties_keep_insertion_order(make_event: Any) -> None:
    """Events with equal start dates are placed in the order they were given."""
    events = [make_event(7, d(1), d(5)), make_event(3, d(1), d(5))]
    assert pack_lanes(events) == {7: 0, 3: 1}


def test_categories_are_packed_independently(make_event: Any) -> None:
    """Overlap across categories does not push events apart."""
    events = [
        make_event(1, d(1), d(10), category="Work"),
        make_event(2, d(5), d(20), category="Home"),
        make_event(3, d(5), d(20), category=None),
    ]
    assert [ev.row for ev in compute_rows(events)] == [0, 0, 0]
    assert set(group_by_category(events)) == {"Work", "Home", "uncategorized"}


def test_unpositioned_events_are_skipped(make_event: Any) -> None:
    """Events without usable dates keep row None and block nothing."""
    events = [make_event(1, None), make_event(2, d(1), d(5))]
    out = compute_rows(events)
    assert out[0].row is None
    assert out[1].row == 0


def test_compute_rows_does_not_mutate_input(make_event: Any) -> None:
    """Rows are applied to copies; the input keeps its original values."""
    events = [make_event(1, d(1), d(10)), make_event(2, d(5), d(20))]
    out = compute_rows(events)
    assert all(ev.row is None for ev in events)
    assert [ev.id for ev in out] == [1, 2]


def _random_events(make_event: Any, count: int, seed: int) -> list[TimelineEvent]:
    rng = random.Random(seed)
    events: list[TimelineEvent] = []
    for i in range(1, count + 1):
        start = d(1) + timedelta(days=rng.randrange(0, 120))
        kind = rng.choice(["range", "range", "milestone"])
        end = start + timedelta(days=rng.randrange(0, 30)) if kind == "range" else None
        events.append(make_event(i, start, end, type=kind, category=rng.choice(["A", "B"])))
    return events


def test_rows_never_collide_and_are_minimal(make_event: Any) -> None:
    """Same-row events never overlap, and no event sits higher than it must."""
    for seed in range(5):
        out = compute_rows(_random_events(make_event, 60, seed))
        for ev in out:
            peers = [o for o in out if o.category == ev.category and o.id != ev.id]
            for other in peers:
                if other.row == ev.row:
                    assert not overlap(ev, other), (ev, other)
            assert ev.row is not None
            for lower in range(ev.row):
                assert any(o.row == lower and overlap(ev, o) for o in peers)


def test_nesting_anchors_children_under_parents(make_event: Any) -> None:
    """Children of an is_parent event anchor to the parent's row."""
    parent = make_event(1, d(1), d(30), is_parent=True, event_id="P")
    blocker = make_event(2, d(1), d(30), event_id="B")
    child = make_event(3, d(5), d(10), parent_id="P", parent=1, event_id="C")
    grandchild = make_event(4, d(6), d(7), parent_id="C", parent=3, event_id="G")

    laid_out = compute_rows([parent, blocker, child, grandchild])
    info = nesting(laid_out)

    assert info[1].depth == 0 and info[1].anchor_row == 0
    assert info[3].depth == 1 and info[3].anchor_row == 0
    # "C" is not flagged is_parent, so the grandchild anchors to its own row.
    assert info[4].depth == 2 and info[4].anchor_row == info[4].row


def test_nesting_survives_parent_cycles(make_event: Any) -> None:
    """A parent cycle terminates instead of looping forever."""
    a = make_event(1, d(1), d(2), parent=2)
    b = make_event(2, d(3), d(4), parent=1)
    info = nesting(compute_rows([a, b]))
    assert info[1].depth == 1 and info[2].depth == 1
