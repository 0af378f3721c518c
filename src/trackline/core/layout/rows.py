"""
Row (lane) assignment for events sharing a category.

Algorithm
---------
First-fit greedy over an immutable snapshot of one category:

1. Drop unpositioned events (unparsable dates); they keep ``row=None``.
2. Order by ``start``, ties broken by insertion order (stable sort).
3. For each event, collect the rows of already placed events that overlap it
   and take the smallest row not in that set.

Overlap is strict: ``a.start < b.end and b.start < a.end``. Touching events
and zero-length events (milestones, life markers) never collide.

All assignments are computed first and applied afterwards through
``model_copy``; input events are never mutated.

Parent/child nesting is *not* part of lane packing. :func:`nesting` derives
the vertical anchor of a child from its resolved parent after rows exist.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Protocol

from trackline.core.contracts import UNCATEGORIZED, TimelineEvent


class Span(Protocol):
    """Anything with a start and end day."""

    @property
    def start(self) -> date | None: ...

    @property
    def end(self) -> date | None: ...


def overlap(a: Span, b: Span) -> bool:
    """Return True if the two spans overlap (strict; touching is not overlap)."""
    if a.start is None or a.end is None or b.start is None or b.end is None:
        return False
    return a.start < b.end and b.start < a.end


def group_by_category(events: Iterable[TimelineEvent]) -> dict[str, list[TimelineEvent]]:
    """Group events by category key, sending missing categories to ``UNCATEGORIZED``."""
    groups: dict[str, list[TimelineEvent]] = {}
    for ev in events:
        groups.setdefault(ev.category or UNCATEGORIZED, []).append(ev)
    return groups


def pack_lanes(events: Sequence[TimelineEvent]) -> dict[int, int]:
    """Assign a lane to every positioned event of a single category.

    Returns
    -------
    dict[int, int]
        Mapping of internal event ``id`` to row index. Unpositioned events
        are absent from the mapping.
    """
    indexed = [(i, ev) for i, ev in enumerate(events) if ev.is_positioned]
    # `start` is not None here; the index keeps ties in insertion order.
    indexed.sort(key=lambda pair: (pair[1].start, pair[0]))

    rows: dict[int, int] = {}
    placed: list[TimelineEvent] = []
    for _, ev in indexed:
        occupied = {rows[other.id] for other in placed if overlap(ev, other)}
        row = 0
        while row in occupied:
            row += 1
        rows[ev.id] = row
        placed.append(ev)
    return rows


def compute_rows(events: Sequence[TimelineEvent]) -> list[TimelineEvent]:
    """Return copies of ``events`` (same order) with ``row`` assigned per category."""
    assignments: dict[int, int] = {}
    for members in group_by_category(events).values():
        assignments.update(pack_lanes(members))
    return [ev.model_copy(update={"row": assignments.get(ev.id)}) for ev in events]


@dataclass(frozen=True, slots=True)
class Nesting:
    """Vertical placement hints for one event.

    Attributes
    ----------
    row : int | None
        The event's own lane.
    depth : int
        Number of resolved ancestors (0 for root-level events).
    anchor_row : int | None
        Lane the event is drawn relative to: its parent's row when the parent
        is flagged ``is_parent``, otherwise its own row.
    """

    row: int | None
    depth: int
    anchor_row: int | None


def _depth(ev: TimelineEvent, by_id: dict[int, TimelineEvent]) -> int:
    seen: set[int] = {ev.id}
    depth = 0
    current = ev
    while current.parent is not None and current.parent in by_id:
        if current.parent in seen:
            break  # cycle in parent references
        seen.add(current.parent)
        current = by_id[current.parent]
        depth += 1
    return depth


def nesting(events: Sequence[TimelineEvent]) -> dict[int, Nesting]:
    """Derive parent/child placement for events that already carry rows."""
    by_id = {ev.id: ev for ev in events}
    out: dict[int, Nesting] = {}
    for ev in events:
        parent = by_id.get(ev.parent) if ev.parent is not None else None
        anchor = parent.row if parent is not None and parent.is_parent else ev.row
        out[ev.id] = Nesting(row=ev.row, depth=_depth(ev, by_id), anchor_row=anchor)
    return out


__all__ = ["Nesting", "Span", "compute_rows", "group_by_category", "nesting", "overlap", "pack_lanes"]
