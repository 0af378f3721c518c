"""
Fixed sample datasets for the round-trip harness, the CLI and the tests.

Every scenario is a list of *raw rows* (the untyped shape produced by the
parsers), so it enters the system through the same ingest boundary as a real
file. Some rows deliberately use the legacy ``id`` key instead of ``eventId``
and a nested ``location`` mapping, to exercise those ingest paths.

Scenarios
---------
- ``basic``: one milestone and one range, no hierarchy.
- ``parent-child``: a three-level parent -> child -> grandchild hierarchy.
- ``complex``: location metadata, categories, importance and a life event.
- ``chain``: a four-level chain of overlapping ranges in one category.
"""

from __future__ import annotations

import copy
from typing import Any

_SCENARIOS: dict[str, list[dict[str, Any]]] = {
    "basic": [
        {
            "id": "basic-1",
            "title": "Basic Event 1",
            "start": "2023-01-01",
            "type": "milestone",
            "color": "#333333",
        },
        {
            "id": "basic-2",
            "title": "Basic Range Event",
            "start": "2023-01-15",
            "end": "2023-01-20",
            "type": "range",
            "color": "#666666",
        },
    ],
    "parent-child": [
        {
            "id": "parent-1",
            "title": "Parent Event 1",
            "start": "2023-01-01",
            "type": "milestone",
            "isParent": True,
            "color": "#FF0000",
        },
        {
            "id": "child-1",
            "title": "Child Event 1",
            "start": "2023-01-15",
            "parentId": "parent-1",
            "type": "milestone",
            "color": "#00FF00",
        },
        {
            "id": "grandchild-1",
            "title": "Grandchild Event 1",
            "start": "2023-01-20",
            "parentId": "child-1",
            "type": "milestone",
            "color": "#0000FF",
        },
    ],
    "complex": [
        {
            "id": "event-1",
            "title": "Complex Event with Location",
            "start": "2023-01-01",
            "end": "2023-01-03",
            "type": "range",
            "location": {"city": "New York", "country": "USA"},
            "metadata": "Important business meeting",
            "category": "Work",
            "isImportant": True,
            "color": "#FF5733",
        },
        {
            "id": "event-2",
            "title": "Life Event",
            "start": "2023-02-14",
            "type": "life",
            "metadata": "Anniversary celebration",
            "category": "Personal",
            "color": "#C70039",
        },
    ],
    "chain": [
        {
            "eventId": "P1",
            "title": "Programme",
            "type": "range",
            "start": "2023-01-01",
            "end": "2023-06-30",
            "category": "Project",
            "isParent": True,
            "color": "#1f77b4",
        },
        {
            "eventId": "C1",
            "title": "Phase one, \"discovery\"",
            "type": "range",
            "start": "2023-01-10",
            "end": "2023-03-31",
            "category": "Project",
            "isParent": True,
            "parentId": "P1",
            "color": "#ff7f0e",
        },
        {
            "eventId": "C2",
            "title": "Workshop",
            "type": "range",
            "start": "2023-02-01",
            "end": "2023-02-03",
            "category": "Project",
            "parentId": "C1",
            "metadata": "Room 4, level 2\nbring laptops",
            "location": {"city": "Lyon", "country": "France"},
            "color": "#2ca02c",
        },
        {
            "eventId": "C3",
            "title": "Sign-off",
            "type": "milestone",
            "start": "2023-02-03",
            "category": "Project",
            "parentId": "C2",
            "isImportant": True,
            "emoji": "✅",
            "color": "#d62728",
        },
    ],
}

SCENARIOS: tuple[str, ...] = tuple(_SCENARIOS)


def create_test_data(scenario: str = "basic") -> list[dict[str, Any]]:
    """Return a fresh copy of the raw rows for ``scenario``.

    Raises
    ------
    ValueError
        If ``scenario`` is not one of :data:`SCENARIOS`.
    """
    try:
        rows = _SCENARIOS[scenario]
    except KeyError:
        raise ValueError(
            f"unknown scenario {scenario!r}; expected one of {', '.join(SCENARIOS)}"
        ) from None
    return copy.deepcopy(rows)


__all__ = ["SCENARIOS", "create_test_data"]
