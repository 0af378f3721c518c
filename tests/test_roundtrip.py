"""Tests for the round-trip harness and the sample scenarios it runs."""

from __future__ import annotations

import random
from datetime import date
from typing import Any

import pytest

from trackline.core.contracts import Location
from trackline.io import export_text, import_text
from trackline.pipelines import SCENARIOS, compare_events, create_test_data, run_all, run_round_trip


def test_create_test_data_returns_fresh_copies() -> None:
    """Mutating one copy does not leak into the next call."""
    rows = create_test_data("parent-child")
    rows[0]["title"] = "changed"
    assert create_test_data("parent-child")[0]["title"] == "Parent Event 1"
    assert set(SCENARIOS) == {"basic", "parent-child", "complex", "chain"}
    with pytest.raises(ValueError, match="unknown scenario"):
        create_test_data("nope")


@pytest.mark.parametrize("scenario", SCENARIOS)  # type: ignore[misc]
@pytest.mark.parametrize("formats", [("csv",), ("yaml",), ("yaml", "csv")])  # type: ignore[misc]
def test_scenarios_round_trip(scenario: str, formats: tuple[str, ...]) -> None:
    """Every scenario survives every pass with all fields and links intact."""
    report = run_round_trip(create_test_data(scenario), formats, scenario=scenario)  # type: ignore[arg-type]
    assert report.passed, [str(m) for c in report.failures for m in c.mismatches]
    assert report.count_preserved and not report.missing and report.stable
    assert len(report.checks) == report.original_count


def test_run_all_covers_every_scenario_and_pass() -> None:
    """The default run is the full scenario x pass grid."""
    reports = run_all()
    assert len(reports) == len(SCENARIOS) * 3
    assert all(r.passed for r in reports)


def test_export_import_is_idempotent_after_one_pass() -> None:
    """export(import(export(import(X)))) == export(import(X)), random colors included."""
    rows = [
        {"eventId": "A", "title": "No color", "start": "2023-01-01", "end": "2023-01-01"},
        {"eventId": "B", "title": "Dangling", "start": "2023-01-02", "parentId": "ghost"},
    ]
    for fmt in ("csv", "yaml"):
        first = export_text(import_text(_as_csv(rows), "csv", rng=random.Random(1)).events, fmt)
        second = export_text(import_text(first, fmt, rng=random.Random(2)).events, fmt)
        assert first == second

    report = run_round_trip(rows, ("csv",))
    assert report.passed


def _as_csv(rows: list[dict[str, str]]) -> str:
    header = ["eventId", "title", "start", "end", "parentId"]
    lines = [",".join(header)]
    lines += [",".join(row.get(col, "") for col in header) for row in rows]
    return "\n".join(lines) + "\n"


def test_compare_events_lists_field_mismatches(make_event: Any) -> None:
    """Changed fields are reported by name with both values."""
    original = make_event(1, date(2023, 1, 1), location=Location(city="Oslo", country="Norway"))
    changed = original.model_copy(
        update={"title": "Other", "is_important": True, "location": None}
    )
    check = compare_events(original, changed)
    assert not check.passed
    assert {m.field for m in check.mismatches} == {"title", "is_important", "location"}
    important = next(m for m in check.mismatches if m.field == "is_important")
    assert (important.expected, important.actual) == ("false", "true")


def test_compare_events_checks_resolved_parents(make_event: Any) -> None:
    """A child whose parent link moved to another eventId is a mismatch."""
    parent = make_event(1, date(2023, 1, 1), event_id="P")
    other = make_event(2, date(2023, 1, 1), event_id="Q")
    child = make_event(3, date(2023, 1, 2), event_id="C", parent=1)
    moved = child.model_copy(update={"parent": 2})
    by_id = {ev.id: ev for ev in (parent, other, child)}

    check = compare_events(child, moved, by_id, by_id)
    assert [m.field for m in check.mismatches] == ["parent"]


def test_run_round_trip_requires_a_format() -> None:
    """An empty pass list is a caller error."""
    with pytest.raises(ValueError):
        run_round_trip(create_test_data("basic"), ())
