"""
Round-trip validation: ingest -> export -> re-ingest, with a structured report.

Flow
----
1. The raw rows are ingested once to obtain the reference events.
2. The events are exported and re-imported through each format in
   ``formats`` (``("yaml", "csv")`` exports YAML, re-imports it, then does
   the same through CSV).
3. Events are matched by ``eventId`` and compared field by field. Parent
   links are compared by the ``eventId`` of the resolved parent, since
   internal ids are not part of any file.
4. The final text is imported and exported once more; the run is *stable*
   when that reproduces the same text.

Color randomization uses a fixed seed so runs are reproducible.
"""

from __future__ import annotations

import random
from collections.abc import Iterable, Mapping, Sequence
from datetime import date
from typing import Any

from trackline.core.contracts import (
    EventCheck,
    FieldMismatch,
    Location,
    RoundTripReport,
    TimelineEvent,
)
from trackline.core.settings import get_logger
from trackline.io.importer import Format, export_text, import_text
from trackline.io.ingest import process_imported_data

from .samples import SCENARIOS, create_test_data

logger = get_logger("trackline.pipelines.roundtrip")

COMPARED_FIELDS: tuple[str, ...] = (
    "title",
    "type",
    "start",
    "end",
    "is_parent",
    "parent_id",
    "category",
    "color",
    "is_important",
    "metadata",
    "emoji",
    "location",
)

_SEED = 0


def _render(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Location):
        return None if value.is_empty else f"{value.city}|{value.country}"
    return str(value)


def _parent_key(event: TimelineEvent, by_id: Mapping[int, TimelineEvent]) -> str | None:
    if event.parent is None or event.parent not in by_id:
        return None
    return by_id[event.parent].event_id


def compare_events(
    original: TimelineEvent,
    reimported: TimelineEvent,
    original_by_id: Mapping[int, TimelineEvent] | None = None,
    reimported_by_id: Mapping[int, TimelineEvent] | None = None,
) -> EventCheck:
    """Compare two events matched by ``eventId``.

    When both id indexes are given, the resolved parent is compared too
    (as the ``parent`` field, by the parent's ``eventId``).
    """
    mismatches: list[FieldMismatch] = []
    for name in COMPARED_FIELDS:
        expected = _render(getattr(original, name))
        actual = _render(getattr(reimported, name))
        if expected != actual:
            mismatches.append(FieldMismatch(field=name, expected=expected, actual=actual))

    if original_by_id is not None and reimported_by_id is not None:
        expected = _parent_key(original, original_by_id)
        actual = _parent_key(reimported, reimported_by_id)
        if expected != actual:
            mismatches.append(FieldMismatch(field="parent", expected=expected, actual=actual))

    return EventCheck(event_id=original.event_id, title=original.title, mismatches=mismatches)


def run_round_trip(
    raw_rows: Iterable[Mapping[str, Any]],
    formats: Sequence[Format] = ("csv",),
    scenario: str = "custom",
) -> RoundTripReport:
    """
    Push raw rows through one or more export/import passes and compare.

    Parameters
    ----------
    raw_rows : Iterable[Mapping[str, Any]]
        Untyped rows, e.g. from :func:`create_test_data`.
    formats : Sequence[Format]
        Formats to go through, in order.
    scenario : str
        Label copied into the report.

    Returns
    -------
    RoundTripReport
        Per-event field checks, lost ``eventId`` values and the stability flag.

    Raises
    ------
    ValueError
        If ``formats`` is empty.
    """
    if not formats:
        raise ValueError("at least one format is required")

    rng = random.Random(_SEED)
    original = process_imported_data(raw_rows, rng=rng).events

    events = original
    text = ""
    for fmt in formats:
        text = export_text(events, fmt)
        events = import_text(text, fmt, rng=rng).events

    last = formats[-1]
    again = export_text(import_text(text, last, rng=rng).events, last)

    orig_by_id = {ev.id: ev for ev in original}
    new_by_id = {ev.id: ev for ev in events}
    new_by_key = {ev.event_id: ev for ev in events}

    checks: list[EventCheck] = []
    missing: list[str] = []
    for ev in original:
        counterpart = new_by_key.get(ev.event_id)
        if counterpart is None:
            missing.append(ev.event_id)
            continue
        checks.append(compare_events(ev, counterpart, orig_by_id, new_by_id))

    report = RoundTripReport(
        scenario=scenario,
        formats=list(formats),
        original_count=len(original),
        reimported_count=len(events),
        checks=checks,
        missing=missing,
        stable=again == text,
    )
    logger.info(
        "round trip %s via %s: %s",
        scenario,
        " -> ".join(formats),
        "passed" if report.passed else f"{len(report.failures)} failing event(s)",
    )
    for check in report.failures:
        for mismatch in check.mismatches:
            logger.warning("%s [%s]: %s", scenario, check.event_id, mismatch)
    return report


DEFAULT_PASSES: tuple[tuple[Format, ...], ...] = (("csv",), ("yaml",), ("yaml", "csv"))


def run_all(
    scenarios: Sequence[str] = SCENARIOS,
    passes: Sequence[Sequence[Format]] = DEFAULT_PASSES,
) -> list[RoundTripReport]:
    """Run every scenario through every pass and return the reports."""
    reports: list[RoundTripReport] = []
    for name in scenarios:
        for formats in passes:
            reports.append(run_round_trip(create_test_data(name), formats, scenario=name))
    return reports


__all__ = ["COMPARED_FIELDS", "DEFAULT_PASSES", "compare_events", "run_all", "run_round_trip"]
