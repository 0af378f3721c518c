"""Flattening between strict events and loosely-typed row objects.

A *raw row* is the untyped intermediate form produced by the parsers: a
mapping of external field name to value (strings for CSV, native scalars for
YAML). Raw rows only exist between Parse and Ingest; everything past
:func:`trackline.io.ingest.process_imported_data` is a strict
:class:`TimelineEvent`.

External field names
--------------------
``eventId``, ``title``, ``type``, ``start``, ``end``, ``category``, ``color``,
``isImportant``, ``isParent``, ``parentId``, ``metadata``, ``emoji`` and the
flattened ``location_city`` / ``location_country`` pair (CSV) or nested
``location`` mapping (YAML).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from trackline.core.contracts import TimelineEvent

RawRow = Mapping[str, Any]


@dataclass
class RawDocument:
    """Untyped content of a parsed document (CSV yields events only)."""

    events: list[dict[str, Any]] = field(default_factory=list)
    categories: list[dict[str, Any]] = field(default_factory=list)
    timeline: dict[str, Any] | None = None


CSV_COLUMNS: tuple[str, ...] = (
    "eventId",
    "title",
    "type",
    "start",
    "end",
    "category",
    "color",
    "isImportant",
    "isParent",
    "parentId",
    "metadata",
    "emoji",
    "location_city",
    "location_country",
)


def iso_day(value: date | None) -> str:
    """Serialize a day as ``YYYY-MM-DD`` (empty string for ``None``)."""
    return value.isoformat() if value is not None else ""


def parent_key(event: TimelineEvent, by_id: Mapping[int, TimelineEvent]) -> str | None:
    """Return the external parent key to export for ``event``.

    ``parent_id`` wins; if only the derived ``parent`` link is present, the
    parent's ``event_id`` is used. The internal ``id`` is never exported.
    """
    if event.parent_id:
        return event.parent_id
    if event.parent is not None and event.parent in by_id:
        return by_id[event.parent].event_id
    return None


def _index(events: Sequence[TimelineEvent]) -> dict[int, TimelineEvent]:
    return {ev.id: ev for ev in events}


def event_to_csv_row(
    event: TimelineEvent, by_id: Mapping[int, TimelineEvent]
) -> dict[str, str]:
    """Flatten one event to string columns (booleans as ``"true"``/``"false"``)."""
    loc = event.location
    return {
        "eventId": event.event_id,
        "title": event.title,
        "type": event.type,
        "start": iso_day(event.start),
        "end": iso_day(event.end),
        "category": event.category or "",
        "color": event.color,
        "isImportant": "true" if event.is_important else "false",
        "isParent": "true" if event.is_parent else "false",
        "parentId": parent_key(event, by_id) or "",
        "metadata": event.metadata,
        "emoji": event.emoji or "",
        "location_city": loc.city if loc is not None else "",
        "location_country": loc.country if loc is not None else "",
    }


def event_to_yaml_item(
    event: TimelineEvent, by_id: Mapping[int, TimelineEvent]
) -> dict[str, Any]:
    """Flatten one event to a YAML mapping; optional keys are omitted when empty."""
    item: dict[str, Any] = {
        "eventId": event.event_id,
        "title": event.title,
        "type": event.type,
        "start": iso_day(event.start),
        "end": iso_day(event.end),
    }
    if event.category:
        item["category"] = event.category
    item["color"] = event.color
    item["isImportant"] = event.is_important
    item["isParent"] = event.is_parent
    pkey = parent_key(event, by_id)
    if pkey:
        item["parentId"] = pkey
    if event.metadata:
        item["metadata"] = event.metadata
    if event.emoji:
        item["emoji"] = event.emoji
    if event.location is not None and not event.location.is_empty:
        item["location"] = {"city": event.location.city, "country": event.location.country}
    return item


def events_to_csv_rows(events: Sequence[TimelineEvent]) -> list[dict[str, str]]:
    by_id = _index(events)
    return [event_to_csv_row(ev, by_id) for ev in events]


def events_to_yaml_items(events: Sequence[TimelineEvent]) -> list[dict[str, Any]]:
    by_id = _index(events)
    return [event_to_yaml_item(ev, by_id) for ev in events]


__all__ = [
    "CSV_COLUMNS",
    "RawDocument",
    "RawRow",
    "event_to_csv_row",
    "event_to_yaml_item",
    "events_to_csv_rows",
    "events_to_yaml_items",
    "iso_day",
    "parent_key",
]
