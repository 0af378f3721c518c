"""
Ingest: turn raw rows into strict, parent-linked :class:`TimelineEvent` objects.

This is the only place where untyped row objects are read. Every row either
becomes a validated event or is skipped with a warning; one bad row never
aborts the batch.

Stages
------
1. ``process_imported_data`` normalizes each row (ids, types, dates, colors,
   booleans, location) and assigns internal ids sequentially from ``next_id``.
2. ``link_parents`` resolves ``parentId`` strings to the internal ids of the
   same batch. Unresolved references leave ``parent`` unset.

Duplicate policy
----------------
The first row carrying a given ``eventId`` wins. Later rows with the same
key (or a key already present in ``existing_event_ids``) are skipped with a
``structural`` warning, so parent links are never ambiguous.
"""

from __future__ import annotations

import random
import re
from collections.abc import Collection, Iterable, Mapping, Sequence
from datetime import date, datetime
from typing import Any

from pydantic import ValidationError

from trackline.core.contracts import (
    EVENT_TYPES,
    HEX_COLOR_PATTERN,
    Category,
    ImportResult,
    ImportWarning,
    Location,
    TimelineEvent,
    TimelineWindow,
    random_color,
)
from trackline.core.settings import get_logger, load_settings

from .records import RawRow

logger = get_logger("trackline.io.ingest")

_TRUE = {"true", "1", "yes", "y", "on"}
_FALSE = {"false", "0", "no", "n", "off", ""}
_HEX = re.compile(HEX_COLOR_PATTERN)


# ===========================================================================
# Scalar coercion
# ===========================================================================


def _text(value: Any) -> str | None:
    """Return a stripped string, or ``None`` for missing/blank values."""
    if value is None:
        return None
    if isinstance(value, datetime | date):
        return value.isoformat()
    text = str(value).strip()
    return text or None


def parse_day(value: Any) -> date:
    """Parse an ISO date (or datetime) into a day.

    Raises
    ------
    ValueError
        If ``value`` is not a date, datetime, or ISO-8601 string.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"not a date: {value!r}")
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        return datetime.fromisoformat(text).date()


def parse_flag(value: Any) -> bool | None:
    """Coerce a boolean-ish value; ``None`` means it was not recognizable."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, int | float):
        return bool(value)
    lowered = str(value).strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    return None


def is_hex_color(value: str) -> bool:
    return bool(_HEX.match(value))


# ===========================================================================
# Row normalization
# ===========================================================================


def _warn(
    warnings: list[ImportWarning],
    kind: str,
    message: str,
    *,
    row: int | None,
    event_id: str | None = None,
) -> None:
    w = ImportWarning.model_validate(
        {"kind": kind, "message": message, "row": row, "event_id": event_id}
    )
    logger.debug("import warning: %s", w)
    warnings.append(w)


def _flag(raw: RawRow, key: str, warnings: list[ImportWarning], row: int, eid: str) -> bool:
    parsed = parse_flag(raw.get(key))
    if parsed is None:
        _warn(warnings, "value", f"{key}={raw.get(key)!r} is not a boolean; using false",
              row=row, event_id=eid)
        return False
    return parsed


def _location(raw: RawRow) -> Location | None:
    city = country = ""
    if "location_city" in raw or "location_country" in raw:
        city = _text(raw.get("location_city")) or ""
        country = _text(raw.get("location_country")) or ""
    elif isinstance(raw.get("location"), Mapping):
        loc = raw["location"]
        city = _text(loc.get("city")) or ""
        country = _text(loc.get("country")) or ""
    elif raw.get("location"):
        country = _text(raw.get("location")) or ""
    elif raw.get("place"):
        country = _text(raw.get("place")) or ""
    if not city and not country:
        return None
    return Location(city=city, country=country)


def _event_type(raw: RawRow) -> str | None:
    declared = _text(raw.get("type"))
    if declared is None:
        return "life" if parse_flag(raw.get("life_event")) else "range"
    lowered = declared.lower()
    return lowered if lowered in EVENT_TYPES else None


def fresh_event_id(internal_id: int, seen: Collection[str]) -> str:
    """Return ``auto-{internal_id}``, suffixed until it is not in ``seen``."""
    candidate = f"auto-{internal_id}"
    suffix = 1
    while candidate in seen:
        suffix += 1
        candidate = f"auto-{internal_id}-{suffix}"
    return candidate


def _normalize_row(
    raw: RawRow,
    row: int,
    internal_id: int,
    seen: set[str],
    rng: random.Random,
    warnings: list[ImportWarning],
) -> TimelineEvent | None:
    title = _text(raw.get("title"))
    declared_id = _text(raw.get("eventId")) or _text(raw.get("id"))

    if title is None:
        _warn(warnings, "structural", "missing required field 'title'; row skipped",
              row=row, event_id=declared_id)
        return None

    if declared_id is not None and declared_id in seen:
        _warn(warnings, "structural", f"duplicate eventId {declared_id!r}; row skipped",
              row=row, event_id=declared_id)
        return None
    event_id = declared_id or fresh_event_id(internal_id, seen)

    ev_type = _event_type(raw)
    if ev_type is None:
        _warn(warnings, "structural", f"unknown event type {raw.get('type')!r}; row skipped",
              row=row, event_id=event_id)
        return None

    raw_start = raw.get("start")
    if _text(raw_start) is None:
        _warn(warnings, "structural", "missing required field 'start'; row skipped",
              row=row, event_id=event_id)
        return None

    start: date | None
    try:
        start = parse_day(raw_start)
    except ValueError:
        _warn(warnings, "positional", f"unparsable start date {raw_start!r}",
              row=row, event_id=event_id)
        start = None

    end: date | None = start
    if ev_type == "range" and _text(raw.get("end")) is not None:
        try:
            end = parse_day(raw.get("end"))
        except ValueError:
            _warn(warnings, "positional", f"unparsable end date {raw.get('end')!r}",
                  row=row, event_id=event_id)
            end = None
    if start is not None and end is not None and end < start:
        _warn(warnings, "value", f"end {end} precedes start {start}; dates swapped",
              row=row, event_id=event_id)
        start, end = end, start

    color = _text(raw.get("color"))
    if color is not None and not is_hex_color(color):
        _warn(warnings, "value", f"invalid color {color!r}; using a random color",
              row=row, event_id=event_id)
        color = None
    if color is None:
        color = random_color(rng)

    metadata = raw.get("metadata")
    try:
        event = TimelineEvent(
            id=internal_id,
            event_id=event_id,
            title=title,
            type=ev_type,  # type: ignore[arg-type]
            start=start,
            end=end,
            category=_text(raw.get("category")),
            color=color,
            is_important=_flag(raw, "isImportant", warnings, row, event_id),
            is_parent=_flag(raw, "isParent", warnings, row, event_id),
            parent_id=_text(raw.get("parentId")),
            metadata="" if metadata is None else str(metadata),
            emoji=_text(raw.get("emoji")),
            location=_location(raw),
        )
    except ValidationError as exc:
        _warn(warnings, "structural", f"invalid event: {exc.errors()[0]['msg']}; row skipped",
              row=row, event_id=event_id)
        return None

    seen.add(event_id)
    return event


def process_imported_data(
    rows: Iterable[RawRow],
    next_id: int = 1,
    *,
    rng: random.Random | None = None,
    existing_event_ids: Collection[str] = (),
) -> ImportResult:
    """Normalize raw rows into strict events and link parents within the batch.

    Parameters
    ----------
    rows : Iterable[RawRow]
        Raw rows from :func:`parse_csv` or the ``events`` list of a YAML document.
    next_id : int, default 1
        First internal id to hand out. Sessions pass their counter so several
        imports never collide on internal ids.
    rng : random.Random | None
        Randomizer for missing colors; defaults to the configured seed.
    existing_event_ids : Collection[str]
        ``eventId`` values already owned by the caller (append imports).

    Returns
    -------
    ImportResult
        Events in input order, row-level warnings, and the updated ``next_id``.
    """
    rng = rng if rng is not None else load_settings().make_rng()
    warnings: list[ImportWarning] = []
    seen: set[str] = set(existing_event_ids)
    events: list[TimelineEvent] = []

    for row_number, raw in enumerate(rows, start=1):
        event = _normalize_row(raw, row_number, next_id, seen, rng, warnings)
        if event is not None:
            events.append(event)
            next_id += 1

    linked, link_warnings = link_parents(events)
    warnings.extend(link_warnings)
    logger.info("ingested %d events with %d warnings", len(linked), len(warnings))
    return ImportResult(events=linked, warnings=warnings, next_id=next_id)


def link_parents(
    events: Sequence[TimelineEvent],
) -> tuple[list[TimelineEvent], list[ImportWarning]]:
    """Resolve every ``parent_id`` to the internal id of the matching event.

    Returns copies with ``parent`` set (or cleared when the reference is
    missing or points at the event itself) plus ``referential`` warnings.
    """
    index = {ev.event_id: ev.id for ev in events}
    warnings: list[ImportWarning] = []
    out: list[TimelineEvent] = []
    for ev in events:
        target: int | None = None
        if ev.parent_id:
            target = index.get(ev.parent_id)
            if target is None:
                _warn(warnings, "referential", f"parentId {ev.parent_id!r} does not resolve",
                      row=None, event_id=ev.event_id)
            elif target == ev.id:
                _warn(warnings, "referential", "event lists itself as parent",
                      row=None, event_id=ev.event_id)
                target = None
        out.append(ev if ev.parent == target else ev.model_copy(update={"parent": target}))
    return out, warnings


# ===========================================================================
# Categories and window
# ===========================================================================


def ingest_categories(
    raw_categories: Iterable[RawRow],
    events: Sequence[TimelineEvent],
    *,
    rng: random.Random,
    existing: Collection[str] = (),
) -> tuple[list[Category], list[ImportWarning]]:
    """Validate declared categories and auto-create the ones events reference.

    Categories whose id is in ``existing`` are neither declared again nor
    auto-created.
    """
    warnings: list[ImportWarning] = []
    known: set[str] = set(existing)
    out: list[Category] = []

    for idx, raw in enumerate(raw_categories, start=1):
        cid = _text(raw.get("id")) or _text(raw.get("name"))
        if cid is None:
            _warn(warnings, "structural", "category without id or name; skipped", row=idx)
            continue
        if cid in known:
            _warn(warnings, "structural", f"duplicate category {cid!r}; skipped", row=idx)
            continue
        color = _text(raw.get("color"))
        if color is None or not is_hex_color(color):
            if color is not None:
                _warn(warnings, "value", f"invalid category color {color!r}", row=idx)
            color = random_color(rng)
        out.append(Category(id=cid, name=_text(raw.get("name")) or cid, color=color))
        known.add(cid)

    for ev in events:
        if ev.category and ev.category not in known:
            out.append(Category(id=ev.category, name=ev.category, color=random_color(rng)))
            known.add(ev.category)
    return out, warnings


def ingest_window(raw: Mapping[str, Any] | None) -> tuple[TimelineWindow | None, list[ImportWarning]]:
    """Parse the optional ``timeline`` block of a YAML document."""
    warnings: list[ImportWarning] = []
    if not raw:
        return None, warnings
    try:
        window = TimelineWindow(start=parse_day(raw.get("start")), end=parse_day(raw.get("end")))
    except (ValueError, ValidationError) as exc:
        _warn(warnings, "value", f"ignoring timeline window: {exc}", row=None)
        return None, warnings
    return window, warnings


__all__ = [
    "ingest_categories",
    "ingest_window",
    "fresh_event_id",
    "is_hex_color",
    "link_parents",
    "parse_day",
    "parse_flag",
    "process_imported_data",
]
