"""
Whole-document import: Parse -> Ingest -> Link, plus export dispatch.

``import_text`` is all-or-nothing at the format level: a malformed document
raises :class:`TimelineFormatError` before any event is produced, so callers
can stage the result and keep their current data on failure. Row-level
problems come back as warnings inside the :class:`ImportResult`.
"""

from __future__ import annotations

import random
from collections.abc import Collection, Sequence
from typing import Literal

from trackline.core.contracts import Category, ImportResult, TimelineEvent, TimelineWindow
from trackline.core.settings import get_logger, load_settings

from .csv_codec import events_to_csv, parse_csv
from .errors import TimelineFormatError
from .ingest import ingest_categories, ingest_window, process_imported_data
from .records import RawDocument
from .yaml_codec import events_to_yaml, parse_yaml

Format = Literal["csv", "yaml"]
FORMATS: tuple[Format, ...] = ("csv", "yaml")

logger = get_logger("trackline.io.importer")


def parse_document(text: str, fmt: Format) -> RawDocument:
    """Parse raw text of either format into the untyped document shape."""
    if fmt == "csv":
        return RawDocument(events=list(parse_csv(text)))
    if fmt == "yaml":
        return parse_yaml(text)
    raise TimelineFormatError(f"unsupported format: {fmt!r}")


def import_text(
    text: str,
    fmt: Format,
    *,
    next_id: int = 1,
    rng: random.Random | None = None,
    existing_event_ids: Collection[str] = (),
    existing_categories: Collection[str] = (),
) -> ImportResult:
    """Import a CSV or YAML document into strict events, categories and window.

    Raises
    ------
    TimelineFormatError
        If the document cannot be parsed at all.
    """
    rng = rng if rng is not None else load_settings().make_rng()
    doc = parse_document(text, fmt)

    result = process_imported_data(
        doc.events, next_id, rng=rng, existing_event_ids=existing_event_ids
    )
    categories, cat_warnings = ingest_categories(
        doc.categories, result.events, rng=rng, existing=existing_categories
    )
    window, window_warnings = ingest_window(doc.timeline)

    logger.info(
        "imported %s document: %d events, %d categories",
        fmt,
        len(result.events),
        len(categories),
    )
    return result.model_copy(
        update={
            "categories": categories,
            "window": window,
            "warnings": [*result.warnings, *cat_warnings, *window_warnings],
        }
    )


def export_text(
    events: Sequence[TimelineEvent],
    fmt: Format,
    *,
    categories: Sequence[Category] = (),
    window: TimelineWindow | None = None,
) -> str:
    """Serialize events in the requested format.

    CSV carries events only; categories and the window are YAML-only.
    """
    if fmt == "csv":
        return events_to_csv(events)
    if fmt == "yaml":
        return events_to_yaml(events, categories, window)
    raise TimelineFormatError(f"unsupported format: {fmt!r}")


__all__ = ["FORMATS", "Format", "export_text", "import_text", "parse_document"]
