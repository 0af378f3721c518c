"""Pydantic contracts for the timeline data model.

Import from here rather than the individual modules:
    from trackline.core.contracts import TimelineEvent, Category, ImportResult
"""

from __future__ import annotations

from .category import Category
from .common import (
    EVENT_TYPES,
    HEX_COLOR_PATTERN,
    UNCATEGORIZED,
    EventType,
    HexColor,
    random_color,
)
from .imports import ImportResult, ImportWarning, WarningKind
from .report import EventCheck, FieldMismatch, RoundTripReport
from .stats import DataStats
from .timeline import Location, TimelineEvent, TimelineWindow

__all__ = [
    "Category",
    "DataStats",
    "EVENT_TYPES",
    "EventCheck",
    "EventType",
    "FieldMismatch",
    "HEX_COLOR_PATTERN",
    "HexColor",
    "ImportResult",
    "ImportWarning",
    "Location",
    "RoundTripReport",
    "TimelineEvent",
    "TimelineWindow",
    "UNCATEGORIZED",
    "WarningKind",
    "random_color",
]
