"""TimelineEvent: the central entity placed on the visual axis.

Field notes
-----------
- ``id`` is a process-local surrogate key assigned by the owning session or
  the import pipeline; it is never written to a file.
- ``event_id`` is the stable external key (``eventId`` on the wire) used for
  parent/child references.
- ``parent_id`` is the serialization source of truth for the hierarchy;
  ``parent`` is a derived cache holding the parent's internal ``id``.
- ``start``/``end`` are ``None`` when the incoming value could not be parsed.
  Such events stay in the collection but are skipped by lane packing and
  rendering.
- ``row`` is the derived lane index; it is recomputed on every layout pass.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from .common import EventType, HexColor


class Location(BaseModel):
    """Optional geographic metadata attached to an event."""

    city: str = ""
    country: str = ""

    @property
    def is_empty(self) -> bool:
        """Return True when neither city nor country is set."""
        return not self.city and not self.country


def _coerce_day(value: Any) -> Any:
    # Time-of-day is ignored for positioning; keep date-only precision.
    if isinstance(value, datetime):
        return value.date()
    return value


class TimelineEvent(BaseModel):
    """A single range, milestone or life event."""

    id: int = Field(ge=0, description="Process-local surrogate key.")
    event_id: str = Field(min_length=1, description="Stable external identifier.")
    title: str = Field(min_length=1)
    type: EventType = "range"

    start: date | None = Field(default=None, description="Start day (None if unparsable).")
    end: date | None = Field(default=None, description="End day; mirrors start for points.")

    category: str | None = Field(default=None, description="Category id, if any.")
    color: HexColor
    is_important: bool = False
    is_parent: bool = False

    parent_id: str | None = Field(default=None, description="eventId of the structural parent.")
    parent: int | None = Field(default=None, description="Derived: internal id of the parent.")

    metadata: str = ""
    emoji: str | None = None
    location: Location | None = None

    row: int | None = Field(default=None, ge=0, description="Derived lane index.")

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("start", "end", mode="before")
    @classmethod
    def _drop_time_of_day(cls, v: Any) -> Any:
        return _coerce_day(v)

    @model_validator(mode="after")
    def _normalize_span(self) -> TimelineEvent:
        """Point events mirror ``start``; ranges must not run backwards."""
        if self.type != "range":
            self.end = self.start
        elif self.start is not None and self.end is not None and self.end < self.start:
            raise ValueError(
                f"range event {self.event_id!r} ends ({self.end}) before it starts ({self.start})"
            )
        return self

    @property
    def is_positioned(self) -> bool:
        """Return True when both dates are usable for layout."""
        return self.start is not None and self.end is not None


class TimelineWindow(BaseModel):
    """Visible window of the timeline, stored with YAML documents."""

    start: date
    end: date

    @field_validator("start", "end", mode="before")
    @classmethod
    def _drop_time_of_day(cls, v: Any) -> Any:
        return _coerce_day(v)

    @model_validator(mode="after")
    def _check_order(self) -> TimelineWindow:
        if self.end <= self.start:
            raise ValueError("timeline window must end after it starts")
        return self


__all__ = ["Location", "TimelineEvent", "TimelineWindow"]
