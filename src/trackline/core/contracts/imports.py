"""Structured outcome of an import: events plus per-row warnings.

The import pipeline never prints or raises for row-level problems. Instead it
returns an :class:`ImportResult` so the caller (CLI, UI) decides how to
surface them. Format-level failures (unparsable file) are exceptions and are
not represented here.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from .category import Category
from .timeline import TimelineEvent, TimelineWindow

WarningKind = Literal["structural", "referential", "positional", "value"]


class ImportWarning(BaseModel):
    """A recoverable problem attached to one incoming row."""

    kind: WarningKind
    message: str
    row: int | None = Field(default=None, description="1-based source row/item number.")
    event_id: str | None = None

    def __str__(self) -> str:
        where = f"row {self.row}" if self.row is not None else "batch"
        who = f" [{self.event_id}]" if self.event_id else ""
        return f"{where}{who}: {self.kind}: {self.message}"


class ImportResult(BaseModel):
    """Strict events produced by one import, ready to replace or extend a session."""

    events: list[TimelineEvent] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    window: TimelineWindow | None = None
    warnings: list[ImportWarning] = Field(default_factory=list)
    next_id: int = Field(default=1, ge=0, description="Next free internal id.")

    def warnings_of(self, kind: WarningKind) -> list[ImportWarning]:
        """Return only the warnings of the given kind."""
        return [w for w in self.warnings if w.kind == kind]


__all__ = ["ImportResult", "ImportWarning", "WarningKind"]
