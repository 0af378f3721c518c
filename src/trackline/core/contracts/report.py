"""Round-trip validation report contracts.

A report is never a bare boolean: every event matched by ``eventId`` gets an
:class:`EventCheck` listing its field-level mismatches, so a failing run can
be diagnosed from the report alone.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class FieldMismatch(BaseModel):
    """One field whose value changed across the round trip."""

    field: str
    expected: str | None
    actual: str | None

    def __str__(self) -> str:
        return f"{self.field} mismatch: expected {self.expected!r} but got {self.actual!r}"


class EventCheck(BaseModel):
    """Comparison result for a single event matched by ``eventId``."""

    event_id: str
    title: str
    mismatches: list[FieldMismatch] = Field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.mismatches


class RoundTripReport(BaseModel):
    """Outcome of pushing one dataset through ingest -> export -> re-ingest."""

    scenario: str
    formats: list[str] = Field(description="Export formats applied in order, e.g. ['yaml', 'csv'].")
    original_count: int = Field(ge=0)
    reimported_count: int = Field(ge=0)
    checks: list[EventCheck] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list, description="eventIds lost on the way.")
    stable: bool = Field(
        default=True, description="A second export/import pass reproduced the same text."
    )

    @property
    def count_preserved(self) -> bool:
        return self.original_count == self.reimported_count

    @property
    def failures(self) -> list[EventCheck]:
        return [c for c in self.checks if not c.passed]

    @property
    def passed(self) -> bool:
        return self.count_preserved and not self.missing and not self.failures and self.stable


__all__ = ["EventCheck", "FieldMismatch", "RoundTripReport"]
