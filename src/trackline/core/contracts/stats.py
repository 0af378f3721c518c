"""Summary statistics over an event collection."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field


class DataStats(BaseModel):
    """Counts shown after an import and by ``trackline stats``."""

    total_events: int = 0
    types: dict[str, int] = Field(
        default_factory=lambda: {"range": 0, "milestone": 0, "life": 0}
    )
    categories: list[str] = Field(default_factory=list)
    locations: list[str] = Field(default_factory=list, description="Normalized country names.")
    parent_child_relations: int = 0
    important_events: int = 0
    parent_events: int = 0
    unpositioned_events: int = 0
    earliest: date | None = None
    latest: date | None = None


__all__ = ["DataStats"]
