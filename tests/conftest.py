"""Shared fixtures: an event factory and a clean settings cache per test."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import date
from typing import Any

import pytest

from trackline.core.contracts import TimelineEvent
from trackline.core.settings import load_settings

EventFactory = Callable[..., TimelineEvent]


@pytest.fixture(autouse=True)  # type: ignore[misc]
def _fresh_settings() -> Iterator[None]:
    """Rebuild settings after each test so env overrides never leak."""
    yield
    load_settings.cache_clear()


@pytest.fixture  # type: ignore[misc]
def make_event() -> EventFactory:
    """Return a factory for strict events with sensible defaults."""

    def _make(
        id: int,
        start: date | None,
        end: date | None = None,
        *,
        category: str | None = "Work",
        type: str = "range",
        **fields: Any,
    ) -> TimelineEvent:
        return TimelineEvent(
            id=id,
            event_id=fields.pop("event_id", f"E{id}"),
            title=fields.pop("title", f"Event {id}"),
            type=type,  # type: ignore[arg-type]
            start=start,
            end=end if end is not None else start,
            category=category,
            color=fields.pop("color", "#123456"),
            **fields,
        )

    return _make
