"""
Temporal math: map calendar days onto a bounded percentage axis.

All functions here are pure and work at day precision; ``datetime`` inputs
are reduced to their date first.

Clamping
--------
:func:`position` and :func:`width` do **not** clamp. A date before the window
yields a negative percentage and a date after it yields more than 100, which
lets callers detect out-of-range events. Renderers that want to draw partially
visible ranges use :func:`clip_span`.

Header scale
------------
:func:`header_scale` picks the tick resolution for a window:

- span <= 14 days  -> daily ticks
- span <= 90 days  -> weekly ticks (every 7 days from the window start)
- otherwise        -> monthly ticks (first day of each month)

Monthly headers thin their labels as the tick count grows: more than 18
months labels every second tick, more than 36 every third.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Literal

Granularity = Literal["day", "week", "month"]

DAILY_MAX_DAYS = 14
WEEKLY_MAX_DAYS = 90
# (tick count threshold, label every Nth tick), checked from the largest down.
MONTH_LABEL_STEPS: tuple[tuple[int, int], ...] = ((36, 3), (18, 2))


def as_day(value: date | datetime) -> date:
    """Return the calendar day of ``value`` (drops the time of day)."""
    if isinstance(value, datetime):
        return value.date()
    return value


def _window_days(start: date | datetime, end: date | datetime) -> int:
    days = (as_day(end) - as_day(start)).days
    if days <= 0:
        raise ValueError(f"timeline window must end after it starts: {start} .. {end}")
    return days


def position(when: date | datetime, start: date | datetime, end: date | datetime) -> float:
    """Return the percentage offset of ``when`` inside ``[start, end]``.

    Raises
    ------
    ValueError
        If the window is empty or reversed.
    """
    total = _window_days(start, end)
    return (as_day(when) - as_day(start)).days / total * 100.0


def width(
    event_start: date | datetime,
    event_end: date | datetime,
    start: date | datetime,
    end: date | datetime,
) -> float:
    """Return the width of a range event as the distance between its two positions."""
    return position(event_end, start, end) - position(event_start, start, end)


def clip_span(
    event_start: date | datetime,
    event_end: date | datetime,
    start: date | datetime,
    end: date | datetime,
) -> tuple[float, float] | None:
    """Return ``(left, width)`` clipped to ``[0, 100]``, or ``None`` if fully outside.

    Reversed inputs are treated as the same span in the other direction.
    """
    a = position(event_start, start, end)
    b = position(event_end, start, end)
    lo, hi = min(a, b), max(a, b)
    if hi < 0.0 or lo > 100.0:
        return None
    left = max(0.0, lo)
    right = min(100.0, hi)
    return left, right - left


def months_between(start: date | datetime, end: date | datetime) -> list[date]:
    """Return the first day of every month from ``start``'s month through ``end``."""
    first = as_day(start).replace(day=1)
    last = as_day(end)
    months: list[date] = []
    current = first
    while current <= last:
        months.append(current)
        if current.month == 12:
            current = current.replace(year=current.year + 1, month=1)
        else:
            current = current.replace(month=current.month + 1)
    return months


@dataclass(frozen=True, slots=True)
class HeaderScale:
    """Tick layout for the timeline header.

    Attributes
    ----------
    granularity : Granularity
        ``"day"``, ``"week"`` or ``"month"``.
    ticks : tuple[date, ...]
        Every tick date, in order.
    label_every : int
        Only every Nth tick (starting with the first) carries a label.
    """

    granularity: Granularity
    ticks: tuple[date, ...]
    label_every: int = 1

    def labelled_ticks(self) -> tuple[date, ...]:
        """Return the ticks that carry a label."""
        return self.ticks[:: self.label_every]


def _stepped(start: date, end: date, step: timedelta) -> tuple[date, ...]:
    out: list[date] = []
    current = start
    while current <= end:
        out.append(current)
        current += step
    return tuple(out)


def _label_step(tick_count: int) -> int:
    for threshold, every in MONTH_LABEL_STEPS:
        if tick_count > threshold:
            return every
    return 1


def header_scale(start: date | datetime, end: date | datetime) -> HeaderScale:
    """Choose the header granularity and label density for a window."""
    days = _window_days(start, end)
    first, last = as_day(start), as_day(end)
    if days <= DAILY_MAX_DAYS:
        return HeaderScale("day", _stepped(first, last, timedelta(days=1)))
    if days <= WEEKLY_MAX_DAYS:
        return HeaderScale("week", _stepped(first, last, timedelta(days=7)))
    months = tuple(months_between(first, last))
    return HeaderScale("month", months, _label_step(len(months)))


__all__ = [
    "DAILY_MAX_DAYS",
    "Granularity",
    "HeaderScale",
    "WEEKLY_MAX_DAYS",
    "as_day",
    "clip_span",
    "header_scale",
    "months_between",
    "position",
    "width",
]
