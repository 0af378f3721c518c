"""Collection statistics and country-name normalization."""

from __future__ import annotations

from collections.abc import Iterable

from trackline.core.contracts import DataStats, TimelineEvent

# Aliases mapped onto the names used by world-map geodata.
COUNTRY_NAME_MAP: dict[str, str] = {
    "United States": "United States of America",
    "USA": "United States of America",
    "U.S.A.": "United States of America",
    "U.S.": "United States of America",
    "UK": "United Kingdom",
    "Great Britain": "United Kingdom",
    "French Guiana": "France",
    "Guyane": "France",
}


def normalize_country_name(name: str) -> str:
    """Return the canonical country name for ``name`` (unchanged if unknown)."""
    return COUNTRY_NAME_MAP.get(name, name)


def calculate_data_stats(events: Iterable[TimelineEvent]) -> DataStats:
    """Summarize an event collection."""
    stats = DataStats()
    categories: set[str] = set()
    locations: set[str] = set()

    for ev in events:
        stats.total_events += 1
        stats.types[ev.type] = stats.types.get(ev.type, 0) + 1
        if ev.category:
            categories.add(ev.category)
        if ev.location is not None and ev.location.country:
            locations.add(normalize_country_name(ev.location.country))
        if ev.parent_id or ev.parent is not None:
            stats.parent_child_relations += 1
        if ev.is_important:
            stats.important_events += 1
        if ev.is_parent:
            stats.parent_events += 1
        if ev.start is None:
            stats.unpositioned_events += 1
            continue
        if stats.earliest is None or ev.start < stats.earliest:
            stats.earliest = ev.start
        if stats.latest is None or ev.start > stats.latest:
            stats.latest = ev.start

    stats.categories = sorted(categories)
    stats.locations = sorted(locations)
    return stats


__all__ = ["COUNTRY_NAME_MAP", "calculate_data_stats", "normalize_country_name"]
