"""Unit tests for collection statistics and country-name normalization."""

from __future__ import annotations

import random
from datetime import date

import pytest

from trackline.core.stats import calculate_data_stats, normalize_country_name
from trackline.io import process_imported_data
from trackline.pipelines import create_test_data


@pytest.mark.parametrize(  # type: ignore[misc]
    "name, expected",
    [
        ("USA", "United States of America"),
        ("U.S.", "United States of America"),
        ("UK", "United Kingdom"),
        ("Great Britain", "United Kingdom"),
        ("Guyane", "France"),
        ("Japan", "Japan"),
    ],
)
def test_normalize_country_name(name: str, expected: str) -> None:
    """Known aliases map to a canonical name; others pass through."""
    assert normalize_country_name(name) == expected


def test_stats_for_complex_scenario() -> None:
    """Types, categories, countries, flags and the date range are counted."""
    events = process_imported_data(create_test_data("complex"), rng=random.Random(0)).events
    stats = calculate_data_stats(events)

    assert stats.total_events == 2
    assert stats.types == {"range": 1, "milestone": 0, "life": 1}
    assert stats.categories == ["Personal", "Work"]
    assert stats.locations == ["United States of America"]
    assert stats.important_events == 1
    assert (stats.earliest, stats.latest) == (date(2023, 1, 1), date(2023, 2, 14))


def test_stats_for_hierarchy_and_unpositioned_events() -> None:
    """Parent/child links are counted and unparsable dates are reported."""
    rows = create_test_data("parent-child")
    rows.append({"title": "Broken", "start": "someday"})
    stats = calculate_data_stats(process_imported_data(rows, rng=random.Random(0)).events)

    assert stats.parent_child_relations == 2
    assert stats.parent_events == 1
    assert stats.unpositioned_events == 1
    assert stats.latest == date(2023, 1, 20)


def test_stats_for_empty_collection() -> None:
    """An empty collection has zero counts and no date range."""
    stats = calculate_data_stats([])
    assert stats.total_events == 0 and stats.earliest is None and stats.latest is None
