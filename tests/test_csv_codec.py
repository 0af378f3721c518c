"""Unit tests for the CSV grammar: quoting, escapes, headers and export."""

from __future__ import annotations

from datetime import date
from typing import Any

import pytest

from trackline.io import CsvFormatError, events_to_csv, parse_csv, split_csv_line
from trackline.io.csv_codec import quote_value
from trackline.io.records import CSV_COLUMNS


def test_split_handles_quotes_commas_and_escaped_quotes() -> None:
    """Quoted commas stay in the value; \\" is a literal quote inside quotes."""
    assert split_csv_line('a, "b,c" ,"say \\"hi\\""') == ["a", "b,c", 'say "hi"']


def test_doubled_quotes_and_backslashes() -> None:
    """\"\" and \\\\ inside quotes decode to one quote and one backslash."""
    assert split_csv_line('"He said ""no"""') == ['He said "no"']
    assert split_csv_line('"C:\\\\temp","a\\b"') == ["C:\\temp", "a\\b"]


def test_unquoted_values_are_trimmed_quoted_are_not() -> None:
    """Whitespace around unquoted values is dropped; quoted values are exact."""
    assert split_csv_line('  x  ," y "') == ["x", " y "]


def test_quoted_field_may_span_lines() -> None:
    """A newline inside quotes belongs to the value, not the record."""
    rows = parse_csv('eventId,title,metadata\nE1,T,"line1\nline2"\nE2,U,plain\n')
    assert rows == [
        {"eventId": "E1", "title": "T", "metadata": "line1\nline2"},
        {"eventId": "E2", "title": "U", "metadata": "plain"},
    ]


def test_crlf_bom_and_blank_lines() -> None:
    """CRLF endings, a UTF-8 BOM and blank lines are tolerated."""
    text = "\ufeffeventId,title\r\n\r\nE1,T\r\n\r\n"
    assert parse_csv(text) == [{"eventId": "E1", "title": "T"}]


def test_short_rows_are_padded_and_trailing_empties_ignored() -> None:
    """Missing trailing values become empty strings; empty extras are dropped."""
    rows = parse_csv("a,b,c\n1\n1,2,3,,\n")
    assert rows == [{"a": "1", "b": "", "c": ""}, {"a": "1", "b": "2", "c": "3"}]


@pytest.mark.parametrize(  # type: ignore[misc]
    "text, fragment",
    [
        ("", "no header"),
        ("\n\n", "no header"),
        ("a,,c\n", "empty column"),
        ("a,b,a\n", "duplicate"),
        ("a,b\n1,2,3\n", "3 values for 2 columns"),
        ('a,b\n"open,2\n', "unterminated"),
        ('a,b\n"x"y,2\n', "after closing quote"),
    ],
)
def test_format_errors(text: str, fragment: str) -> None:
    """Unusable input raises CsvFormatError with a useful message."""
    with pytest.raises(CsvFormatError, match=fragment):
        parse_csv(text)


def test_quote_value_only_when_needed() -> None:
    """Plain values pass through; special characters trigger quoting."""
    assert quote_value("plain") == "plain"
    assert quote_value("a,b") == '"a,b"'
    assert quote_value('say "hi"') == '"say ""hi"""'
    assert quote_value("C:\\x") == '"C:\\\\x"'
    assert quote_value(" pad") == '" pad"'
    assert quote_value("two\nlines") == '"two\nlines"'


def test_export_header_is_always_present() -> None:
    """An empty collection still exports the header row."""
    assert events_to_csv([]) == ",".join(CSV_COLUMNS) + "\n"


def test_awkward_values_survive_export_and_parse(make_event: Any) -> None:
    """Commas, quotes, backslashes and newlines come back unchanged."""
    ev = make_event(
        1,
        date(2023, 1, 1),
        date(2023, 1, 3),
        title='Comma, "quote" and \\ backslash',
        metadata="two\nlines, with \\\"escapes\\\"",
        emoji="🎉",
    )
    (row,) = parse_csv(events_to_csv([ev]))
    assert row["title"] == ev.title
    assert row["metadata"] == ev.metadata
    assert row["emoji"] == "🎉"
    assert row["start"] == "2023-01-01" and row["end"] == "2023-01-03"
    assert row["isImportant"] == "false"


def test_export_writes_parent_by_event_id(make_event: Any) -> None:
    """A derived parent link without parent_id exports the parent's eventId."""
    parent = make_event(1, date(2023, 1, 1), event_id="P1", is_parent=True)
    child = make_event(2, date(2023, 1, 2), event_id="C1", parent=1)
    rows = parse_csv(events_to_csv([parent, child]))
    assert [r["parentId"] for r in rows] == ["", "P1"]
