"""
CSV codec: header-driven parsing and export of timeline events.

This is a small hand-written grammar rather than the ``csv`` module because
the accepted input has one non-standard rule: inside a quoted field a
backslash-escaped quote (``\\"``) is a literal quote and does not toggle the
quote state. The full rule set:

- Fields are separated by ``,``; records by ``\\n`` or ``\\r\\n`` outside quotes.
- A quoted field may span lines.
- Inside quotes: ``""`` and ``\\"`` are literal quotes, ``\\\\`` is a literal
  backslash; any other character is literal.
- Outside quotes every character is literal; unquoted values are trimmed,
  quoted values are kept exactly.
- The first non-blank record is the header. Blank records are skipped.

Export quotes any value containing a comma, quote, backslash, newline or
leading/trailing whitespace, doubling quotes and backslashes, so that
``parse_csv(events_to_csv(...))`` reproduces every value.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from trackline.core.contracts import TimelineEvent

from .errors import CsvFormatError
from .records import CSV_COLUMNS, events_to_csv_rows

_FieldToken = tuple[str, bool]  # (value, was_quoted)
_NEEDS_QUOTES = (",", '"', "\\", "\n", "\r")


def _finish(buf: list[str], quoted: bool) -> _FieldToken:
    value = "".join(buf)
    return (value, True) if quoted else (value.strip(), False)


def _scan(text: str) -> Iterator[tuple[int, list[_FieldToken]]]:
    """Yield ``(line_number, fields)`` for every record in ``text``.

    Raises
    ------
    CsvFormatError
        If a quoted field is still open at the end of the input.
    """
    fields: list[_FieldToken] = []
    buf: list[str] = []
    in_quotes = False
    quoted = False
    closed = False  # a quoted field ended; only whitespace may follow
    line = 1
    record_line = 1
    quote_line = 1
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]
        if in_quotes:
            nxt = text[i + 1] if i + 1 < n else ""
            if ch == "\\" and nxt in ('"', "\\"):
                buf.append(nxt)
                i += 2
                continue
            if ch == '"':
                if nxt == '"':
                    buf.append('"')
                    i += 2
                    continue
                in_quotes = False
                closed = True
                i += 1
                continue
            if ch == "\n":
                line += 1
            buf.append(ch)
            i += 1
            continue

        if ch == '"' and not closed and not "".join(buf).strip():
            buf = []
            in_quotes = True
            quoted = True
            quote_line = line
        elif ch == ",":
            fields.append(_finish(buf, quoted))
            buf, quoted, closed = [], False, False
        elif ch in "\r\n":
            if ch == "\r" and i + 1 < n and text[i + 1] == "\n":
                i += 1
            fields.append(_finish(buf, quoted))
            yield record_line, fields
            fields, buf, quoted, closed = [], [], False, False
            line += 1
            record_line = line
        elif closed:
            if not ch.isspace():
                raise CsvFormatError(
                    f"line {line}: unexpected character {ch!r} after closing quote"
                )
        else:
            buf.append(ch)
        i += 1

    if in_quotes:
        raise CsvFormatError(f"line {quote_line}: unterminated quoted field")
    if buf or fields or quoted:
        fields.append(_finish(buf, quoted))
        yield record_line, fields


def _is_blank(fields: list[_FieldToken]) -> bool:
    return len(fields) == 1 and fields[0] == ("", False)


def split_csv_line(line: str) -> list[str]:
    """Split a single CSV line into values using the rules above.

    >>> split_csv_line('a, "b,c" ,"say \\\\"hi\\\\""')
    ['a', 'b,c', 'say "hi"']
    """
    for _, fields in _scan(line):
        return [value for value, _ in fields]
    return [""]


def parse_csv(text: str) -> list[dict[str, str]]:
    """Parse CSV text into raw rows keyed by header name.

    Short rows are padded with empty strings. Trailing empty values beyond
    the header are ignored; any other surplus value is a format error.

    Raises
    ------
    CsvFormatError
        Missing header, empty or duplicate column names, broken quoting, or a
        record with more values than columns.
    """
    text = text.lstrip("\ufeff")
    records = ((ln, f) for ln, f in _scan(text) if not _is_blank(f))

    header_record = next(records, None)
    if header_record is None:
        raise CsvFormatError("CSV input has no header row")
    _, header_fields = header_record
    headers = [value for value, _ in header_fields]
    if any(not h for h in headers):
        raise CsvFormatError("CSV header contains an empty column name")
    dupes = sorted({h for h in headers if headers.count(h) > 1})
    if dupes:
        raise CsvFormatError(f"CSV header has duplicate columns: {dupes}")

    rows: list[dict[str, str]] = []
    for line_no, fields in records:
        values = [value for value, _ in fields]
        extra = values[len(headers) :]
        if any(extra):
            raise CsvFormatError(
                f"line {line_no}: {len(values)} values for {len(headers)} columns"
            )
        values = values[: len(headers)] + [""] * (len(headers) - len(values))
        rows.append(dict(zip(headers, values, strict=True)))
    return rows


def quote_value(value: str) -> str:
    """Quote ``value`` for export when the grammar requires it."""
    if any(c in value for c in _NEEDS_QUOTES) or value != value.strip():
        escaped = value.replace("\\", "\\\\").replace('"', '""')
        return f'"{escaped}"'
    return value


def events_to_csv(events: Sequence[TimelineEvent]) -> str:
    """Serialize events as CSV text (header always present, ``\\n`` line endings)."""
    lines = [",".join(CSV_COLUMNS)]
    for row in events_to_csv_rows(events):
        lines.append(",".join(quote_value(row[col]) for col in CSV_COLUMNS))
    return "\n".join(lines) + "\n"


__all__ = ["events_to_csv", "parse_csv", "quote_value", "split_csv_line"]
