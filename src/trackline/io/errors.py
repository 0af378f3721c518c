"""Format-level import errors.

These abort the whole import. Row-level problems are reported as
:class:`~trackline.core.contracts.ImportWarning` instead.
"""

from __future__ import annotations


class TimelineFormatError(ValueError):
    """The input text cannot be used as a timeline document at all."""


class CsvFormatError(TimelineFormatError):
    """Malformed CSV (missing header, broken quoting, duplicate columns)."""


class YamlFormatError(TimelineFormatError):
    """Unparsable YAML or an unexpected document shape."""


__all__ = ["CsvFormatError", "TimelineFormatError", "YamlFormatError"]
