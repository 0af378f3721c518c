"""Serialization pipeline: CSV/YAML parsing, ingestion, parent linking and export."""

from __future__ import annotations

from .csv_codec import events_to_csv, parse_csv, split_csv_line
from .errors import CsvFormatError, TimelineFormatError, YamlFormatError
from .files import detect_format, read_document, write_document
from .importer import FORMATS, Format, export_text, import_text
from .ingest import link_parents, process_imported_data
from .yaml_codec import events_to_yaml, parse_yaml

__all__ = [
    "CsvFormatError",
    "FORMATS",
    "Format",
    "TimelineFormatError",
    "YamlFormatError",
    "detect_format",
    "events_to_csv",
    "events_to_yaml",
    "export_text",
    "import_text",
    "link_parents",
    "parse_csv",
    "parse_yaml",
    "process_imported_data",
    "read_document",
    "split_csv_line",
    "write_document",
]
