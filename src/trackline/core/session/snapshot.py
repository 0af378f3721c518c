"""
Session snapshot definition.

This module defines the immutable record of a session's data at a specific
revision. It is separated from ``session.py`` so the writer in ``storage.py``
and the CLI can use it without importing the session itself.

Design Notes
------------
- **Immutability**: Once created, a snapshot should not change. We use ``frozen=True``.
- **Serialization**: Timestamps are stored as ``str`` (ISO-8601, UTC, ``Z``
  suffix), and ``document`` already holds the exported YAML text, so writing
  a snapshot to disk needs no further conversion.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """
    Immutable record of a session at one revision.

    Attributes
    ----------
    timestamp : str
        ISO-8601 formatted timestamp string (e.g., "2023-10-27T10:00:00.123Z").
    revision : int
        The session revision at capture time (bumped by every mutation).
    note : str | None
        Optional human-readable label (e.g., 'after import of events.csv').
    event_count : int
        Number of events held by the session at capture time.
    document : str
        The full session exported as a YAML document.
    """

    timestamp: str
    revision: int
    note: str | None
    event_count: int
    document: str
