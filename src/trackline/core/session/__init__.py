"""Session state: the single owner of a timeline, plus snapshots on disk."""

from __future__ import annotations

from .session import (
    CategoryInUseError,
    DuplicateCategoryError,
    DuplicateEventIdError,
    ImportMode,
    TimelineSession,
)
from .snapshot import SessionSnapshot
from .storage import SnapshotWriter, load_snapshot

__all__ = [
    "CategoryInUseError",
    "DuplicateCategoryError",
    "DuplicateEventIdError",
    "ImportMode",
    "SessionSnapshot",
    "SnapshotWriter",
    "TimelineSession",
    "load_snapshot",
]
