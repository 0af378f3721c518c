"""Disk-backed writer for session snapshots.

This module persists :class:`SessionSnapshot` objects as YAML files.

- Default directory: ``TRACKLINE_SNAPSHOT_DIR`` setting (``artifacts/snapshots/``)
- Filename pattern:  ``YYYYmmddTHHMMSSmmmZ_rev{rev:06d}.yaml``
- Content:           a YAML mapping mirroring the ``SessionSnapshot`` dataclass

Usage
-----
>>> writer = SnapshotWriter()  # uses the configured dir
>>> path = writer.write(snap)  # returns the file path
"""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
from typing import Any

import yaml

from trackline.core.settings import load_settings

from .snapshot import SessionSnapshot


class SnapshotWriter:
    """Persist session snapshots to disk as YAML files."""

    def __init__(self, base_dir: Path | None = None) -> None:
        self.base_dir: Path = base_dir if base_dir is not None else load_settings().snapshot_dir
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def write(self, snap: SessionSnapshot) -> Path:
        """Write ``snap`` to disk and return the created file path."""
        # "2025-11-12T02:02:37.104Z" -> "20251112T020237104Z"
        safe_ts = snap.timestamp.replace("-", "").replace(":", "").replace(".", "")
        path = self.base_dir / f"{safe_ts}_rev{snap.revision:06d}.yaml"

        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(asdict(snap), f, sort_keys=False, allow_unicode=True)
        return path


def load_snapshot(path: Path) -> SessionSnapshot:
    """Read a snapshot file written by :class:`SnapshotWriter`."""
    with path.open("r", encoding="utf-8") as f:
        payload: dict[str, Any] = yaml.safe_load(f)
    return SessionSnapshot(**payload)


__all__ = ["SnapshotWriter", "load_snapshot"]
