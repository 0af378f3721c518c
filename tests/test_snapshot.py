"""Unit tests for the disk snapshot writer."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any

import yaml

from trackline.core.session import SnapshotWriter, TimelineSession, load_snapshot
from trackline.core.settings import load_settings


def test_writer_writes_yaml_files(tmp_path: Path) -> None:
    """Each snapshot becomes a YAML file named after its timestamp and revision."""
    session = TimelineSession()
    session.add_event("Launch", date(2023, 5, 1), event_id="L1", type="milestone")
    s1 = session.snapshot("init")

    writer = SnapshotWriter(tmp_path / "snaps")
    p1 = writer.write(s1)
    assert p1.exists() and p1.name.endswith("_rev000001.yaml")

    with p1.open("r", encoding="utf-8") as f:
        payload: dict[str, Any] = yaml.safe_load(f)
    assert payload["revision"] == 1
    assert payload["note"] == "init"
    assert payload["event_count"] == 1
    assert payload["timestamp"].endswith("Z")
    assert "L1" in payload["document"]

    session.add_event("Follow-up", date(2023, 5, 2))
    p2 = writer.write(session.snapshot("second"))
    assert p2.exists() and p2 != p1


def test_writer_uses_configured_directory(tmp_path: Path, monkeypatch: Any) -> None:
    """Without an explicit directory the TRACKLINE_SNAPSHOT_DIR setting is used."""
    outdir = tmp_path / "configured"
    monkeypatch.setenv("TRACKLINE_SNAPSHOT_DIR", str(outdir))
    load_settings.cache_clear()

    writer = SnapshotWriter()
    assert writer.base_dir == outdir and outdir.is_dir()


def test_snapshot_file_loads_back(tmp_path: Path) -> None:
    """`load_snapshot` restores the exact record that was written."""
    session = TimelineSession()
    session.add_event("A", date(2023, 1, 1), event_id="A", metadata="multi\nline")
    snap = session.snapshot()

    restored = load_snapshot(SnapshotWriter(tmp_path).write(snap))
    assert restored == snap
    assert restored.note is None
