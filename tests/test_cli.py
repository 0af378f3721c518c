# tests/test_cli.py
"""
Tests for the Trackline command-line interface (CLI).

Scope
-----
1.  **Command Registration**: ``--help`` lists every command.
2.  **Argument Validation**: Typer's ``exists=True`` checks for input files.
3.  **Happy Paths**: ``show``, ``convert``, ``stats`` and ``validate`` on real files.
4.  **Error Handling**: malformed input and failing validations exit with code 1.

We use ``typer.testing.CliRunner`` to invoke the app in-process.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
import yaml
from typer.testing import CliRunner

from trackline import cli
from trackline.cli import app
from trackline.core.contracts import EventCheck, FieldMismatch, RoundTripReport
from trackline.core.settings import load_settings

CSV = (
    "eventId,title,start,end,type,parentId,category,location_country\n"
    "P1,Parent,2023-01-01,2023-01-31,range,,Work,USA\n"
    "C1,Child,2023-01-05,2023-01-10,range,P1,Work,\n"
)


@pytest.fixture  # type: ignore[misc]
def runner(monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    """
    Create a fresh CliRunner for each test.

    The shared console is widened so Rich tables never truncate cell text.
    """
    monkeypatch.setattr(cli.console, "width", 200)
    return CliRunner()


@pytest.fixture  # type: ignore[misc]
def csv_file(tmp_path: Path) -> Path:
    path = tmp_path / "events.csv"
    path.write_text(CSV, encoding="utf-8")
    return path


def test_cli_help_shows_usage(runner: CliRunner) -> None:
    """Invoking --help should print usage instructions and exit 0."""
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0, f"Help failed: {result.output}"
    for command in ("show", "convert", "stats", "validate"):
        assert command in result.output


def test_show_fails_on_missing_file(runner: CliRunner) -> None:
    """Typer should enforce `exists=True` for the input file argument."""
    result = runner.invoke(app, ["show", "ghost.csv"])
    assert result.exit_code != 0
    assert "does not exist" in result.output


def test_show_prints_lanes(runner: CliRunner, csv_file: Path) -> None:
    """The layout table lists each event."""
    result = runner.invoke(
        app, ["show", str(csv_file), "--start", "2023-01-01", "--end", "2023-03-01"]
    )
    assert result.exit_code == 0, f"CLI Failed with Output:\n{result.output}"
    assert "P1" in result.output and "C1" in result.output
    assert "week" in result.output


def test_show_writes_snapshot(
    runner: CliRunner, csv_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """--snapshot writes a YAML file into the configured directory."""
    outdir = tmp_path / "snaps"
    monkeypatch.setenv("TRACKLINE_SNAPSHOT_DIR", str(outdir))
    load_settings.cache_clear()
    result = runner.invoke(app, ["show", str(csv_file), "--snapshot"])
    assert result.exit_code == 0, result.output
    assert len(list(outdir.glob("*.yaml"))) == 1


def test_convert_csv_to_yaml(runner: CliRunner, csv_file: Path, tmp_path: Path) -> None:
    """Conversion infers the format from the target extension."""
    target = tmp_path / "out" / "events.yaml"
    result = runner.invoke(app, ["convert", str(csv_file), str(target)])
    assert result.exit_code == 0, result.output

    data = yaml.safe_load(target.read_text(encoding="utf-8"))
    assert [e["eventId"] for e in data["events"]] == ["P1", "C1"]
    assert data["events"][1]["parentId"] == "P1"
    assert [c["id"] for c in data["categories"]] == ["Work"]


def test_convert_rejects_malformed_input(runner: CliRunner, tmp_path: Path) -> None:
    """Format errors are reported and exit with code 1."""
    bad = tmp_path / "bad.csv"
    bad.write_text('eventId,title\n"E1,broken\n', encoding="utf-8")
    result = runner.invoke(app, ["convert", str(bad), str(tmp_path / "out.yaml")])
    assert result.exit_code == 1
    assert "Import Error" in result.output
    assert not (tmp_path / "out.yaml").exists()


def test_stats_reports_counts(runner: CliRunner, csv_file: Path) -> None:
    """The statistics table includes normalized countries and link counts."""
    result = runner.invoke(app, ["stats", str(csv_file)])
    assert result.exit_code == 0, result.output
    assert "United States of America" in result.output
    assert "Work" in result.output


def test_validate_passes_on_samples(runner: CliRunner) -> None:
    """The bundled scenarios all round-trip."""
    result = runner.invoke(app, ["validate"])
    assert result.exit_code == 0, result.output
    assert "passed" in result.output


def test_validate_rejects_unknown_scenario(runner: CliRunner) -> None:
    """Unknown scenario names are a usage error."""
    result = runner.invoke(app, ["validate", "--scenario", "nope"])
    assert result.exit_code == 2
    assert "Unknown scenario" in result.output


def test_validate_exits_one_on_failure(runner: CliRunner) -> None:
    """A failing report turns into exit code 1."""
    failing = RoundTripReport(
        scenario="basic",
        formats=["csv"],
        original_count=1,
        reimported_count=1,
        checks=[
            EventCheck(
                event_id="E1",
                title="T",
                mismatches=[FieldMismatch(field="title", expected="T", actual="U")],
            )
        ],
    )
    with patch("trackline.cli.run_all", return_value=[failing]):
        result = runner.invoke(app, ["validate", "-v"])
    assert result.exit_code == 1, result.output
    assert "title mismatch" in result.output
