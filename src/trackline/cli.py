"""
Trackline Command Line Interface (CLI).

This module implements the terminal interface using ``typer`` and ``rich``.

Commands
--------
- **show**: Import a CSV/YAML file and print its lane layout.
- **convert**: Import a file and export it in the other (or same) format.
- **stats**: Print collection statistics for a file.
- **validate**: Run the round-trip harness over the bundled sample scenarios.

Usage
-----
    $ trackline show events.csv --start 2023-01-01 --end 2023-12-31
    $ trackline convert events.yaml events.csv
    $ trackline validate --scenario chain
"""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from trackline.core.contracts import ImportWarning, TimelineEvent, TimelineWindow
from trackline.core.layout import nesting
from trackline.core.session import SnapshotWriter, TimelineSession
from trackline.core.temporal import clip_span, header_scale
from trackline.io import TimelineFormatError, detect_format, read_document, write_document
from trackline.io.importer import Format
from trackline.pipelines import SCENARIOS, run_all

load_dotenv()

app = typer.Typer(
    help="Trackline: categorized event timelines with CSV/YAML round-tripping.",
    rich_markup_mode="markdown",
)
console = Console()


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #


def _load_session(file: Path) -> tuple[TimelineSession, list[ImportWarning]]:
    """Read ``file`` into a fresh session, exiting with code 1 on format errors."""
    try:
        text, fmt = read_document(file)
        session = TimelineSession()
        result = session.import_text(text, fmt)
    except (TimelineFormatError, ValueError) as e:
        console.print(f"[bold red]❌ Import Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1) from e
    return session, list(result.warnings)


def _render_warnings(warnings: list[ImportWarning]) -> None:
    if not warnings:
        return
    body = "\n".join(escape(str(w)) for w in warnings)
    console.print(Panel(body, title=f"{len(warnings)} warning(s)", border_style="yellow"))


def _dates(ev: TimelineEvent) -> str:
    if ev.type != "range":
        return str(ev.start or "?")
    return f"{ev.start or '?'} .. {ev.end or '?'}"


def _parse_day(value: str | None) -> date | None:
    return datetime.strptime(value, "%Y-%m-%d").date() if value else None


def _resolve_window(
    session: TimelineSession, start: str | None, end: str | None
) -> TimelineWindow | None:
    """Use explicit bounds, else the file's window, else the data's extent."""
    if start or end:
        base = session.window
        s = _parse_day(start) or (base.start if base else None)
        e = _parse_day(end) or (base.end if base else None)
        if s is None or e is None:
            raise typer.BadParameter("--start and --end must both be given")
        return TimelineWindow(start=s, end=e)
    if session.window is not None:
        return session.window
    stats = session.stats()
    ends = [ev.end for ev in session.events() if ev.end is not None]
    if stats.earliest is None or not ends or max(ends) <= stats.earliest:
        return None
    return TimelineWindow(start=stats.earliest, end=max(ends))


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def show(
    file: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, readable=True, help="CSV or YAML file."),
    ],
    start: Annotated[
        str | None, typer.Option("--start", help="Window start (YYYY-MM-DD).")
    ] = None,
    end: Annotated[str | None, typer.Option("--end", help="Window end (YYYY-MM-DD).")] = None,
    snapshot: Annotated[
        bool,
        typer.Option("--snapshot", help="Write a YAML snapshot to TRACKLINE_SNAPSHOT_DIR."),
    ] = False,
) -> None:
    """
    Import a file and print each event with its lane and horizontal placement.
    """
    session, warnings = _load_session(file)
    try:
        window = _resolve_window(session, start, end)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e

    rows = session.rows()
    nest = nesting(rows)
    by_id = {ev.id: ev for ev in rows}

    title = f"{file.name}: {len(rows)} event(s)"
    if window is not None:
        scale = header_scale(window.start, window.end)
        title += f" | {window.start} -> {window.end} ({scale.granularity})"

    table = Table(title=title)
    for column in ("Category", "Row", "Event", "Title", "Type", "Dates", "Parent", "Span %"):
        table.add_column(column)

    ordered = sorted(rows, key=lambda ev: (ev.category or "", ev.row if ev.row is not None else -1))
    for ev in ordered:
        span = "-"
        if window is not None and ev.start is not None and ev.end is not None:
            clipped = clip_span(ev.start, ev.end, window.start, window.end)
            span = "outside" if clipped is None else f"{clipped[0]:.1f} +{clipped[1]:.1f}"
        depth = nest[ev.id].depth if ev.id in nest else 0
        parent = escape(by_id[ev.parent].event_id) if ev.parent in by_id else ""
        table.add_row(
            escape(ev.category or ""),
            "-" if ev.row is None else str(ev.row),
            escape(ev.event_id),
            "  " * depth + escape(ev.title),
            ev.type,
            _dates(ev),
            parent,
            span,
        )
    console.print(table)
    _render_warnings(warnings)

    if snapshot:
        path = SnapshotWriter().write(session.snapshot(f"show {file.name}"))
        console.print(f"[dim]Snapshot saved to: {path}[/dim]")


@app.command()  # type: ignore[misc]
def convert(
    source: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, readable=True, help="CSV or YAML input."),
    ],
    target: Annotated[Path, typer.Argument(help="Output path (.csv, .yaml or .yml).")],
    fmt: Annotated[
        str | None,
        typer.Option("--to", help="Output format; inferred from the extension when omitted."),
    ] = None,
) -> None:
    """
    Convert a timeline document between CSV and YAML.
    """
    session, warnings = _load_session(source)
    try:
        out_fmt: Format = detect_format(target) if fmt is None else _as_format(fmt)
    except ValueError as e:
        console.print(f"[bold red]❌ {escape(str(e))}[/bold red]")
        raise typer.Exit(code=1) from e

    path = write_document(target, session.export_text(out_fmt))
    _render_warnings(warnings)
    console.print(
        f"[bold green]✅ Wrote {len(session.events())} event(s)[/bold green] to {path}"
    )


def _as_format(value: str) -> Format:
    lowered = value.lower()
    if lowered == "csv":
        return "csv"
    if lowered in ("yaml", "yml"):
        return "yaml"
    raise ValueError(f"unknown format {value!r}; expected csv or yaml")


@app.command()  # type: ignore[misc]
def stats(
    file: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, readable=True, help="CSV or YAML file."),
    ],
) -> None:
    """
    Print collection statistics (types, categories, countries, hierarchy, range).
    """
    session, warnings = _load_session(file)
    data = session.stats()

    table = Table(title=f"Statistics for {file.name}", show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value")
    table.add_row("Events", str(data.total_events))
    for ev_type, count in sorted(data.types.items()):
        table.add_row(f"  {ev_type}", str(count))
    table.add_row("Categories", ", ".join(data.categories) or "-")
    table.add_row("Countries", ", ".join(data.locations) or "-")
    table.add_row("Parent/child links", str(data.parent_child_relations))
    table.add_row("Parent events", str(data.parent_events))
    table.add_row("Important events", str(data.important_events))
    table.add_row("Unpositioned events", str(data.unpositioned_events))
    table.add_row("Earliest start", str(data.earliest or "-"))
    table.add_row("Latest start", str(data.latest or "-"))
    console.print(table)
    _render_warnings(warnings)


@app.command()  # type: ignore[misc]
def validate(
    scenario: Annotated[
        list[str] | None,
        typer.Option(
            "--scenario",
            "-s",
            help=f"Scenario to run (repeatable). Default: all of {', '.join(SCENARIOS)}.",
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="List every field mismatch.")
    ] = False,
) -> None:
    """
    Run the round-trip harness and exit with code 1 if any check fails.
    """
    names = scenario or list(SCENARIOS)
    unknown = [n for n in names if n not in SCENARIOS]
    if unknown:
        console.print(f"[bold red]❌ Unknown scenario(s):[/bold red] {', '.join(unknown)}")
        raise typer.Exit(code=2)

    reports = run_all(names)

    table = Table(title="Round-trip validation")
    for column in ("Scenario", "Formats", "Events", "Failures", "Missing", "Stable", "Result"):
        table.add_column(column)
    for report in reports:
        table.add_row(
            report.scenario,
            " -> ".join(report.formats),
            f"{report.original_count} -> {report.reimported_count}",
            str(len(report.failures)),
            ", ".join(report.missing) or "-",
            "yes" if report.stable else "no",
            "[green]PASS[/green]" if report.passed else "[red]FAIL[/red]",
        )
    console.print(table)

    if verbose:
        for report in reports:
            for check in report.failures:
                for mismatch in check.mismatches:
                    console.print(
                        f" [dim]{report.scenario}[/dim] {escape(check.event_id)}: {escape(str(mismatch))}"
                    )

    failed = [r for r in reports if not r.passed]
    if failed:
        console.print(f"\n[bold red]❌ {len(failed)} of {len(reports)} run(s) failed[/bold red]")
        raise typer.Exit(code=1)
    console.print(f"\n[bold green]✅ All {len(reports)} run(s) passed[/bold green]")


if __name__ == "__main__":
    app()
