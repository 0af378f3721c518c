# scripts/smoke.py
"""
Smoke Test Script for the Trackline round-trip harness.

Usage
-----
1. Run every bundled scenario through CSV, YAML and YAML -> CSV:
    $ uv run python scripts/smoke.py

2. Round-trip a local file instead:
    $ uv run python scripts/smoke.py --file samples/events.yaml
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from trackline.core.contracts import RoundTripReport
from trackline.io import TimelineFormatError, parse_csv, parse_yaml, read_document
from trackline.pipelines import run_all, run_round_trip

# --------------------------------------------------------------------------- #
# Environment Setup
# --------------------------------------------------------------------------- #
env_path = Path(".env")
if env_path.exists():
    load_dotenv(env_path)
    print("✅ Loaded .env file")

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)


def _print_report(report: RoundTripReport) -> None:
    mark = "✅" if report.passed else "❌"
    print(
        f"{mark} {report.scenario:<14} {' -> '.join(report.formats):<12} "
        f"{report.original_count} -> {report.reimported_count} events, "
        f"stable={report.stable}"
    )
    for check in report.failures:
        for mismatch in check.mismatches:
            print(f"     {check.event_id}: {mismatch}")
    for event_id in report.missing:
        print(f"     {event_id}: lost in round trip")


def main() -> int:
    """Execute the smoke test workflow."""
    parser = argparse.ArgumentParser(description="Run Trackline Smoke Test")
    parser.add_argument("--file", "-f", type=str, help="Path to a .csv/.yaml timeline file")
    args = parser.parse_args()

    if args.file:
        input_path = Path(args.file)
        if not input_path.exists():
            print(f"❌ File not found: {input_path}")
            return 1
        print(f"\n📂 Using input file: {input_path}")
        try:
            text, fmt = read_document(input_path)
            rows = parse_csv(text) if fmt == "csv" else parse_yaml(text).events
        except (TimelineFormatError, ValueError) as exc:
            print(f"\n❌ Could not read {input_path}: {exc}")
            return 1
        reports = [
            run_round_trip(rows, formats, scenario=input_path.name)
            for formats in (("csv",), ("yaml",), ("yaml", "csv"))
        ]
    else:
        print("\n📝 Using bundled sample scenarios (No --file provided)")
        reports = run_all()

    print("\n" + "=" * 60)
    for report in reports:
        _print_report(report)
    print("=" * 60)

    failed = sum(not r.passed for r in reports)
    print(f"\n{len(reports) - failed}/{len(reports)} round trips passed")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
