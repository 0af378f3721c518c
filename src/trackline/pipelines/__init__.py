"""Pipeline entry points for Trackline.

Currently exposed:

- :func:`run_round_trip` / :func:`run_all`: ingest -> export -> re-ingest
  validation with a structured report, implemented in ``roundtrip.py``.
- :func:`create_test_data`: fixed sample datasets, in ``samples.py``.
"""

from __future__ import annotations

from .roundtrip import compare_events, run_all, run_round_trip
from .samples import SCENARIOS, create_test_data

__all__ = ["SCENARIOS", "compare_events", "create_test_data", "run_all", "run_round_trip"]
