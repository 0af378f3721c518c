"""Trackline: categorized event timelines with lane packing and CSV/YAML round-trips."""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.1.0"
