"""Lane layout for timeline events (overlap resolution and nesting)."""

from __future__ import annotations

from .rows import Nesting, compute_rows, group_by_category, nesting, overlap, pack_lanes

__all__ = ["Nesting", "compute_rows", "group_by_category", "nesting", "overlap", "pack_lanes"]
