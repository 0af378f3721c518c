"""Core package initializer for Trackline.

Downstream code imports from the submodules directly, e.g.:
    from trackline.core.settings import settings, get_logger
    from trackline.core.temporal import position, width
"""

from __future__ import annotations

__all__ = ["__doc__"]
