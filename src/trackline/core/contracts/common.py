"""Small shared types used by the timeline contracts.

Colors
------
Colors are kept as the exact string the user supplied (``#RGB`` or
``#RRGGBB``); round-trips compare them with plain string equality, so no
case folding or expansion happens here.
"""

from __future__ import annotations

import random
from typing import Annotated, Literal

from pydantic import Field

EventType = Literal["range", "milestone", "life"]
EVENT_TYPES: tuple[EventType, ...] = ("range", "milestone", "life")

HEX_COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3}){1,2}$"

HexColor = Annotated[
    str,
    Field(pattern=HEX_COLOR_PATTERN, description="RGB hex color, e.g. '#1f77b4'."),
]

# Bucket used for events without a category when grouping into lanes.
UNCATEGORIZED = "uncategorized"


def random_color(rng: random.Random) -> str:
    """Return a random ``#rrggbb`` color drawn from ``rng``."""
    return f"#{rng.randrange(0x1000000):06x}"


__all__ = [
    "EVENT_TYPES",
    "EventType",
    "HEX_COLOR_PATTERN",
    "HexColor",
    "UNCATEGORIZED",
    "random_color",
]
