"""Category: a named, colored bucket rendered as a horizontal lane group."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .common import HexColor


class Category(BaseModel):
    """A grouping bucket referenced by :attr:`TimelineEvent.category`."""

    id: str = Field(min_length=1, description="Unique category key.")
    name: str = Field(min_length=1, description="Display name.")
    color: HexColor


__all__ = ["Category"]
