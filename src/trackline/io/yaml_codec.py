"""
YAML codec built on PyYAML.

Document shape
--------------
::

    timeline:            # optional visible window
      start: "2023-01-01"
      end: "2023-12-31"
    categories:          # optional
      - {id: work, name: Work, color: "#3366cc"}
    events:
      - eventId: P1
        title: Parent
        type: milestone
        start: "2023-01-01"
        end: "2023-01-01"
        isParent: true

A bare list of events is accepted as a legacy document. Dates are loaded as
plain strings, quoted or not, so an impossible day such as ``2023-02-30``
reaches ingestion and becomes a per-row warning. On export every date is
written as an ISO string.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import yaml

from trackline.core.contracts import Category, TimelineEvent, TimelineWindow

from .errors import YamlFormatError
from .records import RawDocument, events_to_yaml_items, iso_day

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class _DocumentLoader(yaml.SafeLoader):
    """``SafeLoader`` without implicit timestamp resolution."""


_DocumentLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _mapping_list(value: Any, key: str) -> list[dict[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise YamlFormatError(f"'{key}' must be a list, got {type(value).__name__}")
    for idx, item in enumerate(value, start=1):
        if not isinstance(item, dict):
            raise YamlFormatError(f"{key}[{idx}] must be a mapping, got {type(item).__name__}")
    return value


def parse_yaml(text: str) -> RawDocument:
    """Parse YAML text into a :class:`RawDocument`.

    Raises
    ------
    YamlFormatError
        If the text is not valid YAML or the top level has the wrong shape.
    """
    try:
        data = yaml.load(text, Loader=_DocumentLoader)
    except yaml.YAMLError as exc:
        raise YamlFormatError(f"invalid YAML: {exc}") from exc
    except ValueError as exc:
        # Explicit !!timestamp tags still reach the constructor.
        raise YamlFormatError(f"invalid YAML value: {exc}") from exc

    if data is None:
        return RawDocument()
    if isinstance(data, list):
        return RawDocument(events=_mapping_list(data, "events"))
    if not isinstance(data, dict):
        raise YamlFormatError("YAML document must be a mapping or a list of events")

    timeline = data.get("timeline")
    if timeline is not None and not isinstance(timeline, dict):
        raise YamlFormatError("'timeline' must be a mapping with 'start' and 'end'")
    return RawDocument(
        events=_mapping_list(data.get("events"), "events"),
        categories=_mapping_list(data.get("categories"), "categories"),
        timeline=timeline,
    )


def events_to_yaml(
    events: Sequence[TimelineEvent],
    categories: Sequence[Category] = (),
    window: TimelineWindow | None = None,
) -> str:
    """Serialize events (and optionally categories and the window) as YAML text."""
    doc: dict[str, Any] = {}
    if window is not None:
        doc["timeline"] = {"start": iso_day(window.start), "end": iso_day(window.end)}
    if categories:
        doc["categories"] = [c.model_dump() for c in categories]
    doc["events"] = events_to_yaml_items(events)
    return yaml.safe_dump(doc, sort_keys=False, allow_unicode=True, default_flow_style=False)


__all__ = ["events_to_yaml", "parse_yaml"]
