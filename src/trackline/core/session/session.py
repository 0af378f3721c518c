"""
In-memory timeline session: the single owner of events and categories.

The session holds the live collection and is the only place that mutates
it. It provides:

- event CRUD (``add_event``, ``update_event``, ``remove_event`` and lookups),
- category CRUD (``add_category``, ``update_category``, ``remove_category``),
- whole-document ``import_text`` / ``export_text`` in CSV or YAML,
- derived views (``rows`` for lane layout, ``stats`` for summaries),
- ``snapshot(note)`` to capture the exported state at the current revision.

Invariants
----------
- Internal ids are handed out from a monotonically increasing counter and
  never reused within a session.
- ``event_id`` values are unique; a collision raises :class:`DuplicateEventIdError`.
- ``parent_id`` is the source of truth for the hierarchy. After every
  structural mutation the derived ``parent`` links are recomputed.
- A failed import (format error) leaves the previous data untouched.
"""

from __future__ import annotations

import random
from datetime import UTC, date, datetime
from typing import Any, Literal

from trackline.core.contracts import (
    Category,
    DataStats,
    ImportResult,
    TimelineEvent,
    TimelineWindow,
    random_color,
)
from trackline.core.layout import compute_rows
from trackline.core.settings import get_logger, load_settings
from trackline.core.stats import calculate_data_stats
from trackline.io.importer import Format, export_text, import_text
from trackline.io.ingest import fresh_event_id, link_parents

from .snapshot import SessionSnapshot

ImportMode = Literal["replace", "append"]

logger = get_logger("trackline.session")


class DuplicateEventIdError(ValueError):
    """Raised when an ``event_id`` is already owned by another event."""


class DuplicateCategoryError(ValueError):
    """Raised when a category id is already registered."""


class CategoryInUseError(ValueError):
    """Raised when removing a category that events still reference."""


class TimelineSession:
    """
    Revisioned owner of a timeline's events, categories and window.

    Attributes
    ----------
    _events : list[TimelineEvent]
        Events in insertion order.
    _categories : dict[str, Category]
        Registered categories keyed by id.
    _window : TimelineWindow | None
        Optional visible window (carried by YAML documents).
    _next_id : int
        Next internal id to hand out.
    _rev : int
        Monotonically increasing revision counter (bumps on every mutation).
    _rng : random.Random
        Color randomizer for events and categories created without a color.
    _snapshots : list[SessionSnapshot]
        History of captured snapshots.
    """

    __slots__ = ("_events", "_categories", "_window", "_next_id", "_rev", "_rng", "_snapshots")

    def __init__(self, rng: random.Random | None = None) -> None:
        self._events: list[TimelineEvent] = []
        self._categories: dict[str, Category] = {}
        self._window: TimelineWindow | None = None
        self._next_id: int = 1
        self._rev: int = 0
        self._rng: random.Random = rng if rng is not None else load_settings().make_rng()
        self._snapshots: list[SessionSnapshot] = []

    # ------------------------------- helpers --------------------------------

    def _bump(self, what: str) -> None:
        self._rev += 1
        logger.debug("rev %d: %s", self._rev, what)

    def _relink(self) -> None:
        self._events, warnings = link_parents(self._events)
        for w in warnings:
            logger.debug("unresolved link: %s", w)

    def _index_of(self, event_id: int) -> int:
        for idx, ev in enumerate(self._events):
            if ev.id == event_id:
                return idx
        raise KeyError(f"no event with id {event_id}")

    def _check_unique(self, event_id: str, *, ignore: int | None = None) -> None:
        for ev in self._events:
            if ev.event_id == event_id and ev.id != ignore:
                raise DuplicateEventIdError(f"eventId {event_id!r} is already in use")

    # ------------------------------- properties ------------------------------

    @property
    def revision(self) -> int:
        return self._rev

    @property
    def next_id(self) -> int:
        return self._next_id

    @property
    def window(self) -> TimelineWindow | None:
        return self._window

    def set_window(self, start: date, end: date) -> TimelineWindow:
        """Set the visible window (must end after it starts)."""
        self._window = TimelineWindow(start=start, end=end)
        self._bump(f"window {start}..{end}")
        return self._window

    # ------------------------------- events ---------------------------------

    def events(self) -> tuple[TimelineEvent, ...]:
        """Return the live events in insertion order (immutable tuple)."""
        return tuple(self._events)

    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self._events)

    def find_event_by_id(self, event_id: int) -> TimelineEvent | None:
        """Return the event with internal id ``event_id``, if any."""
        return next((ev for ev in self._events if ev.id == event_id), None)

    def find_event_by_event_id(self, event_id: str) -> TimelineEvent | None:
        """Return the event whose external ``event_id`` matches, if any."""
        return next((ev for ev in self._events if ev.event_id == event_id), None)

    def add_event(self, title: str, start: date | None, **fields: Any) -> TimelineEvent:
        """
        Create a new event and append it to the session.

        Parameters
        ----------
        title : str
            Display title (required).
        start : date | None
            Start day. ``end`` defaults to it; point events always mirror it.
        **fields
            Any other :class:`TimelineEvent` field except ``id``, ``parent``
            and ``row``, which are derived. Missing ``event_id`` becomes
            ``auto-{id}``, suffixed if that key is taken. Missing ``color`` is
            drawn from the randomizer.

        Raises
        ------
        DuplicateEventIdError
            If ``event_id`` is already used.
        pydantic.ValidationError
            If the resulting event is invalid.
        """
        for derived in ("id", "parent", "row"):
            fields.pop(derived, None)
        internal_id = self._next_id
        event_id = fields.pop("event_id", None) or fresh_event_id(
            internal_id, {ev.event_id for ev in self._events}
        )
        self._check_unique(event_id)
        fields.setdefault("end", start)
        if not fields.get("color"):
            fields["color"] = random_color(self._rng)

        event = TimelineEvent(id=internal_id, event_id=event_id, title=title, start=start, **fields)
        self._events.append(event)
        self._next_id += 1
        self._relink()
        self._bump(f"add event {event_id!r}")
        return self.find_event_by_id(internal_id)  # type: ignore[return-value]

    def update_event(self, event_id: int, /, **changes: Any) -> TimelineEvent:
        """
        Apply ``changes`` to the event with internal id ``event_id``.

        The event is re-validated as a whole. Renaming ``event_id`` rewrites
        the ``parent_id`` of its children.

        Raises
        ------
        KeyError
            If no event has that internal id.
        DuplicateEventIdError
            If the new ``event_id`` is owned by another event.
        """
        idx = self._index_of(event_id)
        current = self._events[idx]
        for derived in ("id", "parent", "row"):
            changes.pop(derived, None)

        new_key = changes.get("event_id", current.event_id)
        if new_key != current.event_id:
            self._check_unique(new_key, ignore=current.id)

        data = current.model_dump()
        data.update(changes)
        updated = TimelineEvent.model_validate(data)
        self._events[idx] = updated

        if new_key != current.event_id:
            self._events = [
                ev.model_copy(update={"parent_id": new_key})
                if ev.parent_id == current.event_id
                else ev
                for ev in self._events
            ]
        self._relink()
        self._bump(f"update event {updated.event_id!r}")
        return self._events[idx]

    def remove_event(self, event_id: int) -> TimelineEvent:
        """
        Remove and return the event with internal id ``event_id``.

        Children of the removed event lose their ``parent_id``.

        Raises
        ------
        KeyError
            If no event has that internal id.
        """
        removed = self._events.pop(self._index_of(event_id))
        self._events = [
            ev.model_copy(update={"parent_id": None}) if ev.parent_id == removed.event_id else ev
            for ev in self._events
        ]
        self._relink()
        self._bump(f"remove event {removed.event_id!r}")
        return removed

    # ------------------------------- categories -----------------------------

    def categories(self) -> tuple[Category, ...]:
        """Return the registered categories in insertion order."""
        return tuple(self._categories.values())

    def add_category(self, id: str, name: str | None = None, color: str | None = None) -> Category:
        """Register a category; ``color`` defaults to a random one.

        Raises
        ------
        DuplicateCategoryError
            If a category with this id already exists.
        """
        if id in self._categories:
            raise DuplicateCategoryError(f"category {id!r} already exists")
        category = Category(id=id, name=name or id, color=color or random_color(self._rng))
        self._categories[id] = category
        self._bump(f"add category {id!r}")
        return category

    def update_category(
        self, id: str, *, name: str | None = None, color: str | None = None
    ) -> Category:
        """Rename or recolor a category (its id is immutable)."""
        current = self._categories[id]
        data = current.model_dump()
        if name is not None:
            data["name"] = name
        if color is not None:
            data["color"] = color
        updated = Category.model_validate(data)
        self._categories[id] = updated
        self._bump(f"update category {id!r}")
        return updated

    def remove_category(self, id: str) -> Category:
        """Remove a category that no event references.

        Raises
        ------
        KeyError
            If the category does not exist.
        CategoryInUseError
            If at least one event still belongs to it.
        """
        if id not in self._categories:
            raise KeyError(f"no category {id!r}")
        users = [ev.event_id for ev in self._events if ev.category == id]
        if users:
            raise CategoryInUseError(f"category {id!r} is used by {len(users)} event(s)")
        removed = self._categories.pop(id)
        self._bump(f"remove category {id!r}")
        return removed

    # ------------------------------- import / export ------------------------

    def import_text(self, text: str, fmt: Format, *, mode: ImportMode = "replace") -> ImportResult:
        """
        Import a CSV or YAML document.

        ``replace`` discards the current events, categories and window;
        ``append`` adds to them, skipping rows whose ``eventId`` already
        exists. Parent references of appended events may point at existing
        events.

        Raises
        ------
        TimelineFormatError
            If the document cannot be parsed. The session is left untouched.
        """
        appending = mode == "append"
        result = import_text(
            text,
            fmt,
            next_id=self._next_id,
            rng=self._rng,
            existing_event_ids=[ev.event_id for ev in self._events] if appending else (),
            existing_categories=list(self._categories) if appending else (),
        )

        warnings = list(result.warnings)
        if appending:
            merged = [*self._events, *result.events]
            # Links to events that were already here resolve now.
            relinked = {ev.event_id: ev for ev in link_parents(merged)[0]}
            warnings = [
                w
                for w in warnings
                if not (
                    w.kind == "referential"
                    and w.event_id in relinked
                    and relinked[w.event_id].parent is not None
                )
            ]
            self._events = merged
            if result.window is not None:
                self._window = result.window
        else:
            self._events = list(result.events)
            self._categories = {}
            self._window = result.window

        for category in result.categories:
            self._categories.setdefault(category.id, category)
        self._next_id = max(self._next_id, result.next_id)
        self._relink()
        self._bump(f"{mode} import of {len(result.events)} {fmt} events")
        imported = {ev.id for ev in result.events}
        return result.model_copy(
            update={
                "events": [ev for ev in self._events if ev.id in imported],
                "warnings": warnings,
            }
        )

    def export_text(self, fmt: Format) -> str:
        """Serialize the session in the requested format."""
        return export_text(
            self._events, fmt, categories=self.categories(), window=self._window
        )

    # ------------------------------- derived views --------------------------

    def rows(self) -> list[TimelineEvent]:
        """Return copies of the live events with lane indices assigned."""
        return compute_rows(self._events)

    def stats(self) -> DataStats:
        """Return collection statistics for the live events."""
        return calculate_data_stats(self._events)

    # ------------------------------- snapshots ------------------------------

    def snapshot(self, note: str | None = None) -> SessionSnapshot:
        """
        Capture the current state as an immutable YAML snapshot.

        Parameters
        ----------
        note : str | None
            Optional human-readable label explaining why the snapshot was taken.
        """
        ts_str = datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"
        snap = SessionSnapshot(
            timestamp=ts_str,
            revision=self._rev,
            note=note,
            event_count=len(self._events),
            document=self.export_text("yaml"),
        )
        self._snapshots.append(snap)
        return snap

    def snapshots(self) -> tuple[SessionSnapshot, ...]:
        """Return all recorded snapshots (immutable tuple)."""
        return tuple(self._snapshots)


__all__ = [
    "CategoryInUseError",
    "DuplicateCategoryError",
    "DuplicateEventIdError",
    "ImportMode",
    "TimelineSession",
]
