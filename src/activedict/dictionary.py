"""ActiveDictionary: a name/value container that reports its own changes.

Every set() or delete() call that changes something emits exactly one
"change" event (a SelfChange) carrying the per-name diff plus the values
that became referenced or unreferenced by the call.

Values are reference-counted by structural equality: two names holding equal
values share one count. A value is "added" when its count goes 0 -> 1 and
"removed" when it drops back to 0, net of the whole call.

With handle_item_changes enabled, observable values are subscribed to while
counted, and their own "change" events are re-emitted as RelayedChange.
Call dispose() to release those subscriptions.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Mapping
from typing import Callable, Iterator

from activedict._values import ABSENT, ValueCounts, same_value
from activedict.emitter import EventEmitter, is_observable
from activedict.events import DiffEntry, RelayedChange, SelfChange
from activedict.options import Options, coerce_options

logger = logging.getLogger("activedict.dictionary")


class ActiveDictionary(EventEmitter):
    """Reactive name -> value container with value reference counting.

    Usage:
        d = ActiveDictionary({"a": 1})
        d.subscribe("change", lambda evt: print(evt.diff))

        d.set({"a": 2, "b": 2})
        # one event: a updated, b added; added_values == [2], removed_values == [1]

        d.delete("a", "missing")
        # one event: a deleted; 2 is still held by b, so removed_values == []
    """

    def __init__(self, data: Mapping | ActiveDictionary | None = None, opts: object = None) -> None:
        super().__init__()
        self._handle_item_changes = coerce_options(opts).handle_item_changes
        self._disposed = False
        self._value_counts = ValueCounts()
        # id(counted observable) -> (value, its relay handler)
        self._relays: dict[int, tuple[object, Callable[[object], None]]] = {}

        if isinstance(data, ActiveDictionary):
            data = data._entries
        self._entries: dict[str, object] = dict(data) if data else {}

        for value in self._entries.values():
            if self._value_counts.increment(value) == 1:
                self._watch(value)

    @property
    def handle_item_changes(self) -> bool:
        return self._handle_item_changes

    # --- Nested observables ---

    def _watch(self, value: object) -> None:
        if not self._handle_item_changes or self._disposed or not is_observable(value):
            return
        if id(value) in self._relays:
            return
        handler = functools.partial(self._on_item_change, value)
        self._relays[id(value)] = (value, handler)
        value.subscribe("change", handler)
        logger.debug("Relaying changes from %r", value)

    def _unwatch(self, value: object) -> None:
        relay = self._relays.pop(id(value), None)
        if relay is None:
            return
        value.unsubscribe("change", relay[1])
        logger.debug("Stopped relaying changes from %r", value)

    def _on_item_change(self, source: object, event: object) -> None:
        self.emit("change", RelayedChange(self, source, event))

    def _release(self, value: object) -> object:
        """Drop one reference to value.

        Returns the counted value if nothing references it anymore, else ABSENT.
        Only updates counts; the caller unwatches once entries are in step.
        """
        counts = self._value_counts
        stored = counts.stored(value)
        if counts.decrement(value):
            return ABSENT
        return stored

    # --- Read operations ---

    def has(self, name: str) -> bool:
        return name in self._entries

    def get(self, name: str, default: object = ABSENT) -> object:
        """The value stored under name, or default (ABSENT) if there is none."""
        return self._entries.get(name, default)

    def contains(self, value: object) -> bool:
        """Does any entry hold a value equal to value?"""
        return value in self._value_counts

    def count(self, value: object) -> int:
        """How many entries hold a value equal to value."""
        return self._value_counts.count(value)

    # --- Write operations ---

    def set(self, name_or_values: str | Mapping | ActiveDictionary, value: object = ABSENT) -> ActiveDictionary:
        """Set one entry, or several at once from a mapping.

        Overwriting an entry with an equal value is a no-op. A batch emits
        at most one event no matter how many names it touches.
        """
        if isinstance(name_or_values, str):
            if value is ABSENT:
                raise TypeError(f"set() missing value for {name_or_values!r}")
            values: Mapping = {name_or_values: value}
        elif isinstance(name_or_values, ActiveDictionary):
            values = name_or_values.to_dict()
        elif isinstance(name_or_values, Mapping):
            values = name_or_values
        else:
            raise TypeError(
                f"set() expects a name or a mapping, got {type(name_or_values).__name__}"
            )

        entries = self._entries
        counts = self._value_counts
        diff: dict[str, DiffEntry] = {}
        added_values: list[object] = []
        # Values whose count hit zero during this call. A later name in the
        # same batch may bring them back, which cancels the removal.
        removed = ValueCounts()

        for name, new_value in values.items():
            has_name = name in entries
            old_value = entries.get(name, ABSENT)
            if has_name and same_value(old_value, new_value):
                continue

            released = self._release(old_value) if has_name else ABSENT
            if released is not ABSENT:
                removed.increment(released)

            is_new = counts.increment(new_value) == 1
            if is_new and not removed.discard(new_value):
                added_values.append(new_value)

            diff[name] = DiffEntry("update" if has_name else "add", old_value, new_value)
            entries[name] = new_value

            # Entries and counts are final for this name before any value is called.
            if released is not ABSENT:
                self._unwatch(released)
            if is_new:
                self._watch(new_value)

        if diff:
            self.emit("change", SelfChange(self, diff, added_values, list(removed)))

        return self

    def delete(self, *names: str) -> ActiveDictionary:
        """Remove entries. Names that aren't present are ignored."""
        entries = self._entries
        diff: dict[str, DiffEntry] = {}
        removed_values: list[object] = []

        for name in names:
            if name not in entries:
                continue
            value = entries.pop(name)
            released = self._release(value)
            diff[name] = DiffEntry("delete", value, ABSENT)
            if released is not ABSENT:
                removed_values.append(released)
                self._unwatch(released)

        if diff:
            self.emit("change", SelfChange(self, diff, [], removed_values))

        return self

    # --- Copies and snapshots ---

    def clone(self) -> ActiveDictionary:
        """Independent copy with its own counts and subscriptions."""
        return type(self)(self, Options(self._handle_item_changes))

    def to_dict(self) -> dict[str, object]:
        return dict(self._entries)

    def collect_dump_object(self, data: dict, opts: dict) -> None:
        """Merge entries into data and record options into opts."""
        data.update(self._entries)
        if self._handle_item_changes:
            opts["handle_item_changes"] = True

    def expand_from_dump_object(self, data: Mapping) -> None:
        """Apply dumped entries as an ordinary set()."""
        self.set(data)

    def dispose(self) -> None:
        """Stop relaying changes from contained values."""
        if self._disposed:
            return
        self._disposed = True
        if self._relays:
            for value, _ in list(self._relays.values()):
                self._unwatch(value)
            logger.debug("Disposed %r", self)

    # --- Mapping protocol ---

    def __getitem__(self, name: str) -> object:
        return self._entries[name]

    def __setitem__(self, name: str, value: object) -> None:
        self.set(name, value)

    def __delitem__(self, name: str) -> None:
        if name not in self._entries:
            raise KeyError(name)
        self.delete(name)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def keys(self):
        return self._entries.keys()

    def values(self):
        return self._entries.values()

    def items(self):
        return self._entries.items()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._entries!r})"
