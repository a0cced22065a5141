"""Value equality and reference counting.

A value's count is the number of entries currently holding a value equal to
it. Equality is structural, so two distinct list objects with the same items
share one counted slot. Each slot remembers the first value stored in it.

Values must not be mutated in place while counted, same as dict keys.
"""

from __future__ import annotations

import math
from typing import Iterator


class _Absent:
    """Marker for a missing entry. Falsy, singleton."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return "ABSENT"


ABSENT = _Absent()


def _is_nan(value: object) -> bool:
    return isinstance(value, float) and math.isnan(value)


def same_value(a: object, b: object) -> bool:
    """Structural equality. NaN equals NaN; bools never equal numbers."""
    if a is b:
        return True
    try:
        return bool(_freeze(a) == _freeze(b))
    except TypeError:
        pass
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    if _is_nan(a) and _is_nan(b):
        return True
    return bool(a == b)


# Type tags for frozen values. Private objects so a frozen list never
# collides with a real tuple, and True never collides with 1.
_NAN = object()
_BOOL = object()
_LIST = object()
_TUPLE = object()
_DICT = object()
_SET = object()


def _freeze(value: object) -> object:
    """Hashable structural key for value. Raises TypeError if there is none."""
    if isinstance(value, bool):
        return (_BOOL, value)
    if _is_nan(value):
        return _NAN
    if isinstance(value, list):
        return (_LIST, tuple(_freeze(item) for item in value))
    if isinstance(value, tuple):
        return (_TUPLE, tuple(_freeze(item) for item in value))
    if isinstance(value, dict):
        return (_DICT, frozenset((_freeze(k), _freeze(v)) for k, v in value.items()))
    if isinstance(value, (set, frozenset)):
        return (_SET, frozenset(_freeze(item) for item in value))
    try:
        hash(value)
    except TypeError:
        raise TypeError(f"no structural key for {type(value).__name__}") from None
    return value


class _Opaque:
    """Key for a value with no structural key. Hashed by identity."""

    __slots__ = ("value",)

    def __init__(self, value: object) -> None:
        self.value = value


class _Slot:
    __slots__ = ("value", "count")

    def __init__(self, value: object) -> None:
        self.value = value
        self.count = 0


class ValueCounts:
    """Counts values by structural equality, in insertion order."""

    __slots__ = ("_slots", "_opaque")

    def __init__(self) -> None:
        self._slots: dict[object, _Slot] = {}
        self._opaque: list[_Opaque] = []  # linear fallback for unkeyable values

    def _key(self, value: object) -> object:
        try:
            return _freeze(value)
        except TypeError:
            for key in self._opaque:
                if same_value(key.value, value):
                    return key
            return _Opaque(value)

    def increment(self, value: object) -> int:
        """Count one more holder of value. Returns the new count."""
        key = self._key(value)
        slot = self._slots.get(key)
        if slot is None:
            slot = self._slots[key] = _Slot(value)
            if isinstance(key, _Opaque):
                self._opaque.append(key)
        slot.count += 1
        return slot.count

    def decrement(self, value: object) -> int:
        """Count one less holder of value. Drops the slot at zero."""
        key = self._key(value)
        slot = self._slots[key]
        slot.count -= 1
        if slot.count == 0:
            self._drop(key)
        return slot.count

    def discard(self, value: object) -> bool:
        """Forget value regardless of its count. True if it was present."""
        key = self._key(value)
        if key not in self._slots:
            return False
        self._drop(key)
        return True

    def _drop(self, key: object) -> None:
        del self._slots[key]
        if isinstance(key, _Opaque):
            self._opaque.remove(key)

    def stored(self, value: object) -> object:
        """The value kept in value's slot, which may be a different but equal object."""
        return self._slots[self._key(value)].value

    def count(self, value: object) -> int:
        slot = self._slots.get(self._key(value))
        return slot.count if slot is not None else 0

    def total(self) -> int:
        """Sum of all counts."""
        return sum(slot.count for slot in self._slots.values())

    def clear(self) -> None:
        self._slots.clear()
        self._opaque.clear()

    def __contains__(self, value: object) -> bool:
        return self._key(value) in self._slots

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[object]:
        return iter([slot.value for slot in self._slots.values()])

    def __repr__(self) -> str:
        items = ", ".join(f"{slot.value!r}: {slot.count}" for slot in self._slots.values())
        return f"ValueCounts({{{items}}})"
