"""Change events emitted by ActiveDictionary.

Two shapes, told apart by class (or the is_relayed flag):

- SelfChange: the dictionary's own entries changed. Carries the diff.
- RelayedChange: a contained observable value changed internally. Carries
  the exact event object that value emitted, untouched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from activedict._values import ABSENT

if TYPE_CHECKING:
    from activedict.dictionary import ActiveDictionary

DiffType = Literal["add", "update", "delete"]


class DiffEntry:
    """How one name changed during a single set/delete call."""

    __slots__ = ("type", "old_value", "value")

    def __init__(self, type: DiffType, old_value: object = ABSENT, value: object = ABSENT) -> None:
        self.type = type
        self.old_value = old_value
        self.value = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DiffEntry):
            return NotImplemented
        return (
            self.type == other.type
            and self.old_value == other.old_value
            and self.value == other.value
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"DiffEntry({self.type!r}, old_value={self.old_value!r}, value={self.value!r})"


class ChangeEvent:
    """Base for everything emitted as "change"."""

    __slots__ = ("target",)

    is_relayed = False

    def __init__(self, target: ActiveDictionary) -> None:
        self.target = target


class SelfChange(ChangeEvent):
    """The emitting dictionary's entries changed.

    diff maps each changed name to its DiffEntry, in processing order.
    added_values are values that became referenced by this call and
    removed_values are values no entry references anymore, both net of the
    whole call: a value removed and re-added within one batch shows up in
    neither.
    """

    __slots__ = ("diff", "added_values", "removed_values")

    def __init__(
        self,
        target: ActiveDictionary,
        diff: dict[str, DiffEntry],
        added_values: list[object],
        removed_values: list[object],
    ) -> None:
        super().__init__(target)
        self.diff = diff
        self.added_values = added_values
        self.removed_values = removed_values

    def __repr__(self) -> str:
        return (
            f"SelfChange(diff={self.diff!r}, added_values={self.added_values!r}, "
            f"removed_values={self.removed_values!r})"
        )


class RelayedChange(ChangeEvent):
    """A value held by the emitting dictionary emitted its own "change"."""

    __slots__ = ("source", "inner")

    is_relayed = True

    def __init__(self, target: ActiveDictionary, source: object, inner: object) -> None:
        super().__init__(target)
        self.source = source
        self.inner = inner

    def __repr__(self) -> str:
        return f"RelayedChange(source={self.source!r}, inner={self.inner!r})"
