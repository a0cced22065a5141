"""activedict: a reactive name/value container with value reference counting."""

from importlib.metadata import version as _version

__version__ = _version("activedict")

from activedict._values import ABSENT, ValueCounts, same_value
from activedict.emitter import EventEmitter, Observable, is_observable
from activedict.events import ChangeEvent, DiffEntry, RelayedChange, SelfChange
from activedict.options import Options
from activedict.dictionary import ActiveDictionary
# textual NOT auto-imported; opt-in only

__all__ = [
    "ABSENT",
    "ActiveDictionary",
    "ChangeEvent",
    "DiffEntry",
    "EventEmitter",
    "Observable",
    "Options",
    "RelayedChange",
    "SelfChange",
    "ValueCounts",
    "is_observable",
    "same_value",
]
