"""Named-event emitter and the observable capability.

Minimal synchronous pub/sub: subscribe a handler to an event name, emit a
payload to every handler registered for it. A handler may be registered with
a context object, in which case it is called as handler(context, payload).

Any object exposing subscribe/unsubscribe qualifies as Observable. The check
is structural, so values don't need to inherit from EventEmitter.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, runtime_checkable

Disposer = Callable[[], None]
Handler = Callable[..., None]


@runtime_checkable
class Observable(Protocol):
    """Anything that can subscribe/unsubscribe handlers for named events.

    ActiveDictionary only ever calls the two-argument forms.
    """

    def subscribe(self, event: str, handler: Handler) -> Any: ...

    def unsubscribe(self, event: str, handler: Handler) -> Any: ...


def is_observable(value: object) -> bool:
    """Does value expose the observable capability?

    Classes are excluded: an EventEmitter subclass has the methods but
    can't be subscribed to.
    """
    return not isinstance(value, type) and isinstance(value, Observable)


class EventEmitter:
    """Synchronous named-event emitter."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[tuple[Handler, Any]]] = {}

    def subscribe(self, event: str, handler: Handler, context: Any = None) -> Disposer:
        """Register handler for event. Returns a function that removes it."""
        self._listeners.setdefault(event, []).append((handler, context))

        def _unsubscribe() -> None:
            self.unsubscribe(event, handler, context)

        return _unsubscribe

    def unsubscribe(self, event: str, handler: Handler, context: Any = None) -> bool:
        """Remove the first matching registration. False if there was none."""
        listeners = self._listeners.get(event)
        if not listeners:
            return False
        for i, (registered, registered_context) in enumerate(listeners):
            if registered == handler and registered_context is context:
                del listeners[i]
                if not listeners:
                    del self._listeners[event]
                return True
        return False

    def emit(self, event: str, payload: Any = None) -> None:
        """Call every handler for event, in subscription order."""
        # Snapshot: handlers may subscribe or unsubscribe while we deliver.
        for handler, context in list(self._listeners.get(event, ())):
            if context is None:
                handler(payload)
            else:
                handler(context, payload)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))
