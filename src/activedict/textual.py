"""Textual integration for activedict. Opt-in, requires textual.

Forwards an ActiveDictionary's "change" events to handlers that update
widgets. Events are dropped while the app is paused or not running, a
widget that has already been removed (NoMatches) is not an error, and
changes made on a worker thread reach the handler via call_from_thread.
The core package never imports this module.
"""

import logging
import threading
from contextlib import contextmanager

from textual.css.query import NoMatches

logger = logging.getLogger("activedict.textual")

# Module-owned pause state, keyed by id(app) so multiple apps work in tests.
_paused_apps: set[int] = set()


@contextmanager
def pause(app):
    """Suspend change delivery during widget replacement."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


def on_change(app, dictionary, handler):
    """Deliver the dictionary's "change" events to handler, safely for widgets.

    Skips delivery while the app is paused or not running, swallows
    NoMatches from widget queries, and marshals events raised off the
    subscribing thread through app.call_from_thread.

    Returns a function that unsubscribes.
    """
    _main = threading.get_ident()

    def _guarded(event):
        if not is_safe(app):
            logger.debug("Skipped change for %r: app not ready", dictionary)
            return
        if threading.get_ident() != _main:
            app.call_from_thread(_safe, event)
        else:
            _safe(event)

    def _safe(event):
        try:
            handler(event)
        except NoMatches:
            pass

    return dictionary.subscribe("change", _guarded)
