"""Construction options for ActiveDictionary.

Options arrive as a bool (shorthand for handle_item_changes), a mapping, an
Options instance, or None. Anything else means defaults: unusable options
are ignored, never rejected.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

logger = logging.getLogger("activedict.options")

_KEYS = ("handle_item_changes", "handleItemChanges")


class Options:
    """Per-instance configuration."""

    __slots__ = ("handle_item_changes",)

    def __init__(self, handle_item_changes: bool = False) -> None:
        self.handle_item_changes = handle_item_changes

    def __repr__(self) -> str:
        return f"Options(handle_item_changes={self.handle_item_changes!r})"


def coerce_options(opts: object) -> Options:
    """Normalize whatever the caller passed into Options.

    Only a literal True turns item-change handling on.
    """
    if isinstance(opts, Options):
        return Options(opts.handle_item_changes is True)
    if isinstance(opts, bool):
        return Options(opts)
    if isinstance(opts, Mapping):
        for key in _KEYS:
            if key in opts:
                return Options(opts[key] is True)
        return Options()
    if opts is not None:
        logger.debug("Ignoring unsupported options %r", opts)
    return Options()
