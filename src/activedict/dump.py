"""Snapshot and rebuild dumpable containers.

Works with anything implementing collect_dump_object(data, opts) and
expand_from_dump_object(data), without knowing how it stores its state.
"""

from __future__ import annotations

from activedict.dictionary import ActiveDictionary


def dump(obj) -> dict:
    """Pull obj's state into a plain {"data": ..., "opts": ...} payload."""
    data: dict = {}
    opts: dict = {}
    obj.collect_dump_object(data, opts)
    return {"data": data, "opts": opts}


def restore(payload: dict, cls=ActiveDictionary):
    """Build a fresh cls instance and push payload's state into it."""
    obj = cls(None, payload.get("opts") or {})
    obj.expand_from_dump_object(payload.get("data") or {})
    return obj
