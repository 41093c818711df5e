"""Setter resolution: write access to slash-delimited property paths."""

from __future__ import annotations

import logging

from .values import Value, VMap

logger = logging.getLogger(__name__)


def insert_to(entries: dict[str, Value], path: str, value: Value) -> bool:
    """Store *value* at *path*, creating intermediate maps as needed.

    - ``"key"`` → overwrite ``entries["key"]``
    - ``"a/b"`` → reuse or create ``VMap`` at ``a``, then recurse on ``b``

    A non-map value already sitting on an intermediate segment is left
    untouched and the write is dropped; returns ``False`` in that case.
    """
    head, sep, rest = path.partition("/")
    if not sep:
        entries[head] = value
        return True

    current = entries.get(head)
    if current is None:
        current = VMap({})
        entries[head] = current
    elif not isinstance(current, VMap):
        logger.debug("Dropped write to %r: %r holds a %s", path, head, type(current).__name__)
        return False

    return insert_to(current.entries, rest, value)
