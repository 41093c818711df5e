"""Getter resolution: read access to slash-delimited property paths."""

from __future__ import annotations

from .values import Value, VMap, VMapArray, _EmptyType, Empty


def get_from(entries: dict[str, Value], path: str) -> Value | _EmptyType:
    """Resolve *path* (``"a/b/c"``) against nested maps.

    Returns ``Empty`` if any segment is missing or an intermediate
    segment holds something other than a ``VMap``.
    """
    head, sep, rest = path.partition("/")
    value = entries.get(head)
    if value is None:
        return Empty
    if not sep:
        return value
    if not isinstance(value, VMap):
        return Empty
    return get_from(value.entries, rest)


def get_from_mut(entries: dict[str, Value], path: str) -> dict[str, Value] | None:
    """Return the live mapping stored at *path*, for in-place writes.

    A ``VMap`` yields its entries; a ``VMapArray`` yields its last map.
    Anything else, or a missing path, yields ``None``.
    """
    value = get_from(entries, path)
    if isinstance(value, VMap):
        return value.entries
    if isinstance(value, VMapArray) and value.items:
        return value.items[-1]
    return None
