"""Chunk-level utilities: quote- and bracket-aware splitting of literal text."""

from __future__ import annotations

_OPENERS = "([{"
_CLOSERS = ")]}"


def split_top_level(text: str, separator: str | None = ",") -> list[str]:
    """Split *text* on *separator* where it is not nested.

    A separator inside a quoted string (``\\"`` escapes honoured) or inside
    ``()``, ``[]`` or ``{}`` does not split.  ``separator=None`` splits on
    runs of whitespace instead.  Chunks are stripped and empty chunks are
    dropped.

    Example::

        split_top_level('Vector2( 1, 2 ), "a, b", 3')
        → ['Vector2( 1, 2 )', '"a, b"', '3']
    """
    chunks: list[str] = []
    current: list[str] = []
    depth = 0
    in_quote = False
    escaped = False

    for ch in text:
        if in_quote:
            current.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_quote = False
            continue

        if ch == '"':
            in_quote = True
        elif ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS and depth > 0:
            depth -= 1

        if depth == 0 and _is_separator(ch, separator):
            _flush(chunks, current)
            current = []
            continue

        current.append(ch)

    _flush(chunks, current)
    return chunks


def split_elements(text: str) -> list[str]:
    """Split the body of a bracketed array or call on top-level commas."""
    return split_top_level(text, ",")


def split_words(text: str) -> list[str]:
    """Split a header attribute list on top-level whitespace."""
    return split_top_level(text, None)


def find_unquoted(text: str, target: str, start: int = 0) -> int:
    """Index of the first *target* character outside quotes, or -1."""
    in_quote = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_quote:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_quote = False
            continue
        if ch == '"':
            in_quote = True
        elif ch == target:
            return i
    return -1


def _is_separator(ch: str, separator: str | None) -> bool:
    if separator is None:
        return ch.isspace()
    return ch == separator


def _flush(chunks: list[str], current: list[str]) -> None:
    chunk = "".join(current).strip()
    if chunk:
        chunks.append(chunk)
