"""Reader layer: classifies raw lines and converts literals to Values."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto

from .chunk_utils import find_unquoted, split_elements, split_words
from .curve import ControlPoint, Curve
from .values import (
    Value,
    Vector2,
    VBool,
    VCurve,
    VExtResource,
    VFloat,
    VFloatArray,
    VInt,
    VIntArray,
    VList,
    VMap,
    VMapArray,
    VRaw,
    VRect2,
    VStr,
    VSubResource,
    VVector2,
    VVector2Array,
)

CURVE_TYPES = frozenset({"Curve"})
MAX_NESTING = 64

_NUM = r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?"

_VECTOR_RE = re.compile(rf"^Vector2\(\s*({_NUM})\s*,\s*({_NUM})\s*\)$")
_VECTOR_POOL_RE = re.compile(r"^PoolVector2Array\((.*)\)$")
_RECT_RE = re.compile(r"^Rect2\((.*)\)$")
_INT_POOL_RE = re.compile(r"^PoolIntArray\((.*)\)$")
_REAL_POOL_RE = re.compile(r"^PoolRealArray\((.*)\)$")
_SUBRES_RE = re.compile(r"^SubResource\(\s*(\d+)\s*\)$")
_EXTRES_RE = re.compile(r"^ExtResource\(\s*(\d+)\s*\)$")
_INT_RE = re.compile(r"^[-+]?\d+$")
_FLOAT_RE = re.compile(rf"^(?:{_NUM}|[-+]?inf|nan)$")

_ESCAPES = {'"': '"', "\\": "\\", "n": "\n", "t": "\t"}


# ---------------------------------------------------------------------------
# Line classification
# ---------------------------------------------------------------------------

class LineKind(Enum):
    HEADER = auto()        # [gd_scene load_steps=2 format=2]
    ASSIGNMENT = auto()    # key = value
    CONTINUATION = auto()  # "key": value,
    CLOSER = auto()        # }  or  }]
    SEPARATOR = auto()     # }, {   (next map of an open sequence-of-maps)


@dataclass(slots=True)
class Line:
    kind: LineKind
    key: str = ""
    rhs: str = ""


def classify_line(raw: str) -> Line | None:
    """Classify one line of source text.

    Returns ``None`` for blank lines and for lines that fit no category;
    both are skipped by the parser.  For headers ``rhs`` holds the text
    between the brackets.
    """
    line = raw.strip()
    if not line:
        return None

    if line.startswith("[") and line.endswith("]"):
        return Line(LineKind.HEADER, rhs=line[1:-1].strip())

    compact = "".join(line.split())
    if compact in ("}", "}]", "},", "}],"):
        return Line(LineKind.CLOSER)
    if compact == "},{":
        return Line(LineKind.SEPARATOR)

    if line.startswith('"'):
        colon = find_unquoted(line, ":")
        key_text = line[:colon].strip() if colon > 0 else ""
        if _is_quoted(key_text):
            rhs = line[colon + 1:].strip()
            if rhs.endswith(","):
                rhs = rhs[:-1].rstrip()
            return Line(LineKind.CONTINUATION, key=_unquote(key_text), rhs=rhs)

    key, sep, rhs = line.partition("=")
    key = key.strip()
    if sep and key:
        return Line(LineKind.ASSIGNMENT, key=key, rhs=rhs.strip())

    return None


# ---------------------------------------------------------------------------
# Header handling
# ---------------------------------------------------------------------------

def split_header(line: str) -> tuple[str, str]:
    """Split a header into its block type and raw attribute text.

    ``'[sub_resource type="TileSet" id=5]'`` → ``("sub_resource", 'type="TileSet" id=5')``
    """
    contents = line.strip()
    if contents.startswith("["):
        contents = contents[1:]
    if contents.endswith("]"):
        contents = contents[:-1]
    parts = contents.strip().split(None, 1)
    if not parts:
        return "", ""
    if len(parts) == 1:
        return parts[0], ""
    return parts[0], parts[1].strip()


def parse_attributes(text: str) -> list[tuple[str, Value]]:
    """Tokenize ``key=value`` pairs of a header into typed attributes.

    Tokens without ``=`` are dropped.
    """
    attributes: list[tuple[str, Value]] = []
    for word in split_words(text):
        key, sep, raw = word.partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        attributes.append((key, parse_value(raw.strip())))
    return attributes


# ---------------------------------------------------------------------------
# Literal handling
# ---------------------------------------------------------------------------

def parse_value(
    text: str,
    type_name: str = "",
    curve_types: frozenset[str] = CURVE_TYPES,
    depth: int = 0,
) -> Value:
    """Convert a trimmed right-hand-side literal to a Value.

    *type_name* is the declared type of the enclosing block; bracketed
    arrays inside a curve-bearing type are read as control points.
    *depth* counts enclosing lists; beyond ``MAX_NESTING`` the text is
    kept as ``VRaw``.
    Never raises: anything unrecognised becomes ``VRaw``.
    """
    if depth > MAX_NESTING:
        return VRaw(text)

    if _is_quoted(text):
        return VStr(_unquote(text))

    bracketed = text.startswith("[") and text.endswith("]") and len(text) >= 2

    if bracketed and type_name in curve_types:
        return VCurve(_parse_curve(split_elements(text[1:-1])))

    if "".join(text.split()) == "[{":
        return VMapArray([{}])

    if text == "{":
        return VMap({})

    if text in ("true", "false"):
        return VBool(text == "true")

    try:
        return _parse_call(text) or _parse_number(text) or _parse_list(text, bracketed, depth) or VRaw(text)
    except ValueError:
        return VRaw(text)


def _parse_call(text: str) -> Value | None:
    m = _VECTOR_RE.match(text)
    if m:
        return VVector2(Vector2(float(m.group(1)), float(m.group(2))))

    m = _VECTOR_POOL_RE.match(text)
    if m:
        floats = [float(s) for s in split_elements(m.group(1))]
        return VVector2Array([Vector2(x, y) for x, y in zip(floats[0::2], floats[1::2])])

    m = _RECT_RE.match(text)
    if m:
        parts = [float(s) for s in split_elements(m.group(1))]
        if len(parts) != 4:
            return None
        return VRect2(Vector2(parts[0], parts[1]), Vector2(parts[2], parts[3]))

    m = _INT_POOL_RE.match(text)
    if m:
        return VIntArray([int(s) for s in split_elements(m.group(1))])

    m = _REAL_POOL_RE.match(text)
    if m:
        return VFloatArray([float(s) for s in split_elements(m.group(1))])

    m = _SUBRES_RE.match(text)
    if m:
        return VSubResource(int(m.group(1)))

    m = _EXTRES_RE.match(text)
    if m:
        return VExtResource(int(m.group(1)))

    return None


def _parse_number(text: str) -> Value | None:
    if _INT_RE.match(text):
        return VInt(int(text))
    if _FLOAT_RE.match(text):
        return VFloat(float(text))
    return None


def _parse_list(text: str, bracketed: bool, depth: int) -> Value | None:
    if not bracketed:
        return None
    return VList([parse_value(e, depth=depth + 1) for e in split_elements(text[1:-1])])


def _parse_curve(elements: list[str]) -> Curve:
    """Read groups of five elements: position, left/right tangent, two modes."""
    curve = Curve()
    for i in range(0, len(elements), 5):
        group = elements[i:i + 5]
        if len(group) < 3:
            break
        pos = parse_value(group[0])
        left = _as_float(parse_value(group[1]))
        right = _as_float(parse_value(group[2]))
        if not isinstance(pos, VVector2) or left is None or right is None:
            continue
        curve.add_point(ControlPoint(pos.value, left, right))
    return curve


def _as_float(value: Value) -> float | None:
    if isinstance(value, (VInt, VFloat)):
        return float(value.value)
    return None


def _is_quoted(text: str) -> bool:
    """True if *text* is exactly one double-quoted string."""
    if len(text) < 2 or text[0] != '"' or text[-1] != '"':
        return False
    escaped = False
    for ch in text[1:-1]:
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch == '"':
            return False
    return not escaped


def _unquote(text: str) -> str:
    inner = text[1:-1]
    if "\\" not in inner:
        return inner
    out: list[str] = []
    chars = iter(inner)
    for ch in chars:
        if ch == "\\":
            nxt = next(chars, "")
            out.append(_ESCAPES.get(nxt, "\\" + nxt))
        else:
            out.append(ch)
    return "".join(out)
