"""Value types for scene and resource properties."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .curve import Curve


# ---------------------------------------------------------------------------
# Empty: singleton for absent lookups
# ---------------------------------------------------------------------------

class _EmptyType:
    """Sentinel returned when a property path cannot be resolved."""

    _instance: _EmptyType | None = None

    def __new__(cls) -> _EmptyType:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "Empty"

    def __bool__(self) -> bool:
        return False


Empty = _EmptyType()


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Vector2:
    x: float
    y: float

    def __str__(self) -> str:
        return f"Vector2( {_num(self.x)}, {_num(self.y)} )"


def _num(v: float) -> str:
    if float(v).is_integer():
        return str(int(v))
    return str(v)


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class VInt:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(slots=True)
class VFloat:
    value: float

    def __str__(self) -> str:
        return str(self.value)


@dataclass(slots=True)
class VBool:
    value: bool

    def __str__(self) -> str:
        return str(self.value).lower()


@dataclass(slots=True)
class VStr:
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(slots=True)
class VVector2:
    value: Vector2

    def __str__(self) -> str:
        return str(self.value)


@dataclass(slots=True)
class VRect2:
    position: Vector2
    size: Vector2

    def __str__(self) -> str:
        p, s = self.position, self.size
        return f"Rect2( {_num(p.x)}, {_num(p.y)}, {_num(s.x)}, {_num(s.y)} )"


@dataclass(slots=True)
class VIntArray:
    items: list[int]


@dataclass(slots=True)
class VFloatArray:
    items: list[float]


@dataclass(slots=True)
class VVector2Array:
    items: list[Vector2]


@dataclass(slots=True)
class VCurve:
    value: "Curve"


@dataclass(slots=True)
class VMap:
    entries: dict[str, "Value"] = field(default_factory=dict)


@dataclass(slots=True)
class VMapArray:
    items: list[dict[str, "Value"]] = field(default_factory=list)


@dataclass(slots=True)
class VList:
    items: list["Value"]


@dataclass(slots=True)
class VSubResource:
    id: int

    def __str__(self) -> str:
        return f"SubResource( {self.id} )"


@dataclass(slots=True)
class VExtResource:
    id: int

    def __str__(self) -> str:
        return f"ExtResource( {self.id} )"


@dataclass(slots=True)
class VRaw:
    """Literal the value parser did not recognise, kept verbatim."""

    value: str

    def __str__(self) -> str:
        return self.value


Value = Union[
    VInt,
    VFloat,
    VBool,
    VStr,
    VVector2,
    VRect2,
    VIntArray,
    VFloatArray,
    VVector2Array,
    VCurve,
    VMap,
    VMapArray,
    VList,
    VSubResource,
    VExtResource,
    VRaw,
]


# ---------------------------------------------------------------------------
# Plain-data conversion
# ---------------------------------------------------------------------------

def to_plain(value: Value):
    """Convert a Value into JSON-ready builtins.

    Scalars map to themselves; vectors become ``[x, y]``; references keep
    their tag so a consumer can tell ``SubResource( 1 )`` from ``1``.
    """
    if isinstance(value, (VInt, VFloat, VBool, VStr)):
        return value.value
    if isinstance(value, VVector2):
        return [value.value.x, value.value.y]
    if isinstance(value, VRect2):
        return [value.position.x, value.position.y, value.size.x, value.size.y]
    if isinstance(value, (VIntArray, VFloatArray)):
        return list(value.items)
    if isinstance(value, VVector2Array):
        return [[v.x, v.y] for v in value.items]
    if isinstance(value, VCurve):
        return [
            {
                "x": p.pos.x,
                "y": p.pos.y,
                "left_tangent": p.left_tangent,
                "right_tangent": p.right_tangent,
            }
            for p in value.value
        ]
    if isinstance(value, VMap):
        return {k: to_plain(v) for k, v in value.entries.items()}
    if isinstance(value, VMapArray):
        return [{k: to_plain(v) for k, v in m.items()} for m in value.items]
    if isinstance(value, VList):
        return [to_plain(v) for v in value.items]
    if isinstance(value, VSubResource):
        return {"sub_resource": value.id}
    if isinstance(value, VExtResource):
        return {"ext_resource": value.id}
    if isinstance(value, VRaw):
        return {"raw": value.value}
    return None
