"""Block descriptors: the typed form of a ``[header ...]`` line."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from .values import Value, VExtResource, VInt, VStr


class BlockKind(Enum):
    SCENE = auto()         # [gd_scene]
    RESOURCE = auto()      # [gd_resource] / [resource]
    SUB_RESOURCE = auto()  # [sub_resource]
    EXT_RESOURCE = auto()  # [ext_resource]
    NODE = auto()          # [node]


_HEADER_KINDS: dict[str, BlockKind] = {
    "gd_scene": BlockKind.SCENE,
    "gd_resource": BlockKind.RESOURCE,
    "resource": BlockKind.RESOURCE,
    "sub_resource": BlockKind.SUB_RESOURCE,
    "ext_resource": BlockKind.EXT_RESOURCE,
    "node": BlockKind.NODE,
}


@dataclass(slots=True)
class Block:
    kind: BlockKind
    header: str                    # block type as written, e.g. "gd_resource"
    id: int = 0
    type_name: str = ""
    path: str = ""                 # ext_resource virtual path
    name: str = ""
    parent: str = ""               # node parent path, "" for the scene root
    instance: int | None = None    # ext_resource id of an instanced scene
    load_steps: int = 0
    format: int = 0


def make_block(header: str, attributes: list[tuple[str, Value]]) -> Block | None:
    """Fold parsed header attributes into a Block.

    Returns ``None`` for header kinds the parser does not track
    (``connection``, ``editable`` …).  Unknown keys are ignored and a
    value of the wrong kind leaves the field at its default.
    """
    kind = _HEADER_KINDS.get(header)
    if kind is None:
        return None

    block = Block(kind=kind, header=header)
    for key, value in attributes:
        if key == "id":
            block.id = _int(value, 0)
        elif key == "type":
            block.type_name = _str(value)
        elif key == "path":
            block.path = _str(value)
        elif key == "name":
            block.name = _str(value)
        elif key == "parent":
            block.parent = _str(value)
        elif key == "instance":
            block.instance = value.id if isinstance(value, VExtResource) else None
        elif key == "load_steps":
            block.load_steps = _int(value, 0)
        elif key == "format":
            block.format = _int(value, 0)
    return block


def _int(value: Value, default: int) -> int:
    return value.value if isinstance(value, VInt) else default


def _str(value: Value) -> str:
    return value.value if isinstance(value, VStr) else ""
