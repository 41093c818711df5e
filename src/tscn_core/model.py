"""Data model for parsed scenes: property stores and table entries."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .getter import get_from, get_from_mut
from .setter import insert_to
from .values import Value, _EmptyType, to_plain

if TYPE_CHECKING:
    from .document import Tscn


# ---------------------------------------------------------------------------
# PropertyStore
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class PropertyStore(Mapping):
    """Key → Value mapping with slash-delimited path access.

    Plain keys behave like a dict; ``insert_to`` / ``get_from`` walk
    nested ``VMap`` values so ``tracks/0/type`` lands in
    ``tracks → 0 → type``.  Insertion order is kept.
    """

    entries: dict[str, Value] = field(default_factory=dict)

    def __getitem__(self, key: str) -> Value:
        return self.entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PropertyStore):
            return self.entries == other.entries
        return Mapping.__eq__(self, other)

    def insert_to(self, path: str, value: Value) -> bool:
        return insert_to(self.entries, path, value)

    def get_from(self, path: str) -> Value | _EmptyType:
        return get_from(self.entries, path)

    def get_from_mut(self, path: str) -> dict[str, Value] | None:
        return get_from_mut(self.entries, path)

    def to_dict(self) -> dict:
        return {k: to_plain(v) for k, v in self.entries.items()}


# ---------------------------------------------------------------------------
# Table entries
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class NodeEntry:
    id: int
    name: str
    type_name: str = ""
    uuid: int = 0
    level: int = 0
    parent_id: int | None = None
    instance: int | None = None
    children: list[int] = field(default_factory=list)
    properties: PropertyStore = field(default_factory=PropertyStore)

    @property
    def is_root(self) -> bool:
        return self.parent_id is None


@dataclass(slots=True)
class SubResourceEntry:
    id: int
    type_name: str
    properties: PropertyStore = field(default_factory=PropertyStore)


@dataclass(slots=True)
class ExtResourceEntry:
    id: int
    type_name: str
    path: str
    properties: PropertyStore = field(default_factory=PropertyStore)
    resource: Tscn | None = None

    @property
    def resolved(self) -> bool:
        return self.resource is not None
