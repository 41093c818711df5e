"""Tscn — the final output of parsing a scene or resource file."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping

from .model import ExtResourceEntry, NodeEntry, PropertyStore, SubResourceEntry
from .values import Value, VExtResource, VSubResource


@dataclass
class Tscn:
    """Holds the node tree, resource tables and nested external graphs."""

    resource_type: str = ""
    load_steps: int = 0
    format: int = 0
    path: str | None = None
    properties: PropertyStore = field(default_factory=PropertyStore)
    nodes: dict[int, NodeEntry] = field(default_factory=dict)
    sub_resources: dict[int, SubResourceEntry] = field(default_factory=dict)
    ext_resources: dict[int, ExtResourceEntry] = field(default_factory=dict)

    # -- Id lookups -----------------------------------------------------

    def node(self, node_id: int) -> NodeEntry | None:
        return self.nodes.get(node_id)

    def sub_resource(self, resource_id: int) -> SubResourceEntry | None:
        return self.sub_resources.get(resource_id)

    def ext_resource(self, resource_id: int) -> ExtResourceEntry | None:
        return self.ext_resources.get(resource_id)

    @property
    def resources(self) -> Mapping[int, "Tscn"]:
        """Resolved nested graphs, keyed by ext-resource id."""
        return MappingProxyType({
            rid: entry.resource
            for rid, entry in self.ext_resources.items()
            if entry.resource is not None
        })

    def deref(self, value: Value) -> SubResourceEntry | ExtResourceEntry | None:
        """Follow a ``SubResource( N )`` / ``ExtResource( N )`` value to its entry."""
        if isinstance(value, VSubResource):
            return self.sub_resources.get(value.id)
        if isinstance(value, VExtResource):
            return self.ext_resources.get(value.id)
        return None

    # -- Tree navigation ------------------------------------------------

    @property
    def root(self) -> NodeEntry | None:
        for node in self.nodes.values():
            if node.parent_id is None:
                return node
        return None

    def children(self, node_id: int) -> list[NodeEntry]:
        node = self.nodes.get(node_id)
        if node is None:
            return []
        return [self.nodes[c] for c in node.children]

    def node_path(self, node_id: int) -> str:
        """Path relative to the root, in the form used by ``parent=`` attributes."""
        names: list[str] = []
        node = self.nodes.get(node_id)
        while node is not None and node.parent_id is not None:
            names.append(node.name)
            node = self.nodes.get(node.parent_id)
        if not names:
            return "."
        return "/".join(reversed(names))

    def get_node(self, path: str) -> NodeEntry | None:
        """Find a node by root-relative path (``"."``, ``"Body/Sprite"``)."""
        node = self.root
        if node is None:
            return None
        for segment in path.strip("/").split("/"):
            if segment in ("", "."):
                continue
            node = next((c for c in self.children(node.id) if c.name == segment), None)
            if node is None:
                return None
        return node

    def walk(self) -> Iterator[NodeEntry]:
        """Depth-first traversal starting at each root, children in declaration order."""
        pending = [n.id for n in self.nodes.values() if n.parent_id is None]
        pending.reverse()
        while pending:
            node = self.nodes[pending.pop()]
            yield node
            pending.extend(reversed(node.children))

    # -- Serialisation --------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "resource_type": self.resource_type,
            "load_steps": self.load_steps,
            "format": self.format,
            "properties": self.properties.to_dict(),
            "nodes": [
                {
                    "id": n.id,
                    "uuid": n.uuid,
                    "level": n.level,
                    "name": n.name,
                    "type": n.type_name,
                    "parent_id": n.parent_id,
                    "instance": n.instance,
                    "children": list(n.children),
                    "properties": n.properties.to_dict(),
                }
                for n in self.nodes.values()
            ],
            "sub_resources": [
                {"id": r.id, "type": r.type_name, "properties": r.properties.to_dict()}
                for r in self.sub_resources.values()
            ],
            "ext_resources": [
                {
                    "id": r.id,
                    "type": r.type_name,
                    "path": r.path,
                    "resource": r.resource.to_dict() if r.resource is not None else None,
                }
                for r in self.ext_resources.values()
            ],
        }
