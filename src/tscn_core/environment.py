"""Scene-graph state: context stack, node table and path hashing."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .block import Block
from .errors import StructureError
from .model import NodeEntry, PropertyStore

logger = logging.getLogger(__name__)

ROOT_SENTINEL = "."
VIRTUAL_ROOT = "/root"


def path_hash(path: str) -> int:
    """Fletcher-16 checksum of the UTF-8 bytes of *path*."""
    sum1 = 0
    sum2 = 0
    for byte in path.encode("utf-8"):
        sum1 = (sum1 + byte) % 255
        sum2 = (sum2 + sum1) % 255
    return (sum2 << 8) | sum1


@dataclass
class Environment:
    """Mutable state of a single parse: the node table and its ancestor chain.

    ``stack`` holds ``(segment, node_id)`` pairs from the root down to the
    most recently declared node; the root sits under ``ROOT_SENTINEL``.
    ``paths`` maps every node's path relative to the root (``"."`` for the
    root itself) to its id.

    ``block`` / ``target`` / ``last_key`` track where property lines go:
    the open block, its property store, and the key of the most recent
    assignment (the one open ``{`` / ``[{`` container).
    """

    nodes: dict[int, NodeEntry] = field(default_factory=dict)
    stack: list[tuple[str, int]] = field(default_factory=list)
    paths: dict[str, int] = field(default_factory=dict)
    next_id: int = 0
    source_path: str | None = None
    block: Block | None = None
    block_type: str = ""
    target: PropertyStore | None = None
    last_key: str | None = None

    # -- Active block ---------------------------------------------------

    def open_block(self, block: Block | None, target: PropertyStore | None, type_name: str = "") -> None:
        self.block = block
        self.block_type = type_name
        self.target = target
        self.last_key = None

    # -- Queries --------------------------------------------------------

    @property
    def current_node(self) -> NodeEntry | None:
        """The most recently declared node, which receives property lines."""
        if not self.stack:
            return None
        return self.nodes[self.stack[-1][1]]

    def canonical_path(self) -> str:
        """Absolute path of the current stack, e.g. ``/root/Main/Player``."""
        parts = [VIRTUAL_ROOT]
        for segment, node_id in self.stack:
            parts.append(self.nodes[node_id].name if segment == ROOT_SENTINEL else segment)
        return "/".join(parts)

    # -- Node creation --------------------------------------------------

    def add_node(
        self,
        name: str,
        type_name: str = "",
        parent: str = "",
        instance: int | None = None,
        line: int | None = None,
    ) -> NodeEntry:
        """Declare a node and link it under the ancestor named by *parent*.

        Raises StructureError if *parent* names a node that was never
        declared.
        """
        parent = parent.rstrip("/") if parent not in ("", "/") else ""

        if parent == "" or (parent == ROOT_SENTINEL and not self.stack):
            return self._add_root(name, type_name, instance)

        parent_id = self._lookup_path(parent)
        if parent_id is not None:
            index = self._stack_index(parent_id)
            if index is None:
                index = self._restore_chain(parent_id)
        else:
            index = self._find_on_stack(parent.rsplit("/", 1)[-1])
        if index is None:
            raise StructureError(
                f"Node {name!r} declares unknown parent {parent!r}",
                path=self.source_path,
                line=line,
            )

        del self.stack[index + 1:]
        parent_id = self.stack[index][1]

        node = NodeEntry(
            id=self._allocate_id(),
            name=name,
            type_name=type_name,
            level=index + 1,
            parent_id=parent_id,
            instance=instance,
        )
        self.nodes[node.id] = node
        self.nodes[parent_id].children.append(node.id)
        self.stack.append((name, node.id))
        node.uuid = path_hash(self.canonical_path())
        self.paths["/".join(segment for segment, _ in self.stack[1:])] = node.id

        logger.debug("Add node %r id %d under %d", name, node.id, parent_id)
        return node

    def _add_root(self, name: str, type_name: str, instance: int | None) -> NodeEntry:
        node = NodeEntry(
            id=self._allocate_id(),
            name=name,
            type_name=type_name,
            instance=instance,
        )
        self.nodes[node.id] = node
        self.stack = [(ROOT_SENTINEL, node.id)]
        node.uuid = path_hash(self.canonical_path())
        self.paths[ROOT_SENTINEL] = node.id

        logger.debug("Add root node %r id %d", name, node.id)
        return node

    def _allocate_id(self) -> int:
        node_id = self.next_id
        self.next_id += 1
        return node_id

    # -- Parent lookup --------------------------------------------------

    def _stack_index(self, node_id: int) -> int | None:
        for index, (_, entry_id) in enumerate(self.stack):
            if entry_id == node_id:
                return index
        return None

    def _find_on_stack(self, segment: str) -> int | None:
        """Index of the nearest stack entry named *segment*, searching from the top.

        Fallback for parent paths missing from ``paths``.  The root entry
        answers to both the sentinel and its real name.
        """
        for index in range(len(self.stack) - 1, -1, -1):
            key, node_id = self.stack[index]
            if key == segment:
                return index
            if key == ROOT_SENTINEL and self.nodes[node_id].name == segment:
                return index
        return None

    def _restore_chain(self, node_id: int) -> int:
        """Rebuild the stack as the ancestor chain of an earlier node.

        Used when declaration order leaves a subtree and later re-enters
        it.  Returns the index of *node_id* on the rebuilt stack.
        """
        chain: list[int] = []
        current: int | None = node_id
        while current is not None:
            chain.append(current)
            current = self.nodes[current].parent_id
        chain.reverse()

        self.stack = [(ROOT_SENTINEL, chain[0])]
        self.stack.extend((self.nodes[i].name, i) for i in chain[1:])
        logger.debug("Restored context stack for parent id %d", node_id)
        return len(self.stack) - 1

    def _lookup_path(self, parent: str) -> int | None:
        relative = parent[2:] if parent.startswith("./") else parent
        if relative in self.paths:
            return self.paths[relative]

        root_id = self.paths.get(ROOT_SENTINEL)
        if root_id is None:
            return None
        head, _, rest = relative.partition("/")
        if head == self.nodes[root_id].name:
            return self.paths.get(rest or ROOT_SENTINEL)
        return None
