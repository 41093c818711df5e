"""Parser: line-by-line construction of a Tscn, with recursive resource loading."""

from __future__ import annotations

import logging
from os import PathLike
from pathlib import Path

from .block import BlockKind, make_block
from .config import ParserConfig
from .document import Tscn
from .environment import Environment
from .errors import ResourceLoadError, TscnError
from .model import ExtResourceEntry, SubResourceEntry
from .reader import Line, LineKind, classify_line, parse_attributes, parse_value, split_header
from .resolver import SourceResolver
from .values import VMapArray

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

def parse_tscn(
    text: str,
    *,
    resolver: SourceResolver | None = None,
    config: ParserConfig | None = None,
    path: str | None = None,
) -> Tscn:
    """Parse scene or resource *text* and return a Tscn."""
    return TscnParser(resolver, config).parse(text, path=path)


def load_tscn(
    path: str | PathLike[str],
    *,
    resolver: SourceResolver | None = None,
    config: ParserConfig | None = None,
) -> Tscn:
    """Read and parse the file at *path*."""
    source = Path(path)
    text = source.read_text(encoding="utf-8-sig")
    return TscnParser(resolver, config).parse(text, path=str(source))


# ---------------------------------------------------------------------------
# TscnParser
# ---------------------------------------------------------------------------

class TscnParser:
    """Parses one file; external resources get a fresh parser of their own.

    Only the resolver and the (immutable) config are shared with nested
    parsers.  Cyclic resource references are not detected.
    """

    def __init__(self, resolver: SourceResolver | None = None, config: ParserConfig | None = None) -> None:
        self.config = config if config is not None else ParserConfig()
        self.resolver = resolver if resolver is not None else self.config.resolver()

    def parse(self, text: str, path: str | None = None) -> Tscn:
        doc = Tscn(path=path)
        env = Environment(source_path=path)

        for lineno, raw in enumerate(text.splitlines(), 1):
            line = classify_line(raw)
            if line is None:
                if raw.strip():
                    logger.debug("Skipping unrecognised line %d: %r", lineno, raw)
                continue

            if line.kind == LineKind.HEADER:
                self._open_block(line.rhs, doc, env, lineno)
                continue

            if env.target is None:
                continue

            if line.kind == LineKind.ASSIGNMENT:
                self._assign(line, env)
            elif line.kind == LineKind.CONTINUATION:
                self._continue(line, env, lineno)
            elif line.kind == LineKind.SEPARATOR:
                self._next_map(env)
            # LineKind.CLOSER: nothing to do

        doc.nodes = env.nodes
        return doc

    # -- Headers --------------------------------------------------------

    def _open_block(self, header: str, doc: Tscn, env: Environment, lineno: int) -> None:
        block_type, attr_text = split_header(header)
        block = make_block(block_type, parse_attributes(attr_text))

        if block is None:
            logger.debug("Ignoring [%s] block at line %d", block_type, lineno)
            env.open_block(None, None)
            return

        logger.debug("Opened [%s] block at line %d", block_type, lineno)

        if block.kind == BlockKind.SCENE:
            doc.load_steps = block.load_steps
            doc.format = block.format
            env.open_block(block, None)

        elif block.kind == BlockKind.RESOURCE:
            if block.header == "gd_resource":
                doc.resource_type = block.type_name
                doc.load_steps = block.load_steps
                doc.format = block.format
            env.open_block(block, doc.properties, block.type_name or doc.resource_type)

        elif block.kind == BlockKind.SUB_RESOURCE:
            entry = SubResourceEntry(id=block.id, type_name=block.type_name)
            doc.sub_resources[block.id] = entry
            env.open_block(block, entry.properties, block.type_name)

        elif block.kind == BlockKind.EXT_RESOURCE:
            entry = ExtResourceEntry(id=block.id, type_name=block.type_name, path=block.path)
            doc.ext_resources[block.id] = entry
            self._resolve_external(entry, env, lineno)
            env.open_block(block, entry.properties, block.type_name)

        elif block.kind == BlockKind.NODE:
            node = env.add_node(
                name=block.name,
                type_name=block.type_name,
                parent=block.parent,
                instance=block.instance,
                line=lineno,
            )
            env.open_block(block, node.properties, block.type_name)

    def _resolve_external(self, entry: ExtResourceEntry, env: Environment, lineno: int) -> None:
        if not self.config.resolve_external or not self.config.is_resource_path(entry.path):
            return

        source = self.resolver.resolve(entry.path)
        if source is None:
            logger.warning("External resource %r (id %d) could not be resolved", entry.path, entry.id)
            return

        try:
            text = self.resolver.read(source)
        except (OSError, UnicodeDecodeError) as exc:
            raise ResourceLoadError(
                f"Cannot read external resource {entry.path!r}: {exc}",
                path=env.source_path,
                line=lineno,
            ) from exc

        nested = TscnParser(self.resolver, self.config)
        try:
            entry.resource = nested.parse(text, path=str(source))
        except TscnError as exc:
            raise ResourceLoadError(
                f"Cannot parse external resource {entry.path!r}: {exc}",
                path=env.source_path,
                line=lineno,
            ) from exc

    # -- Property lines -------------------------------------------------

    def _assign(self, line: Line, env: Environment) -> None:
        value = parse_value(line.rhs, env.block_type, self.config.curve_types)
        env.target.insert_to(line.key, value)
        env.last_key = line.key

    def _continue(self, line: Line, env: Environment, lineno: int) -> None:
        container = env.target.get_from_mut(env.last_key) if env.last_key else None
        if container is None:
            logger.debug("No open map for continuation at line %d", lineno)
            return
        container[line.key] = parse_value(line.rhs, env.block_type, self.config.curve_types)

    def _next_map(self, env: Environment) -> None:
        if env.last_key is None:
            return
        value = env.target.get_from(env.last_key)
        if isinstance(value, VMapArray):
            value.items.append({})


__all__ = ["TscnParser", "parse_tscn", "load_tscn"]
