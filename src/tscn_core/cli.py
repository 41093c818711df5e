"""``tscn-dump`` — print the parsed structure of scene and resource files.

Usage::

    tscn-dump Scenes/Main.tscn --map res://=. -v
    tscn-dump Player.tscn --json > player.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import IO, Mapping, Optional, Sequence

from .config import ParserConfig, load_config, locate_config_file
from .document import Tscn
from .errors import TscnError
from .parser import load_tscn
from .resolver import PathMapping
from .values import (
    Value,
    VCurve,
    VFloatArray,
    VIntArray,
    VList,
    VMap,
    VMapArray,
    VStr,
    VVector2Array,
    _EmptyType,
)

PROJECT_MARKER = "project.godot"


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def _fmt_inline(value: Value) -> str:
    """Format a single value for compact one-line display."""
    if isinstance(value, _EmptyType):
        return "Empty"
    if isinstance(value, VStr):
        return f'"{value.value}"'
    if isinstance(value, (VIntArray, VFloatArray)):
        return "[" + ", ".join(str(v) for v in value.items) + "]"
    if isinstance(value, VVector2Array):
        return "[" + ", ".join(str(v) for v in value.items) + "]"
    if isinstance(value, VList):
        return "[" + ", ".join(_fmt_inline(v) for v in value.items) + "]"
    if isinstance(value, VCurve):
        return f"Curve({len(value.value)} points)"
    if isinstance(value, VMap):
        return _fmt_map(value.entries)
    if isinstance(value, VMapArray):
        return "[" + ", ".join(_fmt_map(m) for m in value.items) + "]"
    return str(value)


def _fmt_map(entries: dict[str, Value]) -> str:
    return "{" + ", ".join(f'"{k}": {_fmt_inline(v)}' for k, v in entries.items()) + "}"


def _show_properties(properties: Mapping[str, Value], indent: str, dest: IO[str]) -> None:
    for key, value in properties.items():
        print(f"{indent}{key} = {_fmt_inline(value)}", file=dest)


def _show_nodes(doc: Tscn, dest: IO[str]) -> None:
    if not doc.nodes:
        print("  (no nodes)", file=dest)
        return
    for node in doc.walk():
        indent = "  " * (node.level + 1)
        type_str = node.type_name or (f"instance of {node.instance}" if node.instance is not None else "-")
        print(f"{indent}{node.name} ({type_str})  #{node.id} uuid={node.uuid:04x}", file=dest)
        _show_properties(node.properties, indent + "    ", dest)


def _show_sub_resources(doc: Tscn, dest: IO[str]) -> None:
    if not doc.sub_resources:
        print("  (no sub-resources)", file=dest)
        return
    for rid, entry in doc.sub_resources.items():
        print(f"  {rid}: {entry.type_name}", file=dest)
        _show_properties(entry.properties, "      ", dest)


def _show_ext_resources(doc: Tscn, dest: IO[str]) -> None:
    if not doc.ext_resources:
        print("  (no external resources)", file=dest)
        return
    for rid, entry in doc.ext_resources.items():
        if entry.resource is not None:
            state = f"resolved, {len(entry.resource.nodes)} nodes"
        else:
            state = "not loaded"
        print(f"  {rid}: {entry.type_name} {entry.path}  [{state}]", file=dest)


def _dump(doc: Tscn, dest: IO[str]) -> None:
    title = doc.path or "<text>"
    if doc.resource_type:
        title += f"  ({doc.resource_type})"
    print(title, file=dest)
    print("=" * len(title), file=dest)
    if doc.properties:
        print("Properties:", file=dest)
        _show_properties(doc.properties, "  ", dest)
    print("Nodes:", file=dest)
    _show_nodes(doc, dest)
    print("SubResources:", file=dest)
    _show_sub_resources(doc, dest)
    print("ExtResources:", file=dest)
    _show_ext_resources(doc, dest)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

def _project_mapping(file: Path) -> Optional[PathMapping]:
    """Map ``res://`` to the nearest directory holding ``project.godot``."""
    for directory in file.resolve().parents:
        if (directory / PROJECT_MARKER).is_file():
            return PathMapping(prefix="res://", location=directory)
    return None


def _build_config(args: argparse.Namespace, extra: list[PathMapping], file: Path) -> ParserConfig:
    explicit = Path(args.config) if args.config else None
    config_path = locate_config_file(Path.cwd(), explicit)
    if explicit is not None and config_path is None:
        raise TscnError("Config file not found", path=str(explicit))
    config = load_config(config_path) if config_path else ParserConfig()

    if not extra and not config.mappings:
        project = _project_mapping(file)
        if project is not None:
            extra = [project]
    config = config.with_mappings(extra)

    if args.no_external:
        config = replace(config, resolve_external=False)
    return config


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tscn-dump",
        description="Print nodes and resources parsed from .tscn / .tres files.",
    )
    parser.add_argument("files", nargs="+", help="Scene or resource files to parse")
    parser.add_argument("--config", help="Path to a tscn.toml file (default: search upward)")
    parser.add_argument(
        "--map",
        action="append",
        default=[],
        metavar="PREFIX=DIR",
        help="Map a virtual path prefix to a directory (repeatable, tried first)",
    )
    parser.add_argument("--no-external", action="store_true", help="Do not load external resources")
    parser.add_argument("--json", action="store_true", help="Emit JSON instead of text")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="-v: info, -vv: debug")
    return parser


def main(argv: Optional[Sequence[str]] = None, dest: IO[str] | None = None) -> int:
    """Entry point for ``tscn-dump``; returns the process exit code."""
    args = _build_arg_parser().parse_args(argv)
    dest = dest if dest is not None else sys.stdout

    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        extra = [PathMapping.parse(text) for text in args.map]
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    status = 0
    for name in args.files:
        file = Path(name)
        try:
            config = _build_config(args, extra, file)
            doc = load_tscn(file, config=config)
        except (TscnError, OSError, UnicodeDecodeError) as exc:
            print(f"error: {name}: {exc}", file=sys.stderr)
            status = 1
            continue

        if args.json:
            print(json.dumps(doc.to_dict(), indent=2), file=dest)
        else:
            _dump(doc, dest)
    return status


if __name__ == "__main__":
    sys.exit(main())
