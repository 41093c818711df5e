"""Parser configuration and ``tscn.toml`` loading."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from .errors import ConfigError
from .reader import CURVE_TYPES
from .resolver import PathMapping, PathMappingResolver

CONFIG_FILENAME = "tscn.toml"
DEFAULT_RESOURCE_SUFFIXES = (".tscn", ".tres", ".escn")


@dataclass(frozen=True)
class ParserConfig:
    """Immutable settings handed unchanged to every nested parser."""

    mappings: tuple[PathMapping, ...] = ()
    resolve_external: bool = True
    resource_suffixes: tuple[str, ...] = DEFAULT_RESOURCE_SUFFIXES
    curve_types: frozenset[str] = field(default=CURVE_TYPES)

    def resolver(self) -> PathMappingResolver:
        return PathMappingResolver(self.mappings)

    def is_resource_path(self, virtual_path: str) -> bool:
        return virtual_path.lower().endswith(self.resource_suffixes)

    def with_mappings(self, extra: Iterable[PathMapping]) -> ParserConfig:
        """Return a copy with *extra* mappings tried before the configured ones."""
        return replace(self, mappings=tuple(extra) + self.mappings)


def locate_config_file(start: Path, explicit: Optional[Path] = None) -> Optional[Path]:
    """Find ``tscn.toml`` in *start* or any parent directory."""
    if explicit is not None:
        return explicit if explicit.is_file() else None
    current = start.resolve()
    if current.is_file():
        current = current.parent
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path) -> ParserConfig:
    """Read a ``[tscn]`` table from a TOML file.

    Example::

        [tscn]
        resolve_external = true
        resource_suffixes = [".tscn", ".tres"]

        [[tscn.mappings]]
        prefix = "res://"
        location = "game"      # relative to this file
    """
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML: {exc}", path=str(path)) from exc

    section = data.get("tscn", {})
    if not isinstance(section, dict):
        raise ConfigError("[tscn] must be a table", path=str(path))
    return _parse_section(section, path.resolve().parent, str(path))


def _parse_section(section: Dict[str, Any], root: Path, source: str) -> ParserConfig:
    config = ParserConfig()

    resolve_external = section.get("resolve_external", config.resolve_external)
    if not isinstance(resolve_external, bool):
        raise ConfigError("resolve_external must be a boolean", path=source)

    suffixes = _string_list(section.get("resource_suffixes", config.resource_suffixes), "resource_suffixes", source)
    curve_types = _string_list(section.get("curve_types", sorted(config.curve_types)), "curve_types", source)

    mappings = []
    entries = section.get("mappings", [])
    if not isinstance(entries, list):
        raise ConfigError("mappings must be an array of tables", path=source)
    for entry in entries:
        if not isinstance(entry, dict):
            raise ConfigError("mappings must be an array of tables", path=source)
        prefix = entry.get("prefix")
        location = entry.get("location")
        if not isinstance(prefix, str) or not isinstance(location, str) or not prefix:
            raise ConfigError("each mapping needs string 'prefix' and 'location'", path=source)
        target = Path(location).expanduser()
        if not target.is_absolute():
            target = root / target
        mappings.append(PathMapping(prefix=prefix, location=target))

    return ParserConfig(
        mappings=tuple(mappings),
        resolve_external=resolve_external,
        resource_suffixes=tuple(suffixes),
        curve_types=frozenset(curve_types),
    )


def _string_list(value: Any, name: str, source: str) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return list(value)
    raise ConfigError(f"{name} must be a list of strings", path=source)
