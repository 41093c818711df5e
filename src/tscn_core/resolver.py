"""Virtual-path resolution for external resources."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PathMapping:
    """Maps paths beginning with *prefix* (``res://``) onto a real directory."""

    prefix: str
    location: Path

    @classmethod
    def parse(cls, text: str, base: Path | None = None) -> PathMapping:
        """Build a mapping from ``PREFIX=DIR`` text, e.g. ``res://=./game``."""
        prefix, sep, location = text.partition("=")
        if not sep or not prefix or not location:
            raise ValueError(f"Expected PREFIX=DIR, got {text!r}")
        path = Path(location).expanduser()
        if base is not None and not path.is_absolute():
            path = base / path
        return cls(prefix=prefix, location=path)

    def remap(self, virtual_path: str) -> Path | None:
        if not virtual_path.startswith(self.prefix):
            return None
        return self.location / virtual_path[len(self.prefix):].lstrip("/")


class SourceResolver(ABC):
    """Turns a virtual resource path into a readable source."""

    @abstractmethod
    def resolve(self, virtual_path: str) -> Path | None:
        """Return the real location of *virtual_path*, or None if it does not exist."""

    @abstractmethod
    def read(self, source: Path) -> str:
        """Return the decoded text of a resolved source."""


class PathMappingResolver(SourceResolver):
    """Resolves virtual paths through an ordered list of prefix mappings.

    The first mapping whose prefix matches *and* whose remapped file
    exists wins; later mappings act as fallbacks (e.g. a mod directory
    shadowing the base game).
    """

    def __init__(self, mappings: Iterable[PathMapping] = ()) -> None:
        self.mappings: tuple[PathMapping, ...] = tuple(mappings)

    def resolve(self, virtual_path: str) -> Path | None:
        for mapping in self.mappings:
            candidate = mapping.remap(virtual_path)
            if candidate is not None and candidate.is_file():
                logger.debug("Resolved %s → %s", virtual_path, candidate)
                return candidate
        return None

    def read(self, source: str | PathLike[str]) -> str:
        return Path(source).read_text(encoding="utf-8-sig")
