"""Error model for tscn_core."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class ErrorLocation:
    path: Optional[str] = None
    line: Optional[int] = None

    def describe(self) -> str:
        if self.path and self.line is not None:
            return f"{self.path}:{self.line}"
        if self.path:
            return self.path
        if self.line is not None:
            return f"line {self.line}"
        return "unknown location"


class TscnError(Exception):
    """Base class for all errors raised while loading scene data."""

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        line: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.location = ErrorLocation(path=path, line=line)
        self.path = path
        self.line = line

    def format(self) -> str:
        location_desc = self.location.describe()
        if location_desc == "unknown location":
            return self.message
        return f"{self.message} ({location_desc})"

    def __str__(self) -> str:
        return self.format()


class StructureError(TscnError):
    """Raised when a node names a parent that was never declared."""


class ResourceLoadError(TscnError):
    """Raised when a resolved external resource cannot be read or parsed."""


class ConfigError(TscnError):
    """Raised when a configuration file is malformed."""


__all__ = [
    "TscnError",
    "StructureError",
    "ResourceLoadError",
    "ConfigError",
    "ErrorLocation",
]
