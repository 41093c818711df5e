"""tscn_core — structural parser for Godot scene and resource text files."""

from .parser import TscnParser, parse_tscn, load_tscn
from .document import Tscn
from .model import PropertyStore, NodeEntry, SubResourceEntry, ExtResourceEntry
from .curve import Curve, ControlPoint
from .config import ParserConfig, load_config
from .resolver import PathMapping, PathMappingResolver, SourceResolver
from .values import (
    Empty,
    Value,
    Vector2,
    VBool,
    VCurve,
    VExtResource,
    VFloat,
    VFloatArray,
    VInt,
    VIntArray,
    VList,
    VMap,
    VMapArray,
    VRaw,
    VRect2,
    VStr,
    VSubResource,
    VVector2,
    VVector2Array,
)
from .errors import TscnError, StructureError, ResourceLoadError, ConfigError

__all__ = [
    "TscnParser",
    "parse_tscn",
    "load_tscn",
    "Tscn",
    "PropertyStore",
    "NodeEntry",
    "SubResourceEntry",
    "ExtResourceEntry",
    "Curve",
    "ControlPoint",
    "ParserConfig",
    "load_config",
    "PathMapping",
    "PathMappingResolver",
    "SourceResolver",
    "Empty",
    "Value",
    "Vector2",
    "VBool",
    "VCurve",
    "VExtResource",
    "VFloat",
    "VFloatArray",
    "VInt",
    "VIntArray",
    "VList",
    "VMap",
    "VMapArray",
    "VRaw",
    "VRect2",
    "VStr",
    "VSubResource",
    "VVector2",
    "VVector2Array",
    "TscnError",
    "StructureError",
    "ResourceLoadError",
    "ConfigError",
]
