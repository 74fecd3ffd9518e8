"""
idl2ts - TypeScript API clients from Thrift and Protobuf IDL.

Parses IDL files into one unified document model, runs plugins over it and
emits ``createAPI`` call sites, type declarations, mocks and schemas.
"""

from __future__ import annotations

from ._version import get_version
from .core import ir
from .core.errors import (
    ConfigError,
    FormatterError,
    Idl2TsError,
    ParseError,
    PluginError,
    ResolutionError,
    UnknownTypeError,
)
from .core.parser import parse, parse_with_includes
from .generator import ApiConfig, GenerationResult, Options, gen_client, load_api_config

__version__ = get_version()

__all__ = [
    "__version__",
    "ApiConfig",
    "ConfigError",
    "FormatterError",
    "GenerationResult",
    "Idl2TsError",
    "Options",
    "ParseError",
    "PluginError",
    "ResolutionError",
    "UnknownTypeError",
    "gen_client",
    "ir",
    "load_api_config",
    "parse",
    "parse_with_includes",
]
