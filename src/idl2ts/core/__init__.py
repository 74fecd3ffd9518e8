"""
IDL front end: lexer, dialect parsers, unifier and the shared IR.
"""

from . import ir
from .errors import (
    ConfigError,
    FormatterError,
    Idl2TsError,
    ParseError,
    PluginError,
    ResolutionError,
    UnknownTypeError,
    UnregisteredHookError,
)
from .parser import detect_dialect, parse, parse_with_includes, resolve_include

__all__ = [
    "ConfigError",
    "FormatterError",
    "Idl2TsError",
    "ParseError",
    "PluginError",
    "ResolutionError",
    "UnknownTypeError",
    "UnregisteredHookError",
    "detect_dialect",
    "ir",
    "parse",
    "parse_with_includes",
    "resolve_include",
]
