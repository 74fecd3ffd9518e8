"""
Plugin host and hook contexts.

Built-in plugins live in ``idl2ts.plugins.builtin``.
"""

from .contexts import (
    GEN_FILE_AST,
    GEN_MOCK_FIELD,
    PARSE_ENTRY,
    WRITE_FILE,
    GenFileAstContext,
    GenMockFieldContext,
    ParseEntryContext,
    WriteFileContext,
)
from .program import DEFAULT_PRIORITY, HookPhase, Plugin, Program, after, before, hook_key, on

__all__ = [
    "DEFAULT_PRIORITY",
    "GEN_FILE_AST",
    "GEN_MOCK_FIELD",
    "PARSE_ENTRY",
    "WRITE_FILE",
    "GenFileAstContext",
    "GenMockFieldContext",
    "HookPhase",
    "ParseEntryContext",
    "Plugin",
    "Program",
    "WriteFileContext",
    "after",
    "before",
    "hook_key",
    "on",
]
