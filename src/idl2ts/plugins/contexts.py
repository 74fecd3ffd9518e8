"""
Hook names and the context type each hook carries.

Every hook has exactly one context class, so a handler's signature states
what it consumes and returns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from ..core import ir

if TYPE_CHECKING:
    from ..generator.session import GenerationSession
    from ..generator.templates import ApiMeta

PARSE_ENTRY = "PARSE_ENTRY"
GEN_FILE_AST = "GEN_FILE_AST"
GEN_MOCK_FIELD = "GEN_MOCK_FIELD"
WRITE_FILE = "WRITE_FILE"


@dataclass
class ParseEntryContext:
    """
    Context of PARSE_ENTRY: every parsed document, before code generation.

    Attributes:
        ast: Documents of all entries and their includes
        files: Output files collected so far
        entries: Entry name to absolute entry path
        session: Current generation session
    """

    ast: list[ir.Document]
    files: dict[Path, str]
    entries: dict[str, Path]
    session: GenerationSession


@dataclass
class GenFileAstContext:
    """
    Context of GEN_FILE_AST: one document rendered to one TypeScript module.

    ON handlers fill ``content`` and ``apis``; AFTER handlers read them.
    """

    document: ir.Document
    ast: list[ir.Document]
    output_path: Path
    files: dict[Path, str]
    session: GenerationSession
    apis: list[ApiMeta] = field(default_factory=list)
    content: str | None = None


@dataclass
class GenMockFieldContext:
    """
    Context of GEN_MOCK_FIELD: the mock value of one struct field.

    ``output`` is a JavaScript expression; the first handler that sets it
    decides the value.
    """

    field: ir.FieldDefinition
    struct: ir.StructDefinition
    document: ir.Document
    session: GenerationSession
    output: str | None = None


@dataclass
class WriteFileContext:
    """Context of WRITE_FILE: one output file about to be persisted."""

    filename: Path
    content: str
    session: GenerationSession
