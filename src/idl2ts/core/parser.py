"""
Public parse entry points.

``parse`` accepts inline IDL text or a path and returns one unified
Document; ``parse_with_includes`` also follows includes/imports.
"""

import logging
import re
from pathlib import Path
from typing import Literal

from . import ir
from .errors import INLINE_SOURCE, ResolutionError
from .parser_impl import parse_proto, parse_thrift
from .unify import unify_proto, unify_thrift

logger = logging.getLogger(__name__)

Dialect = Literal["thrift", "proto"]

IDL_SUFFIXES: dict[str, Dialect] = {".thrift": "thrift", ".proto": "proto"}

# Protobuf imports that may be absent from the IDL tree.
WELL_KNOWN_PREFIX = "google/protobuf/"

_PROTO_MARKERS = (
    re.compile(r"^\s*syntax\s*=", re.MULTILINE),
    re.compile(r"\bmessage\s+\w+\s*\{"),
    re.compile(r"\brpc\s+\w+\s*\("),
)


def detect_dialect(text: str) -> Dialect:
    """Guess the dialect of inline text; Thrift unless Protobuf markers appear."""
    if any(marker.search(text) for marker in _PROTO_MARKERS):
        return "proto"
    return "thrift"


def _looks_like_path(source: str) -> bool:
    return "\n" not in source and Path(source).suffix in IDL_SUFFIXES


def parse_text(
    text: str,
    file: str,
    dialect: Dialect,
    revise_tail_comment: bool = True,
    idl_path: str | None = None,
) -> ir.Document:
    """Parse and unify text of a known dialect."""
    if dialect == "proto":
        return unify_proto(parse_proto(text, file, revise_tail_comment), idl_path)
    return unify_thrift(parse_thrift(text, file, revise_tail_comment), idl_path)


def parse(
    source: str | Path,
    *,
    revise_tail_comment: bool = True,
    dialect: Dialect | None = None,
    file: str | None = None,
) -> ir.Document:
    """
    Parse a Thrift or Protobuf source into a unified Document.

    Args:
        source: Inline IDL text, or a path to a ``.thrift``/``.proto`` file
        revise_tail_comment: Fold same-line trailing comments into the
            preceding declaration
        dialect: Force the dialect; detected from the extension or text
        file: Label used in locations for inline text (default ``source``)

    Returns:
        Document

    Raises:
        ResolutionError: If ``source`` names a file that does not exist
        ParseError: If the source is malformed
    """
    if isinstance(source, Path) or _looks_like_path(source):
        path = Path(source)
        if not path.is_file():
            raise ResolutionError(f"no such file: {source}")
        text = path.read_text(encoding="utf-8")
        resolved = dialect or IDL_SUFFIXES.get(path.suffix) or detect_dialect(text)
        logger.debug("Parsing %s as %s", path, resolved)
        return parse_text(
            text,
            str(path),
            resolved,
            revise_tail_comment=revise_tail_comment,
            idl_path=str(path.resolve()),
        )

    return parse_text(
        source,
        file or INLINE_SOURCE,
        dialect or detect_dialect(source),
        revise_tail_comment=revise_tail_comment,
    )


def resolve_include(include: str, including_file: str | Path, idl_root: Path | None) -> Path:
    """
    Resolve an include/import path.

    Tried relative to the including file first, then to ``idl_root``.

    Raises:
        ResolutionError: If no candidate exists
    """
    target = Path(include)
    if target.is_absolute():
        candidates = [target]
    else:
        candidates = [Path(including_file).parent / target]
        if idl_root is not None:
            candidates.append(idl_root / target)
    for candidate in candidates:
        if candidate.is_file():
            return candidate.resolve()
    raise ResolutionError(f"no such file: {include}")


def parse_with_includes(
    entry: Path,
    idl_root: Path | None = None,
    *,
    revise_tail_comment: bool = True,
    seen: dict[str, ir.Document] | None = None,
) -> list[ir.Document]:
    """
    Parse an entry file and, depth first, every file it transitively includes.

    Args:
        entry: Entry file path
        idl_root: Fallback root for include resolution
        revise_tail_comment: Passed to every parse
        seen: Documents already parsed in this run, keyed by absolute path;
            shared between entries so each file is parsed once

    Returns:
        Newly parsed documents, entry first; the entry has ``is_entry`` set

    Raises:
        ResolutionError: If the entry or an include cannot be found
        ParseError: If any file is malformed
    """
    seen = {} if seen is None else seen
    documents: list[ir.Document] = []

    entry_path = Path(entry)
    if not entry_path.is_file():
        raise ResolutionError(f"no such file: {entry}")

    key = str(entry_path.resolve())
    if key in seen:
        seen[key].is_entry = True
        return documents

    def visit(path: Path, is_entry: bool) -> None:
        doc = parse(path, revise_tail_comment=revise_tail_comment)
        doc.is_entry = is_entry
        seen[doc.idl_path] = doc
        documents.append(doc)
        for include in doc.includes:
            try:
                target = resolve_include(include, path, idl_root)
            except ResolutionError:
                if include.startswith(WELL_KNOWN_PREFIX):
                    logger.debug("Skipping well-known import %s", include)
                    continue
                raise
            if str(target) not in seen:
                visit(target, False)

    visit(entry_path, True)
    return documents
