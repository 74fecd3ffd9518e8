"""
Normalize include paths to explicit relative form.
"""

import logging

from ..contexts import PARSE_ENTRY, ParseEntryContext
from ..program import Program, on

logger = logging.getLogger(__name__)

# Left alone: resolved from the IDL root or skipped altogether.
UNTOUCHED_PREFIXES = ("google/protobuf/",)


def fix_include_path(include: str) -> str:
    """``base.thrift`` -> ``./base.thrift``; absolute and relative paths are kept."""
    if include.startswith((".", "/")) or include.startswith(UNTOUCHED_PREFIXES):
        return include
    return "./" + include


class AutoFixPathPlugin:
    """Prefix bare include paths with ``./`` so they resolve next to the including file."""

    def apply(self, program: Program) -> None:
        program.register(on(PARSE_ENTRY), self.parse_entry)

    def parse_entry(self, ctx: ParseEntryContext) -> ParseEntryContext:
        for document in ctx.ast:
            fixed = [fix_include_path(include) for include in document.includes]
            if fixed != document.includes:
                logger.debug("Normalized include paths of %s", document.idl_path)
                document.includes = fixed
        return ctx
