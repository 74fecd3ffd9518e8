"""
Drop repeated include statements.
"""

import logging

from ..contexts import PARSE_ENTRY, ParseEntryContext
from ..program import Program, on

logger = logging.getLogger(__name__)


class AutoFixDuplicateIncludesPlugin:
    """Keep the first occurrence of each include path, warning about the rest."""

    def apply(self, program: Program) -> None:
        program.register(on(PARSE_ENTRY), self.parse_entry)

    def parse_entry(self, ctx: ParseEntryContext) -> ParseEntryContext:
        for document in ctx.ast:
            unique: list[str] = []
            for include in document.includes:
                if include in unique:
                    logger.warning("Duplicate include %s in %s", include, document.idl_path)
                    continue
                unique.append(include)
            document.includes = unique
        return ctx
