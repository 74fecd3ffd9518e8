"""
Normalize comment text.

Block comments written as

    /**
     * Fetch one prompt.
     * Returns 404 when missing.
     */

become ``["Fetch one prompt.", "Returns 404 when missing."]``: the ``*``
gutter and blank edge lines are stripped and multi-line text is split into
a list of lines. Line comments only lose surrounding blanks; a leading
``*`` there is content. Single-line text stays a string. Formatting is
idempotent.
"""

import re

from ...core import ir
from ..contexts import PARSE_ENTRY, ParseEntryContext
from ..program import Program, on

_GUTTER = re.compile(r"^\s*\* ?")


def format_text(text: str, gutter: bool = True) -> str | list[str]:
    """
    Strip blank edge lines and split multi-line text.

    Args:
        text: Raw comment text
        gutter: Also strip one leading ``*`` per line (block comments)
    """
    lines = [line.rstrip() for line in text.split("\n")]
    if gutter:
        lines = [_GUTTER.sub("", line) for line in lines]
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    if len(lines) <= 1:
        return lines[0].strip() if lines else ""
    return lines


def format_comment(comment: ir.Comment) -> None:
    """
    Format one comment in place.

    Entries that are already line lists were formatted before and are kept.
    """
    gutter = comment.type == "block"
    if isinstance(comment.value, str):
        comment.value = format_text(comment.value, gutter)
        return
    value: list[str | list[str]] = []
    for item in comment.value:
        if isinstance(item, str):
            value.append(format_text(item, gutter))
        else:
            value.append(item)
    comment.value = value


def iter_declarations(statements: list[ir.Statement]):
    """Every declaration, members included, in source order."""
    for statement in statements:
        yield statement
        match statement:
            case ir.ServiceDefinition():
                for func in statement.functions:
                    yield func
                    yield from func.params
            case ir.StructDefinition():
                yield from statement.fields
            case ir.EnumDefinition():
                yield from statement.members
            case ir.FunctionDefinition():
                yield from statement.params


class CommentFormatPlugin:
    def apply(self, program: Program) -> None:
        program.register(on(PARSE_ENTRY), self.parse_entry)

    def parse_entry(self, ctx: ParseEntryContext) -> ParseEntryContext:
        for document in ctx.ast:
            for declaration in iter_declarations(document.statements):
                for comment in declaration.comments:
                    format_comment(comment)
        return ctx
