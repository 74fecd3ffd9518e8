"""
Drop struct fields that never travel over HTTP.

A field is ignored when it is annotated ``api.none`` (any route prefix),
its ``go.tag`` hides it from JSON (``json:"-"``), its name is configured,
or a custom predicate says so. Without configured names the framework
envelopes ``Base`` and ``BaseResp`` are dropped.
"""

import logging
from collections.abc import Callable, Iterable

from ...core import ir
from ...core.unify.annotations import split_route_key
from ...generator.options import DEFAULT_IGNORED_FIELDS
from ..contexts import PARSE_ENTRY, ParseEntryContext
from ..program import Program, on

logger = logging.getLogger(__name__)

FieldPredicate = Callable[[ir.FieldDefinition, ir.StructDefinition], bool]

HIDDEN_JSON_TAG = 'json:"-"'


def is_marked_ignored(field: ir.FieldDefinition) -> bool:
    """True for ``api.none`` fields and fields tagged ``json:"-"``."""
    for key, value in field.annotations.items():
        if split_route_key(key) == "none" and value.lower() != "false":
            return True
        if key == "go.tag" and HIDDEN_JSON_TAG in value:
            return True
    return False


class IgnoreStructFieldPlugin:
    """
    Remove ignored fields from every struct.

    Args:
        field_names: Field names to drop wherever they appear, replacing
            the default ``Base``/``BaseResp``
        predicate: Extra test called with ``(field, struct)``
    """

    def __init__(
        self,
        field_names: Iterable[str] = DEFAULT_IGNORED_FIELDS,
        predicate: FieldPredicate | None = None,
    ):
        self.field_names = frozenset(field_names)
        self.predicate = predicate

    def apply(self, program: Program) -> None:
        program.register(on(PARSE_ENTRY), self.parse_entry)

    def should_ignore(self, field: ir.FieldDefinition, struct: ir.StructDefinition) -> bool:
        if field.name in self.field_names or is_marked_ignored(field):
            return True
        return self.predicate is not None and self.predicate(field, struct)

    def parse_entry(self, ctx: ParseEntryContext) -> ParseEntryContext:
        for document in ctx.ast:
            for struct in document.structs:
                kept = [f for f in struct.fields if not self.should_ignore(f, struct)]
                if len(kept) != len(struct.fields):
                    logger.debug(
                        "Dropped %d field(s) of %s", len(struct.fields) - len(kept), struct.name
                    )
                    struct.fields = kept
        return ctx
