"""
Name-based mock values.

Scalar fields get plausible values from their names:

    user_id / UserID    -> numeric id
    email, contact_email -> synthetic email
    create_time, ts_timestamp -> epoch milliseconds
    status, biz_type    -> small integer (1-5)

Values come from a ``random.Random`` seeded per field, so the same seed
always yields the same mock module.
"""

import json
import random
import re

from ...core import ir
from ...core.unify.annotations import is_js_conv
from ..contexts import GEN_MOCK_FIELD, GenMockFieldContext
from ..program import Program, on

# 2023-01-01 to 2025-01-01, in milliseconds.
EPOCH_MS_RANGE = (1672531200000, 1735689600000)
ID_RANGE = (1, 10**9)
ENUM_RANGE = (1, 5)

_ID_SUFFIX = re.compile(r"(?:^|_)(?:id|Id|ID)$|[a-z0-9](?:Id|ID)$")


class MockTransformerPlugin:
    def __init__(self, seed: int = 0):
        self.seed = seed

    def apply(self, program: Program) -> None:
        program.register(on(GEN_MOCK_FIELD), self.gen_mock_field)

    def gen_mock_field(self, ctx: GenMockFieldContext) -> GenMockFieldContext:
        field = ctx.field
        if ctx.output is not None or field.type.kind != ir.TypeKind.BASE:
            return ctx
        if field.type.name == "i64" and is_js_conv(field):
            target = "string"
        else:
            target = ctx.session.type_mapper.map(field.type.name)
        rng = random.Random(f"{self.seed}:{ctx.document.idl_path}:{ctx.struct.name}.{field.name}")
        ctx.output = mock_literal(field.name, target, rng)
        return ctx


def mock_literal(name: str, target: str, rng: random.Random) -> str | None:
    """
    JavaScript literal for a scalar field, or None when no rule matches.

    Args:
        name: Field name
        target: TypeScript type of the field (``number``, ``string``, ...)
        rng: Random source
    """
    upper = name.upper()
    if _ID_SUFFIX.search(name):
        return _number(rng.randint(*ID_RANGE), target)
    if "EMAIL" in upper:
        if target != "string":
            return None
        return json.dumps(f"user{rng.randint(1, 9999)}@example.com")
    if upper.endswith("TIME") or "TIMESTAMP" in upper:
        return _number(rng.randint(*EPOCH_MS_RANGE), target)
    if upper.endswith("STATUS") or "TYPE" in upper:
        if target != "number":
            return None
        return str(rng.randint(*ENUM_RANGE))
    return None


def _number(value: int, target: str) -> str | None:
    if target == "number":
        return str(value)
    if target == "string":
        return json.dumps(str(value))
    return None
