"""
Mock module generation.

Every document gets a ``<name>.mock.js`` module exporting one factory per
struct and enum, plus a ``methods`` table mapping API names to response
factories. Field values come from the GEN_MOCK_FIELD hook; the built-in
fallback uses the declared default or a value derived from the type.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ..core import ir
from ..plugins.contexts import GEN_MOCK_FIELD, GenMockFieldContext
from .typescript import INDENT, ModuleScope, js_value
from .utils import import_path, mock_name, property_name

if TYPE_CHECKING:
    from ..plugins.program import Program
    from .templates import ApiMeta

logger = logging.getLogger(__name__)

MOCK_UTILS_FILE = "_mock_utils.js"

MOCK_UTILS = """\
/* eslint-disable */
const MAX_DEPTH = 3;
let depth = 0;

export function createStruct(factory) {
  return function () {
    if (depth >= MAX_DEPTH) {
      return undefined;
    }
    depth += 1;
    try {
      return factory();
    } finally {
      depth -= 1;
    }
  };
}

export function createEnum(values) {
  return function () {
    return values[0];
  };
}
"""

NUMBER_TYPES = frozenset({"byte", "i8", "i16", "i32", "i64", "double"})


def type_mock_value(type_: ir.FieldType, scope: ModuleScope) -> str:
    """Mock expression derived from a type alone."""
    match type_.kind:
        case ir.TypeKind.BASE:
            if type_.name in NUMBER_TYPES:
                if type_.name == "i64" and scope.session.type_mapper.i64 == "string":
                    return '"0"'
                return "0"
            if type_.name == "bool":
                return "false"
            if type_.name == "binary":
                return "null"
            return '""'
        case ir.TypeKind.LIST | ir.TypeKind.SET:
            assert type_.value_type is not None
            return f"[{type_mock_value(type_.value_type, scope)}]"
        case ir.TypeKind.MAP:
            return "{}"
        case ir.TypeKind.VOID:
            return "undefined"
    ref = scope.lookup(type_.name)
    if ref is None:
        return "null"
    if isinstance(ref.declaration, ir.TypedefDefinition):
        return type_mock_value(scope.unwrap_typedef(type_), scope)
    binding = mock_name(ref.name)
    return f"{ref.alias}.{binding}()" if ref.alias else f"{binding}()"


def fallback_mock_value(ctx: GenMockFieldContext, scope: ModuleScope) -> str:
    """Declared default when it is a plain literal, else a value derived from the type."""
    default = ctx.field.default_value
    if default is not None and not isinstance(default, ir.ConstRef):
        return js_value(default)
    if scope.is_string_i64(ctx.field):
        return '"0"'
    return type_mock_value(ctx.field.type, scope)


def render_mock_module(
    document: ir.Document,
    scope: ModuleScope,
    program: Program,
    mock_path: Path,
    utils_path: Path,
    import_mock_paths: dict[str, Path],
    apis: list[ApiMeta],
) -> str:
    """
    Render the mock module of one document.

    Args:
        document: Document to mock
        scope: Name resolution for the document
        program: Plugin host, triggered once per struct field
        mock_path: Path of the generated mock module
        utils_path: Path of the shared ``_mock_utils.js``
        import_mock_paths: Import alias to the mock module of that include
        apis: API metadata of the document's services
    """
    lines = [
        "/* eslint-disable */",
        f"import {{ createStruct, createEnum }} from '{import_path(mock_path, utils_path)}';",
    ]
    for alias, path in import_mock_paths.items():
        lines.append(f"import * as {alias} from '{import_path(mock_path, path)}';")

    for statement in document.statements:
        match statement:
            case ir.StructDefinition():
                lines.append(f"export const {mock_name(statement.name)} = createStruct(() => ({{")
                for field in statement.fields:
                    ctx = GenMockFieldContext(
                        field=field,
                        struct=statement,
                        document=document,
                        session=scope.session,
                    )
                    ctx = program.trigger(GEN_MOCK_FIELD, ctx)
                    lines.append(f"{INDENT}{property_name(field.name)}: {ctx.output},")
                lines.append("}));")
            case ir.EnumDefinition():
                values = ", ".join(str(m.value) for m in statement.members)
                lines.append(f"export const {mock_name(statement.name)} = createEnum([{values}]);")

    lines.append("export const methods = {")
    for meta in apis:
        ref = scope.lookup(meta.res_type)
        if ref is None:
            lines.append(f"{INDENT}{meta.name}: () => ({{}}),")
        else:
            binding = mock_name(ref.name)
            target = f"{ref.alias}.{binding}" if ref.alias else binding
            lines.append(f"{INDENT}{meta.name}: {target},")
    lines.append("};")
    return "\n".join(lines) + "\n"
