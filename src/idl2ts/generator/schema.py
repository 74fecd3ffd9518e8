"""
JSON Schema emission.

One schema per document, identified by its schema root
(``api://schemas/<path>``) so ``createAPI`` call sites can point at it.
References to included documents use the included document's root.
"""

from typing import Any

from ..core import ir
from .typescript import ModuleScope

JSON_SCHEMA_DRAFT = "http://json-schema.org/draft-07/schema#"

INTEGER_TYPES = frozenset({"byte", "i8", "i16", "i32", "i64"})


def _description(comments: list[ir.Comment]) -> str | None:
    lines = [line.strip() for c in comments for line in c.lines()]
    text = "\n".join(line for line in lines if line)
    return text or None


class SchemaBuilder:
    """
    Builds the JSON Schema of one document.

    Args:
        scope: Name resolution for the document
        schema_roots: Schema root of every document, keyed by idl path
    """

    def __init__(self, scope: ModuleScope, schema_roots: dict[str, str]):
        self.scope = scope
        self.schema_roots = schema_roots

    def type_schema(self, type_: ir.FieldType) -> dict[str, Any]:
        match type_.kind:
            case ir.TypeKind.BASE:
                if type_.name == "i64" and self.scope.session.type_mapper.i64 == "string":
                    return {"type": "string", "format": "int64"}
                if type_.name in INTEGER_TYPES:
                    return {"type": "integer"}
                if type_.name == "double":
                    return {"type": "number"}
                if type_.name == "bool":
                    return {"type": "boolean"}
                if type_.name == "binary":
                    return {"type": "string", "contentEncoding": "base64"}
                return {"type": "string"}
            case ir.TypeKind.LIST:
                assert type_.value_type is not None
                return {"type": "array", "items": self.type_schema(type_.value_type)}
            case ir.TypeKind.SET:
                assert type_.value_type is not None
                return {
                    "type": "array",
                    "items": self.type_schema(type_.value_type),
                    "uniqueItems": True,
                }
            case ir.TypeKind.MAP:
                assert type_.value_type is not None
                return {
                    "type": "object",
                    "additionalProperties": self.type_schema(type_.value_type),
                }
            case ir.TypeKind.VOID:
                return {"type": "null"}

        ref = self.scope.lookup(type_.name)
        if ref is None:
            return {}
        if ref.alias is None:
            return {"$ref": f"#/definitions/{ref.name}"}
        root = self.schema_roots.get(ref.document.idl_path, "")
        return {"$ref": f"{root}#/definitions/{ref.name}"}

    def struct_schema(self, struct: ir.StructDefinition) -> dict[str, Any]:
        properties: dict[str, Any] = {}
        required: list[str] = []
        for field in struct.fields:
            if self.scope.is_string_i64(field):
                prop = {"type": "string", "format": "int64"}
            else:
                prop = self.type_schema(field.type)
            description = _description(field.comments)
            if description:
                prop = {**prop, "description": description}
            properties[field.name] = prop
            if not field.is_optional:
                required.append(field.name)
        schema: dict[str, Any] = {"type": "object", "properties": properties}
        if required:
            schema["required"] = required
        return schema

    def build(self, schema_root: str) -> dict[str, Any]:
        definitions: dict[str, Any] = {}
        for statement in self.scope.document.statements:
            match statement:
                case ir.StructDefinition():
                    definition = self.struct_schema(statement)
                case ir.EnumDefinition():
                    definition = {
                        "type": "integer",
                        "enum": [m.value for m in statement.members],
                    }
                case ir.TypedefDefinition():
                    definition = self.type_schema(statement.type)
                case _:
                    continue
            description = _description(statement.comments)
            if description:
                definition["description"] = description
            definitions[statement.name] = definition

        return {"$schema": JSON_SCHEMA_DRAFT, "$id": schema_root, "definitions": definitions}
