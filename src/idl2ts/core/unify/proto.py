"""
Protobuf syntax tree to unified Document.

Nested messages and enums are hoisted to top-level statements named after
their path (``Outer.Inner``); ``Document.root`` keeps the nesting. Type
references are resolved against the file's own declarations so a field
typed ``Inner`` inside ``Outer`` refers to ``Outer.Inner``.
"""

from __future__ import annotations

from .. import ir
from ..parser_impl.proto_ast import (
    ProtoDocument,
    ProtoEnum,
    ProtoField,
    ProtoMessage,
    ProtoNode,
    ProtoRpc,
    ProtoService,
)
from .annotations import annotation_dict, build_extension_config

PROTO_SCALARS = {
    "int32": "i32",
    "uint32": "i32",
    "sint32": "i32",
    "fixed32": "i32",
    "sfixed32": "i32",
    "int64": "i64",
    "uint64": "i64",
    "sint64": "i64",
    "fixed64": "i64",
    "sfixed64": "i64",
    "float": "double",
    "double": "double",
    "bytes": "binary",
    "string": "string",
    "bool": "bool",
}


class ProtoUnifier:
    """Converts one ProtoDocument; holds the local name table during conversion."""

    def __init__(self, ast: ProtoDocument):
        self.ast = ast
        self.file = ast.file
        self.package = ast.package
        self.known: set[str] = set()
        for definition in ast.definitions:
            if not isinstance(definition, ProtoService):
                self._collect(definition, [])

    def _collect(self, node: ProtoMessage | ProtoEnum, scope: list[str]) -> None:
        path = scope + [node.name]
        self.known.add(".".join(path))
        if isinstance(node, ProtoMessage):
            for child in [*node.messages, *node.enums]:
                self._collect(child, path)

    # ------------------------------------------------------------------
    # Names and types

    def resolve(self, name: str, scope: list[str]) -> str:
        """
        Resolve a type name to its local qualified name.

        Names that do not match a local declaration are returned as
        written (minus a leading dot), e.g. types from imported files.
        """
        absolute = name.startswith(".")
        name = name.lstrip(".")
        if self.package and name.startswith(self.package + "."):
            local = name[len(self.package) + 1 :]
            if local in self.known:
                return local
        if absolute:
            return name
        for depth in range(len(scope), -1, -1):
            candidate = ".".join(scope[:depth] + [name])
            if candidate in self.known:
                return candidate
        return name

    def convert_type_name(self, name: str, scope: list[str]) -> ir.FieldType:
        if name in PROTO_SCALARS:
            return ir.FieldType.base(PROTO_SCALARS[name])
        return ir.FieldType.ref(self.resolve(name, scope))

    def convert_field(self, field: ProtoField, scope: list[str]) -> ir.FieldDefinition:
        if field.type == "map" and field.key_type and field.value_type:
            type_ = ir.FieldType.map_of(
                self.convert_type_name(field.key_type, scope),
                self.convert_type_name(field.value_type, scope),
            )
        else:
            type_ = self.convert_type_name(field.type, scope)
            if field.label == "repeated":
                type_ = ir.FieldType.list_of(type_)

        default_value = None
        for key, value in field.options:
            if key == "default":
                default_value = value

        return ir.FieldDefinition(
            name=field.name,
            type=type_,
            field_id=field.number,
            requiredness="required" if field.label == "required" else "optional",
            default_value=default_value,
            comments=field.comments,
            annotations=annotation_dict(field.options),
            loc=self._loc(field),
        )

    def _loc(self, node: ProtoNode) -> ir.SourceLocation:
        return ir.SourceLocation(file=self.file, line=node.line, column=node.column)

    # ------------------------------------------------------------------
    # Declarations

    def convert_message(self, message: ProtoMessage, scope: list[str]) -> list[ir.Statement]:
        """Convert a message and, after it, everything nested in it."""
        path = scope + [message.name]
        statements: list[ir.Statement] = [
            ir.StructDefinition(
                name=".".join(path),
                struct_type="message",
                fields=[self.convert_field(f, path) for f in message.fields],
                comments=message.comments,
                annotations=annotation_dict(message.options),
                loc=self._loc(message),
            )
        ]
        for enum in message.enums:
            statements.append(self.convert_enum(enum, path))
        for nested in message.messages:
            statements.extend(self.convert_message(nested, path))
        return statements

    def convert_enum(self, enum: ProtoEnum, scope: list[str]) -> ir.EnumDefinition:
        return ir.EnumDefinition(
            name=".".join(scope + [enum.name]),
            members=[
                ir.EnumMember(
                    name=value.name,
                    value=value.value,
                    comments=value.comments,
                    annotations=annotation_dict(value.options),
                    loc=self._loc(value),
                )
                for value in enum.values
            ],
            comments=enum.comments,
            annotations=annotation_dict(enum.options),
            loc=self._loc(enum),
        )

    def convert_rpc(self, rpc: ProtoRpc) -> ir.FunctionDefinition:
        request = ir.FieldDefinition(
            name="req",
            type=self.convert_type_name(rpc.request_type, []),
            field_id=1,
            loc=self._loc(rpc),
        )
        return ir.FunctionDefinition(
            name=rpc.name,
            params=[request],
            return_type=self.convert_type_name(rpc.response_type, []),
            extension_config=build_extension_config(rpc.options),
            comments=rpc.comments,
            annotations=annotation_dict(rpc.options),
            loc=self._loc(rpc),
        )

    def convert_service(self, service: ProtoService) -> ir.ServiceDefinition:
        return ir.ServiceDefinition(
            name=service.name,
            functions=[self.convert_rpc(rpc) for rpc in service.rpcs],
            extension_config=build_extension_config(service.options),
            comments=service.comments,
            annotations=annotation_dict(service.options),
            loc=self._loc(service),
        )

    def build_root(self) -> ir.NamespaceNode:
        root = ir.NamespaceNode(name=self.package or "")
        for name in sorted(self.known):
            root.add_path(name.split("."))
        return root

    def unify(self, idl_path: str | None = None) -> ir.Document:
        statements: list[ir.Statement] = []
        for definition in self.ast.definitions:
            match definition:
                case ProtoMessage():
                    statements.extend(self.convert_message(definition, []))
                case ProtoEnum():
                    statements.append(self.convert_enum(definition, []))
                case ProtoService():
                    statements.append(self.convert_service(definition))

        return ir.Document(
            idl_path=idl_path or self.file,
            dialect="proto",
            namespace=self.package,
            includes=list(self.ast.imports),
            statements=statements,
            root=self.build_root(),
        )


def unify_proto(ast: ProtoDocument, idl_path: str | None = None) -> ir.Document:
    """
    Build a unified Document from a Protobuf syntax tree.

    Args:
        ast: Parsed Protobuf document
        idl_path: Path recorded on the document (defaults to the AST's file)

    Returns:
        Document with nested declarations hoisted
    """
    return ProtoUnifier(ast).unify(idl_path)
