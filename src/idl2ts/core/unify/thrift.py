"""
Thrift syntax tree to unified Document.
"""

from __future__ import annotations

from .. import ir
from ..parser_impl.thrift_ast import (
    ThriftConst,
    ThriftDocument,
    ThriftEnum,
    ThriftField,
    ThriftFunction,
    ThriftNode,
    ThriftService,
    ThriftStruct,
    ThriftType,
    ThriftTypedef,
)
from .annotations import annotation_dict, build_extension_config

# Namespace scopes tried in order when picking the document namespace.
NAMESPACE_SCOPES = ("js", "*", "go", "py", "java")


def convert_type(type_: ThriftType) -> ir.FieldType:
    """Convert a Thrift type reference into an IR FieldType."""
    if type_.name == "void":
        return ir.FieldType.void()
    if type_.name == "map" and type_.key_type and type_.value_type:
        return ir.FieldType.map_of(convert_type(type_.key_type), convert_type(type_.value_type))
    if type_.name == "list" and type_.value_type:
        return ir.FieldType.list_of(convert_type(type_.value_type))
    if type_.name == "set" and type_.value_type:
        return ir.FieldType.set_of(convert_type(type_.value_type))
    if type_.name in ir.BASE_TYPES:
        return ir.FieldType.base(type_.name)
    return ir.FieldType.ref(type_.name)


def _loc(node: ThriftNode, file: str) -> ir.SourceLocation:
    return ir.SourceLocation(file=file, line=node.line, column=node.column)


def convert_field(field: ThriftField, file: str) -> ir.FieldDefinition:
    return ir.FieldDefinition(
        name=field.name,
        type=convert_type(field.type),
        field_id=field.field_id,
        requiredness=field.requiredness or "default",
        default_value=field.default_value,
        comments=field.comments,
        annotations=annotation_dict(field.annotations + field.type.annotations),
        loc=_loc(field, file),
    )


def convert_function(func: ThriftFunction, file: str) -> ir.FunctionDefinition:
    return ir.FunctionDefinition(
        name=func.name,
        params=[convert_field(p, file) for p in func.params],
        return_type=convert_type(func.return_type),
        throws=[convert_field(t, file) for t in func.throws],
        oneway=func.oneway,
        extension_config=build_extension_config(func.annotations),
        comments=func.comments,
        annotations=annotation_dict(func.annotations),
        loc=_loc(func, file),
    )


def convert_enum(enum: ThriftEnum, file: str) -> ir.EnumDefinition:
    """Convert an enum; members without a value continue from the previous one."""
    members: list[ir.EnumMember] = []
    next_value = 0
    for value in enum.values:
        current = value.value if value.value is not None else next_value
        next_value = current + 1
        members.append(
            ir.EnumMember(
                name=value.name,
                value=current,
                comments=value.comments,
                annotations=annotation_dict(value.annotations),
                loc=_loc(value, file),
            )
        )
    return ir.EnumDefinition(
        name=enum.name,
        members=members,
        comments=enum.comments,
        annotations=annotation_dict(enum.annotations),
        loc=_loc(enum, file),
    )


def convert_definition(node: ThriftNode, file: str) -> ir.Statement:
    match node:
        case ThriftService():
            return ir.ServiceDefinition(
                name=node.name,
                functions=[convert_function(f, file) for f in node.functions],
                extends=node.extends,
                extension_config=build_extension_config(node.annotations),
                comments=node.comments,
                annotations=annotation_dict(node.annotations),
                loc=_loc(node, file),
            )
        case ThriftStruct():
            return ir.StructDefinition(
                name=node.name,
                struct_type=node.struct_type,
                fields=[convert_field(f, file) for f in node.fields],
                comments=node.comments,
                annotations=annotation_dict(node.annotations),
                loc=_loc(node, file),
            )
        case ThriftEnum():
            return convert_enum(node, file)
        case ThriftTypedef():
            return ir.TypedefDefinition(
                name=node.name,
                type=convert_type(node.type),
                comments=node.comments,
                annotations=annotation_dict(node.annotations),
                loc=_loc(node, file),
            )
        case ThriftConst():
            return ir.ConstDefinition(
                name=node.name,
                type=convert_type(node.type),
                value=node.value,
                comments=node.comments,
                loc=_loc(node, file),
            )
    raise TypeError(f"Unexpected thrift definition: {type(node).__name__}")


def unify_thrift(ast: ThriftDocument, idl_path: str | None = None) -> ir.Document:
    """
    Build a unified Document from a Thrift syntax tree.

    Args:
        ast: Parsed Thrift document
        idl_path: Path recorded on the document (defaults to the AST's file)

    Returns:
        Document with statements in source order
    """
    namespace = None
    for scope in NAMESPACE_SCOPES:
        if scope in ast.namespaces:
            namespace = ast.namespaces[scope]
            break
    if namespace is None and ast.namespaces:
        namespace = next(iter(ast.namespaces.values()))

    return ir.Document(
        idl_path=idl_path or ast.file,
        dialect="thrift",
        namespace=namespace,
        includes=list(ast.includes),
        statements=[convert_definition(d, ast.file) for d in ast.definitions],
    )
