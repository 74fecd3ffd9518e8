"""
TypeScript rendering of IR declarations.

A ModuleScope resolves the type references of one document against its
own declarations and the documents it includes; the renderer turns enums,
structs, typedefs and consts into TypeScript source. Nested Protobuf
declarations (``Outer.Inner``) are emitted inside ``export namespace``
blocks so dotted references stay valid.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..core import ir
from ..core.unify.annotations import is_js_conv
from .session import GenerationSession
from .utils import property_name

logger = logging.getLogger(__name__)

INDENT = "  "

WELL_KNOWN_TYPES = {
    "google.protobuf.Empty": "{}",
    "google.protobuf.Any": "any",
    "google.protobuf.Struct": "Record<string, any>",
    "google.protobuf.Value": "any",
    "google.protobuf.ListValue": "any[]",
    "google.protobuf.Timestamp": "string",
    "google.protobuf.Duration": "string",
    "google.protobuf.FieldMask": "string",
}

TypeDeclaration = ir.StructDefinition | ir.EnumDefinition | ir.TypedefDefinition


@dataclass
class ResolvedRef:
    """A type reference resolved to its declaration."""

    alias: str | None
    name: str
    document: ir.Document
    declaration: TypeDeclaration

    @property
    def ts_name(self) -> str:
        return f"{self.alias}.{self.name}" if self.alias else self.name


def _namespace_prefixes(namespace: str) -> list[str]:
    """``a.b.c`` -> ``["a.b.c", "b.c", "c"]``."""
    parts = namespace.split(".")
    return [".".join(parts[i:]) for i in range(len(parts))]


class ModuleScope:
    """
    Name resolution for one generated module.

    Args:
        document: Document being generated
        imports: Import alias to included document
        session: Current generation session
    """

    def __init__(
        self,
        document: ir.Document,
        imports: dict[str, ir.Document],
        session: GenerationSession,
    ):
        self.document = document
        self.imports = imports
        self.session = session

    def lookup(self, name: str) -> ResolvedRef | None:
        local = self.document.find_type(name)
        if local is not None:
            return ResolvedRef(None, name, self.document, local)

        for alias, doc in self.imports.items():
            candidates: list[str] = []
            if name.startswith(alias + "."):
                candidates.append(name[len(alias) + 1 :])
            if doc.namespace:
                for prefix in _namespace_prefixes(doc.namespace):
                    if name.startswith(prefix + "."):
                        candidates.append(name[len(prefix) + 1 :])
            if doc.dialect == "proto" and doc.namespace == self.document.namespace:
                candidates.append(name)
            for candidate in candidates:
                found = doc.find_type(candidate)
                if found is not None:
                    return ResolvedRef(alias, candidate, doc, found)
        return None

    def unwrap_typedef(self, type_: ir.FieldType) -> ir.FieldType:
        """Follow typedef chains to the underlying type."""
        seen: set[str] = set()
        while type_.kind == ir.TypeKind.REF and type_.name not in seen:
            seen.add(type_.name)
            ref = self.lookup(type_.name)
            if ref is None or not isinstance(ref.declaration, ir.TypedefDefinition):
                break
            type_ = ref.declaration.type
        return type_

    def is_i64(self, type_: ir.FieldType) -> bool:
        type_ = self.unwrap_typedef(type_)
        return type_.kind == ir.TypeKind.BASE and type_.name == "i64"

    def is_string_i64(self, field: ir.FieldDefinition) -> bool:
        """True for an i64 field annotated ``js_conv``, carried as a string."""
        return is_js_conv(field) and self.is_i64(field.type)

    def field_type(self, field: ir.FieldDefinition, level: int = 0) -> str:
        """Render the type of a field or parameter."""
        if self.is_string_i64(field):
            return "string"
        return self.ts_type(field.type, level)

    def is_enum(self, type_: ir.FieldType) -> bool:
        type_ = self.unwrap_typedef(type_)
        if type_.kind != ir.TypeKind.REF:
            return False
        ref = self.lookup(type_.name)
        return ref is not None and isinstance(ref.declaration, ir.EnumDefinition)

    def ts_type(self, type_: ir.FieldType, level: int = 0) -> str:
        """
        Render a field type.

        Args:
            type_: IR type
            level: Indentation level of the line the type appears on
        """
        options = self.session.options
        match type_.kind:
            case ir.TypeKind.BASE:
                return self.session.type_mapper.map(type_.name)
            case ir.TypeKind.VOID:
                return "void"
            case ir.TypeKind.LIST | ir.TypeKind.SET:
                assert type_.value_type is not None
                inner = self.ts_type(type_.value_type, level)
                if any(ch in inner for ch in " |{\n"):
                    return f"Array<{inner}>"
                return f"{inner}[]"
            case ir.TypeKind.MAP:
                assert type_.key_type is not None and type_.value_type is not None
                key = "string | number"
                if options.map_enum_key_as_number and self.is_enum(type_.key_type):
                    key = "number"
                value = self.ts_type(type_.value_type, level + 1)
                pad = INDENT * level
                return f"{{\n{pad}{INDENT}[key: {key}]: {value}\n{pad}}}"
            case ir.TypeKind.REF:
                return self.ref_name(type_.name)
        raise ValueError(f"Unexpected type kind: {type_.kind}")

    def ref_name(self, name: str) -> str:
        if name in WELL_KNOWN_TYPES:
            return WELL_KNOWN_TYPES[name]
        ref = self.lookup(name)
        if ref is not None:
            return ref.ts_name
        self.session.warn_once(
            f"unresolved:{self.document.idl_path}:{name}",
            "Cannot resolve type %s in %s, using any",
            name,
            self.document.idl_path,
        )
        return "any"


def render_comments(comments: list[ir.Comment], indent: str = "") -> list[str]:
    """
    Render comments as one JSDoc block.

    One line gives ``/** text */``; more lines give a starred block.
    """
    lines = [line.strip() for comment in comments for line in comment.lines()]
    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    if not lines:
        return []
    lines = [line.replace("*/", "*\\/") for line in lines]
    if len(lines) == 1:
        return [f"{indent}/** {lines[0]} */"]
    return [f"{indent}/**", *[f"{indent} * {line}".rstrip() for line in lines], f"{indent}*/"]


def js_value(value: Any) -> str:
    """Render a constant as a JavaScript literal."""
    match value:
        case ir.ConstRef():
            return value.name
        case bool():
            return "true" if value else "false"
        case None:
            return "null"
        case list():
            return "[" + ", ".join(js_value(v) for v in value) + "]"
        case dict():
            items = ", ".join(f"{json.dumps(str(k))}: {js_value(v)}" for k, v in value.items())
            return "{" + items + "}"
        case str():
            return json.dumps(value, ensure_ascii=False)
        case float() if value != value or value in (float("inf"), float("-inf")):
            return "NaN" if value != value else ("Infinity" if value > 0 else "-Infinity")
    return repr(value)


class DeclarationRenderer:
    """
    Renders the type declarations of one document.

    Args:
        scope: Name resolution for the document
        declaration_file: Render for a ``.d.ts`` file (consts become declarations)
    """

    def __init__(self, scope: ModuleScope, declaration_file: bool = False):
        self.scope = scope
        self.declaration_file = declaration_file

    @property
    def options(self):
        return self.scope.session.options

    def render_enum(self, enum: ir.EnumDefinition, name: str, indent: str = "") -> list[str]:
        lines = render_comments(enum.comments, indent)
        lines.append(f"{indent}export enum {name} {{")
        for member in enum.members:
            lines.extend(render_comments(member.comments, indent + INDENT))
            lines.append(f"{indent}{INDENT}{property_name(member.name)} = {member.value},")
        lines.append(f"{indent}}}")
        return lines

    def render_struct(self, struct: ir.StructDefinition, name: str, indent: str = "") -> list[str]:
        level = indent.count(INDENT) + 1
        lines = render_comments(struct.comments, indent)
        lines.append(f"{indent}export interface {name} {{")
        for field in struct.fields:
            lines.extend(render_comments(field.comments, indent + INDENT))
            type_ = self.scope.field_type(field, level)
            mark = "?" if field.is_optional else ""
            if field.is_optional and self.options.allow_null_for_optional:
                type_ = f"{type_} | null"
            lines.append(f"{indent}{INDENT}{property_name(field.name)}{mark}: {type_},")
        lines.append(f"{indent}}}")
        return lines

    def render_typedef(self, typedef: ir.TypedefDefinition, name: str, indent: str = "") -> list[str]:
        level = indent.count(INDENT)
        lines = render_comments(typedef.comments, indent)
        lines.append(f"{indent}export type {name} = {self.scope.ts_type(typedef.type, level)};")
        return lines

    def render_const(self, const: ir.ConstDefinition, name: str, indent: str = "") -> list[str]:
        lines = render_comments(const.comments, indent)
        if self.declaration_file:
            type_ = self.scope.ts_type(const.type, indent.count(INDENT))
            lines.append(f"{indent}export declare const {name}: {type_};")
        else:
            lines.append(f"{indent}export const {name} = {js_value(const.value)};")
        return lines

    def render_declaration(self, statement: ir.Statement, name: str, indent: str = "") -> list[str]:
        match statement:
            case ir.EnumDefinition():
                return self.render_enum(statement, name, indent)
            case ir.StructDefinition():
                return self.render_struct(statement, name, indent)
            case ir.TypedefDefinition():
                return self.render_typedef(statement, name, indent)
            case ir.ConstDefinition():
                return self.render_const(statement, name, indent)
        return []

    def render(self, render_service: Callable[[ir.ServiceDefinition], list[str]] | None = None) -> list[str]:
        """
        Render every statement in source order.

        Dotted (nested) declarations are collected into namespace blocks
        after the top-level ones.

        Args:
            render_service: Renders the API functions of a service; services
                are skipped when None
        """
        lines: list[str] = []
        namespaces: dict[str, list[str]] = {}

        for statement in self.scope.document.statements:
            if isinstance(statement, ir.ServiceDefinition):
                if render_service is not None:
                    lines.extend(render_service(statement))
                continue
            parent, _, short = statement.name.rpartition(".")
            if parent:
                block = namespaces.setdefault(parent, [])
                block.extend(self.render_declaration(statement, short, INDENT))
            else:
                lines.extend(self.render_declaration(statement, statement.name))

        for parent, block in namespaces.items():
            lines.append(f"export namespace {parent} {{")
            lines.extend(block)
            lines.append("}")
        return lines
