"""
Unified intermediate representation for Thrift and Protobuf documents.

Both dialect parsers are unified into these models; plugins and the client
generator only ever see this representation.
"""

from .comments import Comment, CommentValue
from .document import Document, NamespaceNode
from .extension import ExtensionConfig
from .location import SourceLocation
from .statements import (
    ConstDefinition,
    Declaration,
    EnumDefinition,
    EnumMember,
    FieldDefinition,
    FunctionDefinition,
    ServiceDefinition,
    Statement,
    StructDefinition,
    TypedefDefinition,
)
from .types import BASE_TYPES, CONTAINER_TYPES, ConstRef, FieldType, TypeKind

__all__ = [
    "BASE_TYPES",
    "CONTAINER_TYPES",
    "Comment",
    "CommentValue",
    "ConstDefinition",
    "ConstRef",
    "Declaration",
    "Document",
    "EnumDefinition",
    "EnumMember",
    "ExtensionConfig",
    "FieldDefinition",
    "FieldType",
    "FunctionDefinition",
    "NamespaceNode",
    "ServiceDefinition",
    "SourceLocation",
    "Statement",
    "StructDefinition",
    "TypeKind",
    "TypedefDefinition",
]
