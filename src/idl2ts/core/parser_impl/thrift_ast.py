"""
Thrift syntax tree.

Plain dataclasses mirroring the Thrift grammar. Annotations keep their
declaration order as ``(key, value)`` pairs; the unifier decides which of
them carry meaning.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .. import ir

Annotation = tuple[str, str]


@dataclass
class ThriftType:
    """A type reference: base keyword, container or named type."""

    name: str
    key_type: ThriftType | None = None
    value_type: ThriftType | None = None
    annotations: list[Annotation] = field(default_factory=list)


@dataclass
class ThriftNode:
    name: str
    line: int
    column: int
    comments: list[ir.Comment] = field(default_factory=list)
    annotations: list[Annotation] = field(default_factory=list)


@dataclass
class ThriftField(ThriftNode):
    type: ThriftType = field(default_factory=lambda: ThriftType("void"))
    field_id: int | None = None
    requiredness: str | None = None
    default_value: Any = None


@dataclass
class ThriftFunction(ThriftNode):
    return_type: ThriftType = field(default_factory=lambda: ThriftType("void"))
    params: list[ThriftField] = field(default_factory=list)
    throws: list[ThriftField] = field(default_factory=list)
    oneway: bool = False


@dataclass
class ThriftService(ThriftNode):
    extends: str | None = None
    functions: list[ThriftFunction] = field(default_factory=list)


@dataclass
class ThriftStruct(ThriftNode):
    struct_type: str = "struct"
    fields: list[ThriftField] = field(default_factory=list)


@dataclass
class ThriftEnumValue(ThriftNode):
    value: int | None = None


@dataclass
class ThriftEnum(ThriftNode):
    values: list[ThriftEnumValue] = field(default_factory=list)


@dataclass
class ThriftTypedef(ThriftNode):
    type: ThriftType = field(default_factory=lambda: ThriftType("void"))


@dataclass
class ThriftConst(ThriftNode):
    type: ThriftType = field(default_factory=lambda: ThriftType("void"))
    value: Any = None


ThriftDefinition = (
    ThriftService | ThriftStruct | ThriftEnum | ThriftTypedef | ThriftConst
)


@dataclass
class ThriftDocument:
    """A parsed ``.thrift`` file."""

    file: str
    namespaces: dict[str, str] = field(default_factory=dict)
    includes: list[str] = field(default_factory=list)
    definitions: list[ThriftDefinition] = field(default_factory=list)
