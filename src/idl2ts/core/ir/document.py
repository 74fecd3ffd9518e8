"""
Unified document model produced from either IDL dialect.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from .statements import (
    EnumDefinition,
    ServiceDefinition,
    Statement,
    StructDefinition,
    TypedefDefinition,
)


class NamespaceNode(BaseModel):
    """
    Nested namespace tree of a Protobuf file.

    The root node is the package; each nested message or enum is a child
    keyed by its simple name.
    """

    name: str
    nested: dict[str, NamespaceNode] = Field(default_factory=dict)

    def add_path(self, path: list[str]) -> None:
        node = self
        for part in path:
            node = node.nested.setdefault(part, NamespaceNode(name=part))


class Document(BaseModel):
    """
    A parsed IDL file.

    Attributes:
        idl_path: Absolute path of the file, or ``source`` for inline text
        dialect: ``thrift`` or ``proto``
        namespace: Thrift namespace or Protobuf package
        statements: Top-level declarations in source order
        includes: Include/import paths as written
        is_entry: True for configured entry files
        root: Nested namespace tree (Protobuf only)
    """

    idl_path: str
    dialect: Literal["thrift", "proto"]
    namespace: str | None = None
    statements: list[Statement] = Field(default_factory=list)
    includes: list[str] = Field(default_factory=list)
    is_entry: bool = False
    root: NamespaceNode | None = None

    @property
    def services(self) -> list[ServiceDefinition]:
        return [s for s in self.statements if isinstance(s, ServiceDefinition)]

    @property
    def structs(self) -> list[StructDefinition]:
        return [s for s in self.statements if isinstance(s, StructDefinition)]

    @property
    def enums(self) -> list[EnumDefinition]:
        return [s for s in self.statements if isinstance(s, EnumDefinition)]

    def find(self, name: str) -> Statement | None:
        """Find a top-level declaration by name."""
        for statement in self.statements:
            if statement.name == name:
                return statement
        return None

    def find_type(self, name: str) -> StructDefinition | EnumDefinition | TypedefDefinition | None:
        """Find a struct, enum or typedef by name."""
        found = self.find(name)
        if isinstance(found, (StructDefinition, EnumDefinition, TypedefDefinition)):
            return found
        return None
