"""
Declaration statements of the unified IR.

``Statement`` is a closed union discriminated by ``kind``; consumers use
``match`` on the concrete classes instead of runtime predicates.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

from .comments import Comment
from .extension import ExtensionConfig
from .location import SourceLocation
from .types import FieldType


class Declaration(BaseModel):
    """Common attributes of every named declaration."""

    name: str
    comments: list[Comment] = Field(default_factory=list)
    annotations: dict[str, str] = Field(default_factory=dict)
    loc: SourceLocation | None = None


class FieldDefinition(Declaration):
    """
    A struct field or function parameter.

    Attributes:
        type: Declared type
        field_id: Numeric id (Thrift field id, Protobuf field number)
        requiredness: ``required``, ``optional`` or ``default``
        default_value: Literal default, if declared
    """

    kind: Literal["field"] = "field"
    type: FieldType
    field_id: int | None = None
    requiredness: Literal["required", "optional", "default"] = "default"
    default_value: Any = None

    @property
    def is_optional(self) -> bool:
        return self.requiredness == "optional"


class FunctionDefinition(Declaration):
    """A service method (Thrift function, Protobuf rpc)."""

    kind: Literal["function"] = "function"
    params: list[FieldDefinition] = Field(default_factory=list)
    return_type: FieldType
    throws: list[FieldDefinition] = Field(default_factory=list)
    oneway: bool = False
    extension_config: ExtensionConfig | None = None


class ServiceDefinition(Declaration):
    """A service with its functions."""

    kind: Literal["service"] = "service"
    functions: list[FunctionDefinition] = Field(default_factory=list)
    extends: str | None = None
    alias: str | None = None
    extension_config: ExtensionConfig | None = None


class StructDefinition(Declaration):
    """A struct, union, exception or message."""

    kind: Literal["struct"] = "struct"
    struct_type: Literal["struct", "union", "exception", "message"] = "struct"
    fields: list[FieldDefinition] = Field(default_factory=list)


class EnumMember(Declaration):
    """A single enum value."""

    kind: Literal["enum_member"] = "enum_member"
    value: int


class EnumDefinition(Declaration):
    """An enum and its members."""

    kind: Literal["enum"] = "enum"
    members: list[EnumMember] = Field(default_factory=list)


class TypedefDefinition(Declaration):
    """A type alias."""

    kind: Literal["typedef"] = "typedef"
    type: FieldType


class ConstDefinition(Declaration):
    """A named constant."""

    kind: Literal["const"] = "const"
    type: FieldType
    value: Any = None


Statement = Annotated[
    ServiceDefinition
    | FunctionDefinition
    | StructDefinition
    | FieldDefinition
    | EnumDefinition
    | EnumMember
    | TypedefDefinition
    | ConstDefinition,
    Field(discriminator="kind"),
]
