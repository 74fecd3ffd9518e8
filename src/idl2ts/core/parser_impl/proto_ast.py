"""
Protobuf syntax tree.

Options are kept as ordered ``(name, value)`` pairs with parenthesised
extension names unwrapped and aggregate values flattened, so
``option (api_method).get = "/x"`` is stored as ``("api_method.get", "/x")``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .. import ir

Option = tuple[str, Any]


@dataclass
class ProtoNode:
    name: str
    line: int
    column: int
    comments: list[ir.Comment] = field(default_factory=list)
    options: list[Option] = field(default_factory=list)


@dataclass
class ProtoField(ProtoNode):
    """
    A message field.

    ``type`` is the scalar or message name as written; for map fields it
    is ``map`` and ``key_type``/``value_type`` are set.
    """

    type: str = ""
    number: int = 0
    label: str | None = None
    key_type: str | None = None
    value_type: str | None = None
    oneof: str | None = None


@dataclass
class ProtoEnumValue(ProtoNode):
    value: int = 0


@dataclass
class ProtoEnum(ProtoNode):
    values: list[ProtoEnumValue] = field(default_factory=list)


@dataclass
class ProtoMessage(ProtoNode):
    fields: list[ProtoField] = field(default_factory=list)
    messages: list[ProtoMessage] = field(default_factory=list)
    enums: list[ProtoEnum] = field(default_factory=list)


@dataclass
class ProtoRpc(ProtoNode):
    request_type: str = ""
    response_type: str = ""
    request_stream: bool = False
    response_stream: bool = False


@dataclass
class ProtoService(ProtoNode):
    rpcs: list[ProtoRpc] = field(default_factory=list)


ProtoDefinition = ProtoMessage | ProtoEnum | ProtoService


@dataclass
class ProtoDocument:
    """A parsed ``.proto`` file."""

    file: str
    syntax: str = "proto2"
    package: str | None = None
    imports: list[str] = field(default_factory=list)
    options: list[Option] = field(default_factory=list)
    definitions: list[ProtoDefinition] = field(default_factory=list)
