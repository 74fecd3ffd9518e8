"""
Field type definitions for the unified IR.

Scalar keywords follow the Thrift vocabulary; Protobuf scalars are mapped
onto it during unification.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

BASE_TYPES = frozenset(
    {"byte", "i8", "i16", "i32", "i64", "double", "binary", "string", "bool"}
)
CONTAINER_TYPES = frozenset({"list", "set", "map"})


class TypeKind(str, Enum):
    """Kinds of field types."""

    BASE = "base"
    LIST = "list"
    SET = "set"
    MAP = "map"
    REF = "ref"
    VOID = "void"


class FieldType(BaseModel):
    """
    A field, parameter or return type.

    Examples:
        - i64: FieldType(kind=BASE, name="i64")
        - list<string>: FieldType(kind=LIST, name="list", value_type=<string>)
        - map<string,i32>: FieldType(kind=MAP, name="map", key_type=..., value_type=...)
        - base.BaseResp: FieldType(kind=REF, name="base.BaseResp")
    """

    kind: TypeKind
    name: str
    key_type: FieldType | None = None
    value_type: FieldType | None = None

    @classmethod
    def base(cls, name: str) -> FieldType:
        return cls(kind=TypeKind.BASE, name=name)

    @classmethod
    def ref(cls, name: str) -> FieldType:
        return cls(kind=TypeKind.REF, name=name)

    @classmethod
    def void(cls) -> FieldType:
        return cls(kind=TypeKind.VOID, name="void")

    @classmethod
    def list_of(cls, value_type: FieldType) -> FieldType:
        return cls(kind=TypeKind.LIST, name="list", value_type=value_type)

    @classmethod
    def set_of(cls, value_type: FieldType) -> FieldType:
        return cls(kind=TypeKind.SET, name="set", value_type=value_type)

    @classmethod
    def map_of(cls, key_type: FieldType, value_type: FieldType) -> FieldType:
        return cls(kind=TypeKind.MAP, name="map", key_type=key_type, value_type=value_type)

    @property
    def is_container(self) -> bool:
        return self.kind in (TypeKind.LIST, TypeKind.SET, TypeKind.MAP)

    def __str__(self) -> str:
        if self.kind == TypeKind.MAP:
            return f"map<{self.key_type},{self.value_type}>"
        if self.kind in (TypeKind.LIST, TypeKind.SET):
            return f"{self.name}<{self.value_type}>"
        return self.name


class ConstRef(BaseModel):
    """A constant value that refers to another declaration (``Status.OK``)."""

    name: str

    def __str__(self) -> str:
        return self.name
