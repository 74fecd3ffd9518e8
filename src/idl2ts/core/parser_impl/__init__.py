"""
Dialect parsers for Thrift and Protobuf.

Each parser produces its own syntax tree; ``core.unify`` turns either tree
into the shared ``ir.Document``.

Usage:
    from idl2ts.core.parser_impl import parse_thrift

    ast = parse_thrift(text, "idl/base.thrift")
"""

from .base import BaseParser, group_comments
from .proto import ProtoParser, parse_proto
from .proto_ast import ProtoDocument
from .thrift import ThriftParser, parse_thrift
from .thrift_ast import ThriftDocument

__all__ = [
    "BaseParser",
    "ProtoDocument",
    "ProtoParser",
    "ThriftDocument",
    "ThriftParser",
    "group_comments",
    "parse_proto",
    "parse_thrift",
]
