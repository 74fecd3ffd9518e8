"""
Unification of dialect syntax trees into the shared IR.
"""

from .annotations import build_extension_config, is_js_conv, split_route_key
from .proto import unify_proto
from .thrift import unify_thrift

__all__ = [
    "build_extension_config",
    "is_js_conv",
    "split_route_key",
    "unify_proto",
    "unify_thrift",
]
