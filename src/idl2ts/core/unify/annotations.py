"""
Annotation normalization.

Thrift annotations and Protobuf options spell HTTP routes in several ways:

    (api.get = "/api/biz1")                        new style, thrift
    option (api.get) = "/api/biz1";                new style, proto
    option (api.uri) = "/x"; option (api.method) = "post";
    option (api_method).get = "/api/biz1";         old style
    option (pb_idl.api_method).post = "/api/biz1"; old style, full path
    (agw.uri = "/x", agw.method = "GET")           gateway style

All of them normalize to one ExtensionConfig.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from .. import ir

logger = logging.getLogger(__name__)

# Longest first so ``api.agw.get`` is not read as ``agw.get`` under ``api.``.
ROUTE_PREFIXES = (
    "pb_idl.api_method.",
    "api_method.",
    "api.agw.",
    "agw.",
    "api.",
)

HTTP_VERBS = ("get", "post", "put", "delete", "patch")
CONFIG_KEYS = ("uri", "method", "serializer", "group")

# Field level request mapping, never part of a route.
FIELD_MAPPING_KEYS = frozenset(
    {"path", "query", "body", "header", "cookie", "raw_body", "form", "none", "js_conv", "vd"}
)


def split_route_key(key: str) -> str | None:
    """
    Strip a recognized route prefix from an annotation key.

    Returns:
        The short key (``get``, ``uri``, ...) or None for unrelated keys
    """
    for prefix in ROUTE_PREFIXES:
        if key.startswith(prefix):
            short = key[len(prefix) :]
            return short or None
    return None


def build_extension_config(pairs: Iterable[tuple[str, Any]]) -> ir.ExtensionConfig | None:
    """
    Build the HTTP mapping of a function or service from its annotations.

    Precedence:
        - an explicit ``method`` wins over the verb of a verb key
        - an explicit ``uri`` wins over the value of a verb key
        - among several verb keys the first declared wins

    Args:
        pairs: Annotation/option ``(key, value)`` pairs in declaration order

    Returns:
        ExtensionConfig, or None when no key declares a route
    """
    verb: str | None = None
    verb_uri: str | None = None
    values: dict[str, str] = {}
    extra: dict[str, Any] = {}

    for key, value in pairs:
        short = split_route_key(key)
        if short is None:
            continue
        if short in HTTP_VERBS:
            if verb is None:
                verb, verb_uri = short, str(value)
            else:
                logger.debug("Ignoring %s, route verb already set to %s", key, verb)
        elif short in CONFIG_KEYS:
            values.setdefault(short, str(value))
        elif short not in FIELD_MAPPING_KEYS:
            extra.setdefault(short, value)

    if verb is None and "uri" not in values and "method" not in values:
        return None

    return ir.ExtensionConfig(
        method=values.get("method") or verb,
        uri=values.get("uri", verb_uri),
        serializer=values.get("serializer"),
        group=values.get("group"),
        extra=extra,
    )


def annotation_dict(pairs: Iterable[tuple[str, Any]]) -> dict[str, str]:
    """Flatten annotation pairs into a string map; the first occurrence wins."""
    result: dict[str, str] = {}
    for key, value in pairs:
        if isinstance(value, bool):
            value = "true" if value else "false"
        result.setdefault(key, str(value))
    return result


def is_js_conv(field: ir.FieldDefinition) -> bool:
    """True when ``js_conv`` (any route prefix) asks for 64-bit integers as strings."""
    return any(
        split_route_key(key) == "js_conv" and value.lower() != "false"
        for key, value in field.annotations.items()
    )
