"""
API call-site templates.

Each routed function becomes:

    export const GetPrompt = /*#__PURE__*/createAPI<GetPromptRequest, GetPromptResponse>({
      "url": "/api/prompt/v1/prompts/:prompt_id",
      "method": "GET",
      ...
    }, (req, option) => `/api/prompt/v1/prompts/${req.prompt_id}`);

Path parameters mapped to request fields read from ``req``; the others
come from ``option.pathParams`` with a configurable fallback provider, and
are added as a third type argument.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any

from ..core import ir
from ..core.unify.annotations import split_route_key
from .typescript import render_comments

# Only a whole path segment is a parameter; ``items:search`` is literal.
PATH_PARAM = re.compile(r"(?<=/):([A-Za-z_][A-Za-z0-9_]*)")

# Order of reqMapping keys in the emitted metadata.
REQUEST_LOCATIONS = ("path", "query", "body", "header", "cookie")


@dataclass
class ApiMeta:
    """
    Runtime metadata of one API function.

    Attributes:
        name: Exported constant name (the function name)
        url: Route, may contain ``:param`` segments
        method: Upper-cased HTTP method
        req_type: TypeScript request type
        res_type: TypeScript response type
        req_mapping: Request location to field names
        schema_root: Schema id of the declaring document
        service: Service alias
        extra: Other route keys (serializer, group, ...)
        comments: Comments of the function
    """

    name: str
    url: str
    method: str
    req_type: str
    res_type: str
    req_mapping: dict[str, list[str]] = field(default_factory=dict)
    schema_root: str = ""
    service: str = ""
    extra: dict[str, Any] = field(default_factory=dict)
    comments: list[ir.Comment] = field(default_factory=list)

    @property
    def path_params(self) -> list[str]:
        return path_params(self.url)

    @property
    def unmapped_path_params(self) -> list[str]:
        mapped = set(self.req_mapping.get("path", []))
        return [p for p in self.path_params if p not in mapped]

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "url": self.url,
            "method": self.method,
            "name": self.name,
            "reqType": self.req_type,
            "reqMapping": {k: self.req_mapping[k] for k in REQUEST_LOCATIONS if self.req_mapping.get(k)},
            "resType": self.res_type,
            "schemaRoot": self.schema_root,
            "service": self.service,
        }
        for key, value in self.extra.items():
            data.setdefault(key, value)
        return data


def path_params(url: str) -> list[str]:
    """Names of ``:param`` segments in order, without duplicates."""
    seen: list[str] = []
    for name in PATH_PARAM.findall(url):
        if name not in seen:
            seen.append(name)
    return seen


def _inline(value: Any) -> str:
    if isinstance(value, list):
        return "[" + ", ".join(_inline(v) for v in value) + "]"
    return json.dumps(value, ensure_ascii=False)


def render_meta(meta: dict[str, Any]) -> str:
    """
    Serialize metadata as an object literal.

    Nested objects are expanded one key per line; lists stay on one line.
    """
    items = []
    for key, value in meta.items():
        if isinstance(value, dict) and value:
            inner = ",\n".join(f"    {json.dumps(k)}: {_inline(v)}" for k, v in value.items())
            items.append(f"  {json.dumps(key)}: {{\n{inner}\n  }}")
        elif isinstance(value, dict):
            items.append(f"  {json.dumps(key)}: {{}}")
        else:
            items.append(f"  {json.dumps(key)}: {_inline(value)}")
    return "{\n" + ",\n".join(items) + "\n}"


def _escape_template(text: str) -> str:
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")


def render_url_builder(meta: ApiMeta, default_param_provider: str | None = None) -> str:
    """Render the ``(req, option) => `...``` builder for a route with path params."""
    mapped = set(meta.req_mapping.get("path", []))
    fallback = f"{default_param_provider}('{{name}}')" if default_param_provider else "''"

    parts: list[str] = []
    last = 0
    for match in PATH_PARAM.finditer(meta.url):
        parts.append(_escape_template(meta.url[last : match.start()]))
        name = match.group(1)
        if name in mapped:
            parts.append(f"${{req.{name}}}")
        else:
            parts.append(f"${{option?.pathParams?.{name} ?? {fallback.format(name=name)}}}")
        last = match.end()
    parts.append(_escape_template(meta.url[last:]))
    return "(req, option) => `" + "".join(parts) + "`"


def render_api(meta: ApiMeta, default_param_provider: str | None = None) -> str:
    """
    Render one ``createAPI`` declaration.

    Args:
        meta: API metadata
        default_param_provider: Function called for unmapped path params
            that the call site does not override; empty string when None

    Returns:
        TypeScript source, comments included
    """
    generics = [meta.req_type, meta.res_type]
    unmapped = meta.unmapped_path_params
    if unmapped:
        generics.append("{" + ", ".join(f"{p}: string | number" for p in unmapped) + "}")

    args = render_meta(meta.to_json())
    if meta.path_params:
        args += ", " + render_url_builder(meta, default_param_provider)

    lines = render_comments(meta.comments)
    lines.append(f"export const {meta.name} = /*#__PURE__*/createAPI<{', '.join(generics)}>({args});")
    return "\n".join(lines)


def request_location(field: ir.FieldDefinition, url_params: set[str], method: str) -> str:
    """
    Where a request field is sent.

    An explicit ``api.path``/``api.query``/``api.body``/``api.header``/
    ``api.cookie`` annotation wins. Otherwise a field named like a ``:param``
    of the url goes to the path, and the rest goes to the query string for
    GET and DELETE or to the body for every other method.
    """
    for key in field.annotations:
        short = split_route_key(key)
        if short in REQUEST_LOCATIONS:
            return short
    if field.name in url_params:
        return "path"
    if method in ("GET", "DELETE"):
        return "query"
    return "body"
