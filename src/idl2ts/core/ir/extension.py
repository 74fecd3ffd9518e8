"""
HTTP mapping extracted from IDL annotations.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ExtensionConfig(BaseModel):
    """
    Normalized HTTP route metadata of a function or service.

    Attributes:
        method: Upper-cased HTTP method, None when only a URI was declared
        uri: Route path, may contain ``:param`` segments
        serializer: Body serializer (json, form, urlencoded, ...)
        group: Logical API group
        extra: Any other keys declared under a recognized prefix
    """

    model_config = ConfigDict(validate_assignment=True)

    method: str | None = None
    uri: str | None = None
    serializer: str | None = None
    group: str | None = None
    extra: dict[str, Any] = Field(default_factory=dict)

    @field_validator("method")
    @classmethod
    def upper_method(cls, v: str | None) -> str | None:
        return v.upper() if v else v

    def as_dict(self) -> dict[str, Any]:
        """Flat view with ``extra`` merged in and unset keys dropped."""
        data: dict[str, Any] = dict(self.extra)
        for key in ("method", "uri", "serializer", "group"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data
