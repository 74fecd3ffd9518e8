"""
IDL scalar keyword to TypeScript type mapping.
"""

from typing import Literal

from ..core.errors import UnknownTypeError

I64Target = Literal["number", "string"]

SCALAR_TYPES: dict[str, str] = {
    "byte": "number",
    "i8": "number",
    "i16": "number",
    "i32": "number",
    "double": "number",
    "string": "string",
    "binary": "object",
    "bool": "boolean",
}


class TypeMapper:
    """
    Maps IDL scalar keywords to TypeScript types.

    One mapper lives on each GenerationSession, so ``set_i64`` affects the
    whole run without leaking into other runs.
    """

    def __init__(self, i64: I64Target = "number"):
        self.i64: I64Target = i64

    def set_i64(self, target: I64Target) -> None:
        """Override the TypeScript type used for 64-bit integers."""
        if target not in ("number", "string"):
            raise ValueError(f"i64 can map to 'number' or 'string', not {target!r}")
        self.i64 = target

    def map(self, idl_type: str) -> str:
        """
        Map a scalar keyword.

        Raises:
            UnknownTypeError: For anything that is not a scalar keyword
        """
        if idl_type == "i64":
            return self.i64
        try:
            return SCALAR_TYPES[idl_type]
        except KeyError:
            raise UnknownTypeError(f"UnKnown type: {idl_type}") from None
