"""
Error types for IDL parsing, resolution, plugins and code generation.
"""

from dataclasses import dataclass
from typing import Optional

# Label used in locations when the IDL was passed as inline text.
INLINE_SOURCE = "source"


class Idl2TsError(Exception):
    """Base exception for all idl2ts errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.message}({self.context.format()})"
        return self.message


class ParseError(Idl2TsError):
    """
    Raised when an IDL token stream cannot be parsed.

    Examples:
    - Illegal characters or tokens
    - Unexpected end of input
    - Unterminated strings or block comments
    """

    pass


class ResolutionError(Idl2TsError):
    """
    Raised when an entry or include path cannot be resolved to a file.
    """

    pass


class ConfigError(Idl2TsError):
    """
    Raised when a configuration file is missing or malformed.

    The project config is fatal; local mock and formatter configs are
    recovered by the caller with a default value.
    """

    pass


class PluginError(Idl2TsError):
    """
    Raised by the plugin host for misuse of the hook bus.

    Exceptions raised inside hook handlers are not wrapped.
    """

    pass


class UnregisteredHookError(PluginError):
    """Raised when a hook is triggered with no handler in any phase."""

    pass


class UnknownTypeError(Idl2TsError):
    """Raised when the type mapper meets an unrecognized IDL keyword."""

    pass


class FormatterError(Idl2TsError):
    """Raised when the configured formatter command fails."""

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        file: Path of the source file, or ``source`` for inline text
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    file: str
    line: int
    column: int

    def format(self) -> str:
        """
        Format the location.

        Returns:
            Formatted string like: "idl/base.thrift:10:5"
        """
        return f"{self.file}:{self.line}:{self.column}"


def make_parse_error(
    message: str,
    file: str,
    line: int,
    column: int,
) -> ParseError:
    """
    Helper to create a ParseError with context.

    Args:
        message: Error description
        file: Source file path or ``source``
        line: Line number (1-indexed)
        column: Column number (1-indexed)

    Returns:
        ParseError with context attached
    """
    context = ErrorContext(file=file, line=line, column=column)
    return ParseError(message, context)
