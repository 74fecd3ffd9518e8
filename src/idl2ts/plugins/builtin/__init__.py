"""
Built-in plugins.

Each plugin is a class with an ``apply(program)`` method; ``ApiConfig``
instantiates them by name (see ``generator.options.DEFAULT_PLUGINS``).
"""

from .auto_fix_duplicate_includes import AutoFixDuplicateIncludesPlugin
from .auto_fix_path import AutoFixPathPlugin
from .comment_format import CommentFormatPlugin
from .format import FormatPlugin
from .ignore_struct_field import IgnoreStructFieldPlugin
from .local_mock_config import LocalMockConfigPlugin
from .mock_transformer import MockTransformerPlugin
from .service_alias import ServiceAliasPlugin

__all__ = [
    "AutoFixDuplicateIncludesPlugin",
    "AutoFixPathPlugin",
    "CommentFormatPlugin",
    "FormatPlugin",
    "IgnoreStructFieldPlugin",
    "LocalMockConfigPlugin",
    "MockTransformerPlugin",
    "ServiceAliasPlugin",
]
