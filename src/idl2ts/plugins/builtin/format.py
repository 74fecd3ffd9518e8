"""
Run generated files through an external formatter.

The command is split with ``shlex``; ``{file}`` is replaced by the output
path and the content is piped on stdin, e.g.::

    formatter = "npx prettier --stdin-filepath {file}"

Options from the formatter config (JSON) are appended as ``--kebab-case``
flags: ``{"printWidth": 100, "semi": false}`` gives
``--print-width=100 --no-semi``.
"""

import logging
import re
import shlex
import subprocess
from pathlib import Path
from typing import Any

from ...core.errors import ConfigError, FormatterError
from ...generator.options import load_config
from ...generator.session import GenerationSession
from ..contexts import WRITE_FILE, WriteFileContext
from ..program import Program, on

logger = logging.getLogger(__name__)

DEFAULT_SUFFIXES = (".ts", ".js")


def option_flags(options: dict[str, Any]) -> list[str]:
    """Render formatter options as command-line flags."""
    flags = []
    for key, value in options.items():
        name = re.sub(r"(?<!^)(?=[A-Z])", "-", key).lower()
        if value is True:
            flags.append(f"--{name}")
        elif value is False:
            flags.append(f"--no-{name}")
        elif value is not None:
            flags.append(f"--{name}={value}")
    return flags


class FormatPlugin:
    """
    Format generated files on WRITE_FILE.

    Args:
        command: Formatter command line; ``{file}`` is the output path
        config_path: Optional JSON file with formatter options
        suffixes: Only files with these suffixes are formatted
    """

    def __init__(
        self,
        command: str,
        config_path: Path | None = None,
        suffixes: tuple[str, ...] = DEFAULT_SUFFIXES,
    ):
        self.command = command
        self.config_path = config_path
        self.suffixes = suffixes

    def apply(self, program: Program) -> None:
        program.register(on(WRITE_FILE), self.write_file)

    def load_options(self, session: GenerationSession) -> dict[str, Any]:
        """Formatter options; ``{}`` (with one warning per run) when unreadable."""
        if self.config_path is None:
            return {}
        try:
            return load_config(self.config_path)
        except ConfigError as e:
            session.warn_once(f"formatter-config:{self.config_path}", "Ignoring formatter config: %s", e)
            return {}

    def build_command(self, filename: Path, options: dict[str, Any]) -> list[str]:
        args = [part.replace("{file}", str(filename)) for part in shlex.split(self.command)]
        return args + option_flags(options)

    def write_file(self, ctx: WriteFileContext) -> WriteFileContext:
        if ctx.filename.suffix not in self.suffixes:
            return ctx
        args = self.build_command(ctx.filename, self.load_options(ctx.session))
        logger.debug("Formatting %s with %s", ctx.filename, args[0])
        try:
            completed = subprocess.run(args, input=ctx.content, capture_output=True, text=True)
        except OSError as e:
            raise FormatterError(f"Cannot run formatter {args[0]!r}: {e}") from e
        if completed.returncode != 0:
            raise FormatterError(
                f"Formatter exited with {completed.returncode} on {ctx.filename}: "
                f"{completed.stderr.strip()}"
            )
        ctx.content = completed.stdout
        return ctx
