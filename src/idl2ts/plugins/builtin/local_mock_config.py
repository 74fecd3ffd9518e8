"""
Maintain the local mock selection file.

``api.dev.local.json`` lists every generated API method under ``methods``
and the methods a developer chose to mock under ``mock``::

    {
      "mock": ["GetPrompt"],
      "methods": ["CreatePrompt", "GetPrompt", "ListPrompt"]
    }

``methods`` is regenerated on every run; ``mock`` is user data and is kept.
"""

import json
import logging
from pathlib import Path
from typing import Any

from ...core.errors import ConfigError
from ...generator.options import load_config
from ...generator.session import GenerationSession
from ..contexts import GEN_FILE_AST, GenFileAstContext
from ..program import Program, after

logger = logging.getLogger(__name__)


class LocalMockConfigPlugin:
    def __init__(self, path: Path):
        self.path = path

    def apply(self, program: Program) -> None:
        program.register(after(GEN_FILE_AST), self.gen_file_ast)

    def load_existing(self, session: GenerationSession) -> dict[str, Any]:
        """The file as generated earlier in this run, else as found on disk."""
        if self.path in session.files:
            return json.loads(session.files[self.path])
        if not self.path.exists():
            return {"mock": [], "methods": []}
        try:
            data = load_config(self.path)
        except ConfigError as e:
            session.warn_once(f"local-mock-config:{self.path}", "Ignoring local mock config: %s", e)
            return {"mock": [], "methods": []}
        # Methods from a previous run may be stale.
        return {"mock": data.get("mock", []), "methods": []}

    def gen_file_ast(self, ctx: GenFileAstContext) -> GenFileAstContext:
        existing = self.load_existing(ctx.session)
        mock = existing.get("mock")
        if not isinstance(mock, list):
            mock = []
        methods = set(existing.get("methods", [])) | {meta.name for meta in ctx.apis}
        data = {"mock": mock, "methods": sorted(methods)}
        ctx.files[self.path] = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
        return ctx
