"""
Per-run state of a client generation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from .type_mapper import TypeMapper

if TYPE_CHECKING:
    from .options import Options

logger = logging.getLogger(__name__)


@dataclass
class GenerationSession:
    """
    Everything one ``gen_client`` call shares between its stages.

    Attributes:
        options: Resolved generation options
        type_mapper: Scalar type mapper, configured from ``options.i64_as``
        files: Output files (absolute path to content) to be written
        shown_hints: Keys of warnings already logged in this run
    """

    options: Options
    type_mapper: TypeMapper = field(default_factory=TypeMapper)
    files: dict[Path, str] = field(default_factory=dict)
    shown_hints: set[str] = field(default_factory=set)

    @classmethod
    def from_options(cls, options: Options) -> GenerationSession:
        return cls(options=options, type_mapper=TypeMapper(options.i64_as))

    def warn_once(self, key: str, message: str, *args: object) -> bool:
        """
        Log a warning the first time ``key`` is seen in this run.

        Returns:
            True if the warning was logged
        """
        if key in self.shown_hints:
            return False
        self.shown_hints.add(key)
        logger.warning(message, *args)
        return True
