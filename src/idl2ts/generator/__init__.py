"""
TypeScript client generation.
"""

from .client import CorePlugin, GenerationResult, gen_client
from .options import ApiConfig, Options, load_api_config, load_config
from .session import GenerationSession
from .templates import ApiMeta, render_api
from .type_mapper import TypeMapper

__all__ = [
    "ApiConfig",
    "ApiMeta",
    "CorePlugin",
    "GenerationResult",
    "GenerationSession",
    "Options",
    "TypeMapper",
    "gen_client",
    "load_api_config",
    "load_config",
    "render_api",
]
