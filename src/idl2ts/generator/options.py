"""
Generation options and project configuration.

The project config is a TOML file with one ``[[api]]`` table per API
package:

    [[api]]
    idl_root = "idl"
    output = "src/api/idl"
    common_code_path = "src/api/config"
    entries = { promptManage = "prompt/coze.loop.prompt.manage.thrift" }
    plugins = ["auto_fix_path", "comment_format", "local_mock_config"]
    formatter = "npx prettier --stdin-filepath {file}"
    aggregation_export = "index.ts"

Auxiliary configs (local mock selection, formatter options) are JSON and
always go through ``load_config``.
"""

import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..core.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "idl2ts.toml"
DEFAULT_LOCAL_MOCK_CONFIG = "api.dev.local.json"

# Framework envelope fields dropped by ignore_struct_field unless configured.
DEFAULT_IGNORED_FIELDS = ("Base", "BaseResp")

# Applied in this order when ``plugins`` is not set.
DEFAULT_PLUGINS = (
    "auto_fix_path",
    "auto_fix_duplicate_includes",
    "service_alias",
    "comment_format",
    "ignore_struct_field",
    "mock_transformer",
    "format",
)


class Options(BaseModel):
    """
    Options of one ``gen_client`` run.

    Relative ``entries`` are resolved against ``idl_root``.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    entries: list[Path]
    idl_root: Path
    output_dir: Path
    plugins: list[Any] = Field(default_factory=list)
    allow_null_for_optional: bool = False
    map_enum_key_as_number: bool = False
    gen_schema: bool = False
    gen_mock: bool = False
    gen_client: bool = True
    common_code_path: Path | None = None
    patch_types_output: Path | None = None
    i64_as: Literal["number", "string"] = "number"
    entry_names: dict[str, Path] = Field(default_factory=dict)
    default_path_param_provider: str | None = None
    aggregation_export: str | None = None
    revise_tail_comment: bool = True
    seed: int = 0

    def resolve_entry(self, entry: Path) -> Path:
        return entry if entry.is_absolute() else self.idl_root / entry


class ApiConfig(BaseModel):
    """One ``[[api]]`` table of the project config."""

    idl_root: str
    entries: dict[str, str]
    common_code_path: str
    output: str
    plugins: list[str] | None = None
    formatter: str | None = None
    formatter_config: str | None = None
    aggregation_export: str | None = None
    # Accepted for compatibility; fetching IDL from remote repositories is not supported.
    idl_fetch_config: dict[str, Any] | None = None

    gen_client: bool = True
    gen_mock: bool = False
    gen_schema: bool = False
    allow_null_for_optional: bool = False
    map_enum_key_as_number: bool = False
    i64_as: Literal["number", "string"] = "number"
    patch_types_output: str | None = None
    default_path_param_provider: str | None = None
    revise_tail_comment: bool = True
    local_mock_config: str | None = None
    service_alias: dict[str, str] = Field(default_factory=dict)
    ignore_fields: list[str] = Field(default_factory=lambda: list(DEFAULT_IGNORED_FIELDS))
    seed: int = 0

    def to_options(self, project_root: Path) -> Options:
        """
        Resolve paths against ``project_root`` and build the plugin list.

        Raises:
            ConfigError: If ``plugins`` names an unknown plugin
        """
        idl_root = (project_root / self.idl_root).resolve()
        names = list(DEFAULT_PLUGINS if self.plugins is None else self.plugins)
        if self.local_mock_config and "local_mock_config" not in names:
            names.append("local_mock_config")

        plugins = [p for p in (self._build_plugin(n, project_root) for n in names) if p is not None]

        return Options(
            entries=[Path(p) for p in self.entries.values()],
            entry_names={name: Path(p) for name, p in self.entries.items()},
            idl_root=idl_root,
            output_dir=(project_root / self.output).resolve(),
            plugins=plugins,
            allow_null_for_optional=self.allow_null_for_optional,
            map_enum_key_as_number=self.map_enum_key_as_number,
            gen_schema=self.gen_schema,
            gen_mock=self.gen_mock,
            gen_client=self.gen_client,
            common_code_path=(project_root / self.common_code_path).resolve(),
            patch_types_output=(
                (project_root / self.patch_types_output).resolve()
                if self.patch_types_output
                else None
            ),
            i64_as=self.i64_as,
            default_path_param_provider=self.default_path_param_provider,
            aggregation_export=self.aggregation_export,
            revise_tail_comment=self.revise_tail_comment,
            seed=self.seed,
        )

    def _build_plugin(self, name: str, project_root: Path) -> Any:
        """Instantiate a built-in plugin by name; None when not applicable."""
        from ..plugins import builtin

        match name:
            case "auto_fix_path":
                return builtin.AutoFixPathPlugin()
            case "auto_fix_duplicate_includes":
                return builtin.AutoFixDuplicateIncludesPlugin()
            case "service_alias":
                return builtin.ServiceAliasPlugin(self.service_alias)
            case "comment_format":
                return builtin.CommentFormatPlugin()
            case "ignore_struct_field":
                return builtin.IgnoreStructFieldPlugin(field_names=self.ignore_fields)
            case "mock_transformer":
                return builtin.MockTransformerPlugin(seed=self.seed) if self.gen_mock else None
            case "format":
                if not self.formatter:
                    return None
                config_path = project_root / self.formatter_config if self.formatter_config else None
                return builtin.FormatPlugin(self.formatter, config_path=config_path)
            case "local_mock_config":
                path = project_root / (self.local_mock_config or DEFAULT_LOCAL_MOCK_CONFIG)
                return builtin.LocalMockConfigPlugin(path)
        raise ConfigError(f"Unknown plugin: {name}")


def load_api_config(path: Path) -> list[ApiConfig]:
    """
    Load the ``[[api]]`` tables of a project config.

    Args:
        path: Path to ``idl2ts.toml``

    Returns:
        One ApiConfig per table

    Raises:
        ConfigError: If the file is missing, not TOML, or a table is invalid
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    tables = data.get("api", [])
    if isinstance(tables, dict):
        tables = [tables]
    if not tables:
        raise ConfigError(f"No [[api]] table in {path}")

    configs = []
    for index, table in enumerate(tables):
        try:
            configs.append(ApiConfig.model_validate(table))
        except ValidationError as e:
            raise ConfigError(f"Invalid [[api]] table #{index + 1} in {path}: {e}") from e
    return configs


def load_config(path: Path) -> dict[str, Any]:
    """
    Load a JSON config file fresh from disk.

    Nothing is cached; every call re-reads the file.

    Raises:
        ConfigError: If the file is missing or not a JSON object
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must contain a JSON object")
    return data
