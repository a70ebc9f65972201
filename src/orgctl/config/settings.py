"""OrgSettings — one frozen object for CLI flags, env vars and ``orgctl.toml``.

Sources, strongest first:

1. keyword arguments (the CLI's global flags, test overrides)
2. ``ORGCTL_*`` environment variables, ``__`` between section and key
   (``ORGCTL_HIERARCHY__DISCARD_ORPHANS=false``)
3. the ``orgctl.toml`` in effect
4. defaults baked into :mod:`orgctl.config.models`
"""

from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from orgctl.config.discovery import find_config, read_toml
from orgctl.config.models import DatabaseConfig, HierarchyConfig, McpConfig

# The TOML file chosen by from_cli(), visible to settings_customise_sources.
_active_toml: ContextVar[Path | None] = ContextVar("_active_toml", default=None)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Top-level tables of one TOML file, handed to pydantic as-is."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data = read_toml(toml_path) if toml_path is not None else {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return dict(self._data)


class OrgSettings(BaseSettings):
    """Resolved configuration for one CLI invocation or MCP server.

    Attributes:
        root: Directory relative paths resolve against: the folder holding
            ``orgctl.toml``, else the CWD.
        config_path: The TOML file in effect, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "ORGCTL_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # Global CLI flags
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    hierarchy: HierarchyConfig = Field(default_factory=HierarchyConfig)
    mcp: McpConfig = Field(default_factory=McpConfig)

    @property
    def db_path(self) -> Path:
        """Absolute database file path."""
        path = Path(self.database.path)
        return path if path.is_absolute() else self.root / path

    @property
    def db_url(self) -> str:
        return f"sqlite:///{self.db_path}"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, _active_toml.get()),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        **overrides: Any,
    ) -> OrgSettings:
        """Build settings the way the CLI does.

        An explicit *config_path* must exist. Without one, ``orgctl.toml``
        is discovered from *root* (or the CWD) upward. *root* defaults to
        the directory holding the config file.
        """
        toml_path: Path | None
        if config_path:
            toml_path = Path(config_path)
            if not toml_path.is_file():
                msg = f"Config file not found: {config_path}"
                raise click.ClickException(msg)
        else:
            toml_path = find_config(root)

        if root is None:
            root = toml_path.parent if toml_path else Path.cwd()

        token = _active_toml.set(toml_path)
        try:
            return cls(root=root, config_path=toml_path, **overrides)
        finally:
            _active_toml.reset(token)
