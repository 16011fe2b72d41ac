"""JumpNetSettings: one frozen object for everything configurable.

Later sources lose to earlier ones:

1. keyword arguments (the CLI flags Click parsed)
2. ``JUMPNET_*`` environment variables, ``__`` between section and key
   (``JUMPNET_STORAGE__SAVE_DELAY_MS=500``)
3. ``jumpnet.toml``
4. defaults on the section models

The TOML file is parsed once, up front in :meth:`JumpNetSettings.from_cli`,
so a syntax error is reported before pydantic sees anything. The parsed
tables reach ``settings_customise_sources`` through a context variable,
since pydantic-settings gives that hook no way to receive arguments.
"""

from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from jumpnet.config.discovery import find_config, find_workspace_root, read_toml
from jumpnet.config.models import RelatedConfig, StorageConfig, TrackingConfig, WorkspaceConfig

_file_tables: ContextVar[dict[str, Any]] = ContextVar("jumpnet_file_tables", default={})


class _FileTables(PydanticBaseSettingsSource):
    """Hands already-parsed ``jumpnet.toml`` tables to pydantic."""

    def __init__(self, settings_cls: type[BaseSettings], tables: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._tables = tables

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return self._tables.get(field_name), field_name, field_name in self._tables

    def __call__(self) -> dict[str, Any]:
        return dict(self._tables)


class JumpNetSettings(BaseSettings):
    """Settings for one jumpnet invocation.

    Attributes:
        workspace_root: Directory file paths are relative to and the store
            is named after (``--workspace``, else the directory holding
            ``jumpnet.toml``, else the nearest VCS root).
        config_path: ``jumpnet.toml`` in effect, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "JUMPNET_",
        "env_nested_delimiter": "__",
    }

    workspace_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # Output and logging switches; only ever set from the command line or env.
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    tracking: TrackingConfig = Field(default_factory=TrackingConfig)
    related: RelatedConfig = Field(default_factory=RelatedConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # No dotenv or secrets directory.
        return init_settings, env_settings, _FileTables(settings_cls, _file_tables.get())

    @property
    def workspace_name(self) -> str:
        """Configured workspace name, else the workspace root's directory name."""
        return self.workspace.name or self.workspace_root.resolve().name

    @property
    def storage_dir(self) -> Path:
        """Storage directory; relative paths are taken from the workspace root."""
        directory = Path(self.storage.directory).expanduser()
        if directory.is_absolute():
            return directory
        return self.workspace_root / directory

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        workspace_root: Path | None = None,
        **cli_flags: Any,
    ) -> JumpNetSettings:
        """Settings for a CLI run rooted at *workspace_root*.

        An explicit *config_path* that does not exist is ignored rather than
        reported, so ``-c`` can point at an optional per-user file. Without
        *config_path* the nearest ``jumpnet.toml`` above the workspace (or
        CWD) is used. Without *workspace_root* the config file's directory
        is the workspace, and failing that the nearest marked ancestor of CWD.
        """
        if config_path:
            explicit = Path(config_path)
            toml_path = explicit if explicit.is_file() else None
        else:
            toml_path = find_config(workspace_root)

        if workspace_root is None:
            workspace_root = toml_path.resolve().parent if toml_path else find_workspace_root()

        token = _file_tables.set(read_toml(toml_path) if toml_path else {})
        try:
            return cls(workspace_root=workspace_root, config_path=toml_path, **cli_flags)
        finally:
            _file_tables.reset(token)
