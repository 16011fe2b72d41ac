"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, jumpnet.toml only contains overrides.
An empty (or missing) jumpnet.toml is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- jumpnet.toml sections ---


class WorkspaceConfig(BaseModel):
    """[workspace] section."""

    model_config = {"frozen": True}

    # None -> name of the workspace root directory
    name: str | None = None


class StorageConfig(BaseModel):
    """[storage] section."""

    model_config = {"frozen": True}

    directory: str = ".jumpnet"
    save_delay_ms: int = Field(default=10_000, ge=0)
    save_timeout_s: float | None = Field(default=30.0, gt=0)


class TrackingConfig(BaseModel):
    """[tracking] section."""

    model_config = {"frozen": True}

    weight_increment: float = Field(default=1.0, gt=0, allow_inf_nan=False)


class RelatedConfig(BaseModel):
    """[related] section."""

    model_config = {"frozen": True}

    max_items: int = Field(default=10, ge=1)


class JumpNetConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    tracking: TrackingConfig = Field(default_factory=TrackingConfig)
    related: RelatedConfig = Field(default_factory=RelatedConfig)
