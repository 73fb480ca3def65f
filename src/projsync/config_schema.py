"""Unified configuration schema for projsync.

Defines Pydantic models for the config file, with dedicated sections for
mirror settings and the vault served by the MCP host.

Usage:
    from projsync.config_schema import UnifiedConfig, build_config

    raw = load_hierarchical_config()
    unified = build_config(raw)
    settings = unified.settings
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class MirrorSettings(BaseModel):
    """Symlink policy applied while validating and mirroring.

    Instances are immutable snapshots: a sync run reads one snapshot up
    front and never observes later changes.  The camelCase aliases accept
    settings files written by the Obsidian plugin.
    """

    follow_symlinks_dir: bool = Field(
        default=False,
        alias="followSymlinksDir",
        description="Follow symbolic links that point at directories",
    )
    follow_symlinks_file: bool = Field(
        default=False,
        alias="followSymlinksFile",
        description="Follow symbolic links that point at files",
    )

    model_config = {"frozen": True, "populate_by_name": True}


class VaultConfig(BaseModel):
    """Vault served by the MCP host."""

    root: str | None = Field(
        default=None, description="Vault root directory"
    )

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Top-level unified config
# ---------------------------------------------------------------------------


class UnifiedConfig(BaseModel):
    """Top-level unified configuration.

    Every section has defaults, so ``UnifiedConfig()`` is always valid.
    """

    settings: MirrorSettings = Field(default_factory=MirrorSettings)
    vault: VaultConfig = Field(default_factory=VaultConfig)

    model_config = {"frozen": True}


def build_config(raw_data: dict) -> UnifiedConfig:
    """Construct a ``UnifiedConfig`` from the merged config dict.

    Missing sections get defaults; ``None`` sections (an empty YAML key)
    are treated as missing.

    Args:
        raw_data: Merged configuration dictionary.

    Returns:
        Validated ``UnifiedConfig`` instance.
    """
    if not raw_data:
        return UnifiedConfig()

    sections = {k: v for k, v in raw_data.items() if v is not None}
    return UnifiedConfig(**sections)
