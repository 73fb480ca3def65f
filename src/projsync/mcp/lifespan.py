"""Lifespan management for MCP server startup and shutdown."""

import logging
import os
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from ..config import SettingsStore, load_settings
from ..config_loader import (
    CONFIG_ENV_VAR,
    discover_config_files,
    load_hierarchical_config,
)
from ..config_schema import build_config
from .context import HostContext

logger = logging.getLogger(__name__)


def _stderr_print(msg: str) -> None:
    """Print message to stderr for user feedback (safe in MCP mode)."""
    print(msg, file=sys.stderr, flush=True)


@asynccontextmanager
async def server_lifespan(
    config_overrides: dict[str, Any] | None = None,
) -> AsyncIterator[dict[str, Any]]:
    """
    Manage server startup and shutdown lifecycle.

    On startup:
    - Load .env file (so values are available for env var lookups and YAML interpolation)
    - Load YAML config files if present
    - Resolve settings: CLI > env vars > .env > YAML > defaults
    - Resolve the vault root: CLI ``vault`` > ``PROJSYNC_VAULT`` > ``vault.root``
    - Fail fast if the vault root is not a directory

    Args:
        config_overrides: Optional dict with values from CLI
            (vault, config, follow_symlinks_dir, follow_symlinks_file)

    Yields:
        Dict with 'context' key containing the initialized HostContext

    Raises:
        RuntimeError: If configuration is invalid or the vault is missing.
    """
    logger.info("MCP server starting...")
    _stderr_print("projsync MCP server starting...")

    overrides = config_overrides or {}
    try:
        load_dotenv()

        config_path: Path | None = None
        if overrides.get("config"):
            config_path = Path(overrides["config"]).expanduser().resolve()
            os.environ[CONFIG_ENV_VAR] = str(config_path)

        sources = []
        config_files = discover_config_files()
        unified = build_config(load_hierarchical_config())
        if config_files:
            sources.append(f"config file: {config_files[0]}")
        if overrides:
            sources.append("CLI arguments")
        sources.append("environment variables")

        settings = load_settings(
            follow_symlinks_dir=overrides.get("follow_symlinks_dir"),
            follow_symlinks_file=overrides.get("follow_symlinks_file"),
            yaml_fallbacks=unified.settings.model_dump(),
        )

        vault = (
            overrides.get("vault")
            or os.getenv("PROJSYNC_VAULT")
            or unified.vault.root
        )
        if not vault:
            raise ValueError(
                "Vault root not set. Pass --vault, set PROJSYNC_VAULT, "
                "or add 'vault: {root: ...}' to the config file."
            )
        vault_root = Path(vault).expanduser().resolve()
        if not vault_root.is_dir():
            raise ValueError(f"Vault root is not a directory: {vault_root}")

        source_desc = ", ".join(sources)
        logger.info("Configuration loaded from: %s", source_desc)
        _stderr_print(f"  Configuration loaded from: {source_desc}")
        logger.info("Vault: %s", vault_root)
        _stderr_print(f"  Vault: {vault_root}")
        _stderr_print(
            f"  follow_symlinks_dir={settings.follow_symlinks_dir} "
            f"follow_symlinks_file={settings.follow_symlinks_file}"
        )
    except ValueError as e:
        logger.error("Configuration error: %s", e)
        _stderr_print(f"ERROR: Configuration error: {e}")
        raise RuntimeError(f"Configuration error: {e}") from e

    context = HostContext(
        vault_root=vault_root,
        settings=SettingsStore(settings, config_path=config_path),
    )
    _stderr_print("Server ready. Waiting for MCP client connection...")

    yield {"context": context}

    logger.info("MCP server shutting down")
    _stderr_print("projsync MCP server shutting down.")
