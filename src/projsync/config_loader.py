"""
Hierarchical configuration loader for projsync.

Provides convention-based config file discovery, env var interpolation,
hierarchical merge with "project wins" semantics, and persistence of the
``settings`` section.

Usage:
    from projsync.config_loader import load_hierarchical_config

    config = load_hierarchical_config()
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

from .config_schema import MirrorSettings

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PROJSYNC_CONFIG"

# ---------------------------------------------------------------------------
# 1. Env var interpolation
# ---------------------------------------------------------------------------

# Matches ${VAR} and ${VAR:-default}
_ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+?)(?::-(.*?))?\}")


def interpolate_env_vars(value: str) -> str:
    """Replace ``${VAR}`` and ``${VAR:-default}`` patterns with env values.

    * ``${VAR}`` is replaced with the value of VAR, or ``""`` when unset.
    * ``${VAR:-default}`` uses *default* when VAR is unset or empty.
    * A ``${`` with no closing ``}`` is left untouched.
    """

    def _replace(match: re.Match) -> str:
        env_val = os.environ.get(match.group(1))
        if env_val:
            return env_val
        default = match.group(2)
        return default if default is not None else ""

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _interpolate_recursive(obj: Any) -> Any:
    """Walk a nested dict/list and interpolate env vars in all strings."""
    if isinstance(obj, str):
        return interpolate_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _interpolate_recursive(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_interpolate_recursive(item) for item in obj]
    return obj


def _load_yaml(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as fh:
        return yaml.safe_load(fh)


# ---------------------------------------------------------------------------
# 2. Convention-based file discovery
# ---------------------------------------------------------------------------


def discover_config_files() -> list[Path]:
    """Return existing config file paths in precedence order (highest first).

    Search order:
        1. ``PROJSYNC_CONFIG`` env var (explicit single path)
        2. ``.projsync/config.yml`` in CWD (project-level)
        3. ``.projsync/config.yaml`` in CWD (alternate extension)
        4. ``~/.config/projsync/config.yml`` (XDG global)

    Only paths that exist on disk are returned.
    """
    candidates: list[Path] = []

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidates.append(Path(env_path).expanduser().resolve())

    cwd = Path.cwd()
    candidates.append(cwd / ".projsync" / "config.yml")
    candidates.append(cwd / ".projsync" / "config.yaml")
    candidates.append(Path.home() / ".config" / "projsync" / "config.yml")

    return [p for p in candidates if p.exists()]


def resolve_config_path() -> Path:
    """Return the config file that settings should be written to.

    The highest-precedence existing file wins.  With no config file on
    disk, ``PROJSYNC_CONFIG`` is used when set, otherwise the
    project-level ``CWD / .projsync / config.yml``.  The file is not
    created here.
    """
    existing = discover_config_files()
    if existing:
        return existing[0]
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser().resolve()
    return Path.cwd() / ".projsync" / "config.yml"


# ---------------------------------------------------------------------------
# 3. Hierarchical merge
# ---------------------------------------------------------------------------


def load_hierarchical_config() -> dict[str, Any]:
    """Load and merge all discovered config files.

    Merge strategy ("project wins"):
        Files are loaded from lowest precedence to highest.  Each file's
        top-level keys **replace** (not deep-merge) those from earlier files.

    After merging, env var interpolation is applied to all string values.

    Returns an empty dict when no config files exist (zero-config).
    """
    paths = discover_config_files()

    if not paths:
        logger.debug("No config files found, using defaults")
        return {}

    merged: dict[str, Any] = {}
    for path in reversed(paths):
        logger.debug("Loading config: %s", path)
        try:
            data = _load_yaml(path)
        except Exception:
            logger.exception("Failed to load config file %s", path)
            raise

        if isinstance(data, dict):
            merged.update(data)
        elif data is not None:
            logger.warning(
                "Config file %s has non-dict root (%s), skipping",
                path,
                type(data).__name__,
            )

    return _interpolate_recursive(merged)


# ---------------------------------------------------------------------------
# 4. Persistence
# ---------------------------------------------------------------------------


def save_settings(
    settings: MirrorSettings, target: Path | None = None
) -> Path:
    """Write the ``settings`` section to a config file.

    Other top-level sections already present in the file are preserved.
    The file and its directory are created when missing.

    Args:
        settings: Settings snapshot to persist.
        target: Explicit file; defaults to ``resolve_config_path()``.

    Returns:
        Path of the file written.
    """
    config_path = target or resolve_config_path()

    data: dict[str, Any] = {}
    if config_path.exists():
        loaded = _load_yaml(config_path)
        if isinstance(loaded, dict):
            data = loaded

    data["settings"] = settings.model_dump()

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(
        yaml.safe_dump(data, default_flow_style=False, sort_keys=False),
        encoding="utf-8",
    )
    logger.info("Saved settings to %s", config_path)
    return config_path
