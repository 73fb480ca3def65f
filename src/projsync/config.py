"""Mirror settings resolution and the single-owner settings store.

Reads the symlink policy from CLI args, environment variables, .env files
and the YAML config ``settings`` section.

Precedence (highest to lowest):
    CLI args > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    PROJSYNC_FOLLOW_SYMLINKS_DIR: Follow directory symlinks (default: false)
    PROJSYNC_FOLLOW_SYMLINKS_FILE: Follow file symlinks (default: false)
"""

import logging
import os
import threading
from pathlib import Path
from typing import Any

from .config_loader import save_settings
from .config_schema import MirrorSettings

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")


def get_bool_env(key: str) -> bool | None:
    """Return True/False from env var, or None if unset.

    Raises:
        ValueError: If the variable is set to something that is not a boolean.
    """
    val = os.getenv(key)
    if val is None:
        return None
    lowered = val.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(
        f"Invalid {key} '{val}': expected one of true/false, yes/no, on/off, 1/0"
    )


def load_settings(
    follow_symlinks_dir: bool | None = None,
    follow_symlinks_file: bool | None = None,
    yaml_fallbacks: dict | None = None,
) -> MirrorSettings:
    """Resolve mirror settings with unified precedence.

    The caller is responsible for calling ``load_dotenv()`` first so that
    .env values are visible through ``os.getenv()``.

    Args:
        follow_symlinks_dir: CLI override, ``None`` when not given.
        follow_symlinks_file: CLI override, ``None`` when not given.
        yaml_fallbacks: Values from the YAML ``settings`` section.

    Returns:
        Immutable ``MirrorSettings`` snapshot.
    """
    fb = yaml_fallbacks or {}

    def _resolve(cli_value: bool | None, env_key: str, field: str) -> bool:
        if cli_value is not None:
            return cli_value
        env_value = get_bool_env(env_key)
        if env_value is not None:
            return env_value
        return bool(fb.get(field, False))

    return MirrorSettings(
        follow_symlinks_dir=_resolve(
            follow_symlinks_dir,
            "PROJSYNC_FOLLOW_SYMLINKS_DIR",
            "follow_symlinks_dir",
        ),
        follow_symlinks_file=_resolve(
            follow_symlinks_file,
            "PROJSYNC_FOLLOW_SYMLINKS_FILE",
            "follow_symlinks_file",
        ),
    )


class SettingsStore:
    """Owner of the current, mutable mirror settings.

    Readers never hold a reference to mutable state: ``snapshot()`` hands
    out the current immutable ``MirrorSettings``, and ``update()`` swaps in
    a new one.  Only the host should call ``update()``.

    Args:
        initial: Starting settings.
        config_path: File that ``update(persist=True)`` writes to.
            ``None`` means the default resolved by the config loader.
    """

    def __init__(
        self,
        initial: MirrorSettings | None = None,
        config_path: Path | None = None,
    ) -> None:
        self._settings = initial or MirrorSettings()
        self._config_path = config_path
        self._lock = threading.Lock()

    def snapshot(self) -> MirrorSettings:
        """Return the settings in effect right now."""
        with self._lock:
            return self._settings

    def update(self, persist: bool = False, **changes: Any) -> MirrorSettings:
        """Apply field changes and return the new snapshot.

        Args:
            persist: Also write the new settings to the config file.
            **changes: ``follow_symlinks_dir`` and/or ``follow_symlinks_file``.

        Raises:
            ValueError: If an unknown setting name is given.
        """
        unknown = set(changes) - set(MirrorSettings.model_fields)
        if unknown:
            raise ValueError(
                f"Unknown setting(s): {', '.join(sorted(unknown))}"
            )

        with self._lock:
            merged = {**self._settings.model_dump(), **changes}
            self._settings = MirrorSettings(**merged)
            current = self._settings

        logger.info(
            "Settings updated: follow_symlinks_dir=%s follow_symlinks_file=%s",
            current.follow_symlinks_dir,
            current.follow_symlinks_file,
        )
        if persist:
            save_settings(current, self._config_path)
        return current
