"""Shared pytest fixtures for projsync tests."""

import os
from pathlib import Path

import pytest

from projsync.config_schema import MirrorSettings
from projsync.directive import Directive, parse_directive

_ISOLATED_ENV = (
    "PROJSYNC_CONFIG",
    "PROJSYNC_VAULT",
    "PROJSYNC_FOLLOW_SYMLINKS_DIR",
    "PROJSYNC_FOLLOW_SYMLINKS_FILE",
    "LOG_LEVEL",
    "LOG_FILE",
)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "permissions: needs file permission bits to be enforced (not root)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip permission tests when running as root."""
    if not (hasattr(os, "geteuid") and os.geteuid() == 0):
        return
    skip_root = pytest.mark.skip(reason="root ignores permission bits")
    for item in items:
        if "permissions" in item.keywords:
            item.add_marker(skip_root)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep tests away from the user's real config and environment."""
    for key in _ISOLATED_ENV:
        monkeypatch.delenv(key, raising=False)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    cwd = tmp_path / "cwd"
    cwd.mkdir()
    monkeypatch.chdir(cwd)


@pytest.fixture
def dest_dir(tmp_path) -> Path:
    """An existing, empty, writable destination directory."""
    dest = tmp_path / "dest"
    dest.mkdir()
    return dest


@pytest.fixture
def make_vault(tmp_path):
    """Factory fixture writing ``{relative_path: bytes}`` into a vault dir.

    A key ending in ``/`` creates an empty folder.
    """

    def _make(files: dict[str, bytes]) -> Path:
        root = tmp_path / "vault"
        root.mkdir(exist_ok=True)
        for rel, content in files.items():
            target = root / rel
            if rel.endswith("/"):
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        return root

    return _make


@pytest.fixture
def make_directive():
    """Factory fixture parsing block text that is expected to be valid."""

    def _make(
        source: str, settings: MirrorSettings | None = None
    ) -> Directive:
        result = parse_directive(source, settings)
        assert isinstance(result, Directive), result
        return result

    return _make
