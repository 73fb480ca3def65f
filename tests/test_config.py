"""Tests for projsync.config -- settings resolution and the settings store.

NOT to be confused with test_config_loader.py (YAML discovery and
persistence) or test_config_schema.py (Pydantic models).
"""

import threading

import pytest
import yaml

from projsync.config import SettingsStore, get_bool_env, load_settings
from projsync.config_schema import MirrorSettings

# -------------------------------------------------------------------------
# get_bool_env()
# -------------------------------------------------------------------------


class TestGetBoolEnv:
    @pytest.mark.parametrize("value", ["true", "TRUE", "1", "yes", "on", " On "])
    def test_truthy(self, monkeypatch, value):
        monkeypatch.setenv("PROJSYNC_FLAG", value)
        assert get_bool_env("PROJSYNC_FLAG") is True

    @pytest.mark.parametrize("value", ["false", "0", "no", "off", "OFF"])
    def test_falsy(self, monkeypatch, value):
        monkeypatch.setenv("PROJSYNC_FLAG", value)
        assert get_bool_env("PROJSYNC_FLAG") is False

    def test_unset(self, monkeypatch):
        monkeypatch.delenv("PROJSYNC_FLAG", raising=False)
        assert get_bool_env("PROJSYNC_FLAG") is None

    def test_invalid(self, monkeypatch):
        monkeypatch.setenv("PROJSYNC_FLAG", "maybe")
        with pytest.raises(ValueError, match="PROJSYNC_FLAG"):
            get_bool_env("PROJSYNC_FLAG")


# -------------------------------------------------------------------------
# load_settings()
# -------------------------------------------------------------------------


class TestLoadSettings:
    """Precedence: CLI > env > YAML > defaults."""

    def test_defaults(self):
        settings = load_settings()
        assert settings == MirrorSettings()
        assert settings.follow_symlinks_dir is False
        assert settings.follow_symlinks_file is False

    def test_yaml_fallback(self):
        settings = load_settings(
            yaml_fallbacks={"follow_symlinks_dir": True}
        )
        assert settings.follow_symlinks_dir is True
        assert settings.follow_symlinks_file is False

    def test_env_beats_yaml(self, monkeypatch):
        monkeypatch.setenv("PROJSYNC_FOLLOW_SYMLINKS_DIR", "false")
        settings = load_settings(
            yaml_fallbacks={"follow_symlinks_dir": True}
        )
        assert settings.follow_symlinks_dir is False

    def test_cli_beats_env(self, monkeypatch):
        monkeypatch.setenv("PROJSYNC_FOLLOW_SYMLINKS_FILE", "false")
        settings = load_settings(follow_symlinks_file=True)
        assert settings.follow_symlinks_file is True

    def test_invalid_env_raises(self, monkeypatch):
        monkeypatch.setenv("PROJSYNC_FOLLOW_SYMLINKS_DIR", "sometimes")
        with pytest.raises(ValueError):
            load_settings()


# -------------------------------------------------------------------------
# SettingsStore
# -------------------------------------------------------------------------


class TestSettingsStore:
    def test_initial_snapshot(self):
        store = SettingsStore(MirrorSettings(follow_symlinks_dir=True))
        assert store.snapshot().follow_symlinks_dir is True

    def test_defaults_when_no_initial(self):
        assert SettingsStore().snapshot() == MirrorSettings()

    def test_update_returns_new_snapshot(self):
        store = SettingsStore()
        before = store.snapshot()
        after = store.update(follow_symlinks_file=True)

        assert after.follow_symlinks_file is True
        assert store.snapshot() is after
        # Earlier snapshots are not affected
        assert before.follow_symlinks_file is False

    def test_partial_update_keeps_other_fields(self):
        store = SettingsStore(MirrorSettings(follow_symlinks_dir=True))
        store.update(follow_symlinks_file=True)
        snap = store.snapshot()
        assert snap.follow_symlinks_dir is True
        assert snap.follow_symlinks_file is True

    def test_unknown_setting_rejected(self):
        store = SettingsStore()
        with pytest.raises(ValueError, match="follow_everything"):
            store.update(follow_everything=True)
        assert store.snapshot() == MirrorSettings()

    def test_update_without_persist_writes_nothing(self, tmp_path):
        target = tmp_path / "config.yml"
        store = SettingsStore(config_path=target)
        store.update(follow_symlinks_dir=True)
        assert not target.exists()

    def test_persist_to_explicit_path(self, tmp_path):
        target = tmp_path / "config.yml"
        target.write_text("vault:\n  root: /vault\n")
        store = SettingsStore(config_path=target)

        store.update(persist=True, follow_symlinks_dir=True)

        data = yaml.safe_load(target.read_text())
        assert data["vault"] == {"root": "/vault"}
        assert data["settings"] == {
            "follow_symlinks_dir": True,
            "follow_symlinks_file": False,
        }

    def test_persist_to_default_project_path(self, tmp_path):
        store = SettingsStore()
        store.update(persist=True, follow_symlinks_file=True)

        written = tmp_path / "cwd" / ".projsync" / "config.yml"
        data = yaml.safe_load(written.read_text())
        assert data["settings"]["follow_symlinks_file"] is True

    def test_concurrent_updates_leave_valid_state(self):
        store = SettingsStore()

        def _flip(i):
            store.update(follow_symlinks_dir=bool(i % 2))

        threads = [threading.Thread(target=_flip, args=(i,)) for i in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert isinstance(store.snapshot(), MirrorSettings)
