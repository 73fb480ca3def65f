"""Tests for projsync.mcp.server -- CLI parsing and protocol handlers."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import mcp.types as types
import pytest

from projsync.config import SettingsStore
from projsync.logger import DEFAULT_LOG_FILE
from projsync.mcp import server
from projsync.mcp.context import HostContext
from projsync.mcp.tools import ALL_SPECS, ToolRegistry


@pytest.fixture
def installed():
    """Install a registry and context as main() would."""
    server.set_registry(ToolRegistry(ALL_SPECS))
    server.set_context(
        HostContext(vault_root=Path("/nonexistent"), settings=SettingsStore())
    )
    yield
    server.set_context(None)
    server.set_registry(None)


class TestBuildParser:
    def test_defaults(self):
        args = server.build_parser().parse_args([])
        assert args.vault is None
        assert args.config is None
        assert args.follow_symlinks_dir is None
        assert args.follow_symlinks_file is None
        assert args.log_file == DEFAULT_LOG_FILE
        assert args.debug is False

    def test_flags(self):
        args = server.build_parser().parse_args(
            ["--vault", "/v", "--follow-symlinks-dir", "--debug"]
        )
        assert args.vault == "/v"
        assert args.follow_symlinks_dir is True
        assert args.follow_symlinks_file is None
        assert args.debug is True


class TestRun:
    def test_only_given_overrides_passed(self, monkeypatch):
        monkeypatch.setattr(
            "sys.argv", ["projsync-mcp-server", "--vault", "/v"]
        )
        with (
            patch("projsync.mcp.server.main", new_callable=MagicMock) as mock_main,
            patch("projsync.mcp.server.asyncio.run") as mock_run,
        ):
            server.run()

        mock_run.assert_called_once()
        overrides = mock_main.call_args[1]["config_overrides"]
        assert overrides == {"vault": "/v", "log_file": DEFAULT_LOG_FILE}

    def test_startup_failure_exits_1(self, monkeypatch):
        monkeypatch.setattr("sys.argv", ["projsync-mcp-server"])
        with (
            patch("projsync.mcp.server.main", new_callable=MagicMock),
            patch(
                "projsync.mcp.server.asyncio.run",
                side_effect=RuntimeError("Configuration error"),
            ),
        ):
            with pytest.raises(SystemExit) as exc:
                server.run()
        assert exc.value.code == 1


class TestHandlers:
    def test_context_required(self):
        with pytest.raises(RuntimeError, match="not initialized"):
            server.get_context()

    async def test_list_tools(self, installed):
        tools = await server.handle_list_tools()
        assert len(tools) == len(ALL_SPECS)

    async def test_unknown_tool(self, installed):
        result = await server.handle_call_tool("projsync_nope", {})
        assert isinstance(result, types.CallToolResult)
        assert result.isError
        assert "Error (unknown_tool)" in result.content[0].text

    async def test_dispatch(self, installed):
        result = await server.handle_call_tool("projsync_settings_get", None)
        assert not result.isError
        assert result.structuredContent["follow_symlinks_dir"] is False
