"""MCP server exposing projsync over stdio.

The server is the host for the mirror core: it reads notes from a vault
directory, hands their ``projsync`` blocks to the directive parser, and
runs the mirror engine with a fresh settings snapshot per call.

Transport: stdio
Protocol: JSON-RPC 2.0 over MCP
"""

import argparse
import asyncio
import logging
import sys

import mcp.server.stdio
import mcp.types as types
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions

from .. import __version__
from ..logger import DEFAULT_LOG_FILE, setup_logging
from .context import HostContext
from .lifespan import server_lifespan
from .tools import ALL_SPECS, ToolRegistry, build_error_response

logger = logging.getLogger(__name__)

server = Server("projsync-mcp-server")

# Initialized in main() once the lifespan has produced a context
_context: HostContext | None = None
_registry: ToolRegistry | None = None


def get_context() -> HostContext:
    """Get the global HostContext.

    Raises:
        RuntimeError: If the server lifespan has not started.
    """
    if _context is None:
        raise RuntimeError(
            "HostContext not initialized. Server lifespan not started."
        )
    return _context


def set_context(context: HostContext | None) -> None:
    global _context
    _context = context


def get_registry() -> ToolRegistry:
    """Get the global ToolRegistry.

    Raises:
        RuntimeError: If registry is not initialized
    """
    if _registry is None:
        raise RuntimeError("ToolRegistry not initialized.")
    return _registry


def set_registry(registry: ToolRegistry | None) -> None:
    global _registry
    _registry = registry


# ---------------------------------------------------------------------------
# MCP protocol handlers
# ---------------------------------------------------------------------------


@server.list_tools()
async def handle_list_tools() -> list[types.Tool]:
    """List available projsync tools."""
    return get_registry().list_tools()


@server.call_tool()
async def handle_call_tool(
    name: str, arguments: dict | None
) -> types.CallToolResult:
    """Handle tool execution via ToolRegistry dispatch.

    Args:
        name: The name of the tool to execute.
        arguments: Tool arguments (optional).

    Returns:
        CallToolResult with tool output content and optional isError flag.
    """
    context = get_context()
    try:
        return await get_registry().call_tool(name, arguments, context)
    except ValueError as e:
        return build_error_response(
            "unknown_tool",
            str(e),
            "Use list_tools to see available tools.",
        )


# ---------------------------------------------------------------------------
# Server lifecycle
# ---------------------------------------------------------------------------


async def main(config_overrides: dict | None = None):
    """Run the MCP server with stdio transport.

    Logging is configured for MCP mode (file only) before the stdio
    transport starts so nothing reaches stdout outside the protocol.

    Args:
        config_overrides: Optional dict with values from CLI
            (vault, config, log_file, follow_symlinks_dir, follow_symlinks_file)
    """
    overrides = dict(config_overrides or {})
    log_file = overrides.pop("log_file", None)
    setup_logging(mode="mcp", debug=overrides.pop("debug", False), log_file=log_file)

    registry = ToolRegistry(ALL_SPECS)
    logger.info("Registered %d tools", registry.tool_count())
    set_registry(registry)

    async with server_lifespan(config_overrides=overrides) as ctx:
        set_context(ctx["context"])
        try:
            async with mcp.server.stdio.stdio_server() as (
                read_stream,
                write_stream,
            ):
                init_options = InitializationOptions(
                    server_name="projsync-mcp-server",
                    server_version=__version__,
                    capabilities=server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={},
                    ),
                )
                await server.run(read_stream, write_stream, init_options)
        finally:
            set_context(None)
            set_registry(None)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="projsync MCP server - mirror vault folders onto the filesystem",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Serve a vault
  projsync-mcp-server --vault ~/Documents/Vault

  # Use an explicit config file (settings are saved there too)
  projsync-mcp-server --vault ~/Vault --config ~/.config/projsync/config.yml

  # Follow symlinked destination folders for this session
  projsync-mcp-server --vault ~/Vault --follow-symlinks-dir

Note: This server uses stdio transport for JSON-RPC communication with MCP clients.
All user-facing messages are written to stderr.
        """,
    )
    parser.add_argument(
        "--vault",
        help="Vault root directory (takes precedence over PROJSYNC_VAULT and config files)",
    )
    parser.add_argument(
        "--config",
        help="Config file path (takes precedence over PROJSYNC_CONFIG and discovery)",
    )
    parser.add_argument(
        "--follow-symlinks-dir",
        action="store_true",
        default=None,
        help="Follow symbolic links to directories",
    )
    parser.add_argument(
        "--follow-symlinks-file",
        action="store_true",
        default=None,
        help="Follow symbolic links to files",
    )
    parser.add_argument(
        "--log-file",
        default=DEFAULT_LOG_FILE,
        help=f"Log file path (default: {DEFAULT_LOG_FILE})",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log at DEBUG level",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"projsync-mcp-server version {__version__}",
    )
    return parser


def run() -> None:
    """Entry point that handles errors gracefully and parses CLI arguments."""
    args = build_parser().parse_args()

    config_overrides: dict = {}
    for key in ("vault", "config", "follow_symlinks_dir", "follow_symlinks_file"):
        value = getattr(args, key)
        if value is not None:
            config_overrides[key] = value
    if args.log_file:
        config_overrides["log_file"] = args.log_file
    if args.debug:
        config_overrides["debug"] = True

    try:
        asyncio.run(main(config_overrides=config_overrides))
    except RuntimeError:
        # Error already printed to stderr by lifespan manager
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(0)


if __name__ == "__main__":
    run()
