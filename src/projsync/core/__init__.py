"""Core helpers shared between the mirror engine and the MCP host."""

from .async_utils import run_sync

__all__ = ["run_sync"]
