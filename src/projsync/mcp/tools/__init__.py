"""MCP tool handlers for projsync.

This package wraps the directive parser and the mirror engine with async
handlers and structured error responses.
"""

from .errors import build_error_response, failure_response
from .mirror import MIRROR_SPECS, MIRROR_TOOLS
from .registry import ToolRegistry, ToolSpec
from .settings import SETTINGS_SPECS, SETTINGS_TOOLS

ALL_SPECS: list[ToolSpec] = MIRROR_SPECS + SETTINGS_SPECS

__all__ = [
    "build_error_response",
    "failure_response",
    "ToolSpec",
    "ToolRegistry",
    "ALL_SPECS",
    "MIRROR_SPECS",
    "MIRROR_TOOLS",
    "SETTINGS_SPECS",
    "SETTINGS_TOOLS",
]
