"""MCP tool handlers for the mirror settings.

- ``projsync_settings_get`` -- show the current symlink policy.
- ``projsync_settings_set`` -- change it, persisting to the config file by default.
"""

import logging

import mcp.types as types

from ...config_schema import MirrorSettings
from ..context import HostContext
from .registry import ToolSpec

logger = logging.getLogger(__name__)

_SETTING_NAMES = tuple(MirrorSettings.model_fields)


SETTINGS_TOOLS: list[types.Tool] = [
    types.Tool(
        name="projsync_settings_get",
        description="Show the current projsync symlink settings.",
        annotations=types.ToolAnnotations(
            readOnlyHint=True,
            destructiveHint=False,
            idempotentHint=True,
            openWorldHint=False,
        ),
        inputSchema={"type": "object", "properties": {}, "required": []},
    ),
    types.Tool(
        name="projsync_settings_set",
        description=(
            "Change whether symbolic links to directories and files are "
            "followed during validation and mirroring."
        ),
        annotations=types.ToolAnnotations(
            readOnlyHint=False,
            destructiveHint=False,
            idempotentHint=True,
            openWorldHint=False,
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "follow_symlinks_dir": {
                    "type": "boolean",
                    "description": "Follow symbolic links to directories",
                },
                "follow_symlinks_file": {
                    "type": "boolean",
                    "description": "Follow symbolic links to files",
                },
                "persist": {
                    "type": "boolean",
                    "default": True,
                    "description": "Write the new settings to the config file",
                },
            },
            "required": [],
        },
    ),
]


def _settings_result(settings: MirrorSettings) -> types.CallToolResult:
    data = settings.model_dump()
    text = "\n".join(f"{k}: {str(v).lower()}" for k, v in data.items())
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)],
        structuredContent=data,
    )


async def _handle_get(context: HostContext, args: dict) -> types.CallToolResult:
    return _settings_result(context.settings.snapshot())


async def _handle_set(context: HostContext, args: dict) -> types.CallToolResult:
    changes = {k: args[k] for k in _SETTING_NAMES if k in args}
    if not changes:
        raise ValueError(
            f"Provide at least one of: {', '.join(_SETTING_NAMES)}"
        )
    for key, value in changes.items():
        if not isinstance(value, bool):
            raise ValueError(f"{key} must be a boolean, got {value!r}")

    persist = args.get("persist", True)
    updated = context.settings.update(persist=bool(persist), **changes)
    return _settings_result(updated)


SETTINGS_SPECS: list[ToolSpec] = [
    ToolSpec(tool=SETTINGS_TOOLS[0], handler=_handle_get),
    ToolSpec(tool=SETTINGS_TOOLS[1], handler=_handle_set),
]
