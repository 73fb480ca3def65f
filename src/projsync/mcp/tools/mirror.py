"""MCP tool handlers for parsing and running projsync blocks.

Defines two tools:

- ``projsync_parse`` -- parse every projsync block in a vault note.
- ``projsync_sync`` -- mirror the note's folder as directed by one block.
"""

from __future__ import annotations

import logging
from typing import Any

import mcp.types as types

from ...blocks import extract_blocks
from ...core.async_utils import run_sync
from ...directive import Directive, parse_directive
from ...errors import Failure
from ...sync.reporter import (
    format_failure_notices,
    format_sync_report,
    report_to_json,
)
from ...tree import parent_path, scan_vault
from ..context import HostContext
from .errors import build_error_response, failure_response
from .registry import ToolSpec

logger = logging.getLogger(__name__)


_NOTE_PROPERTY = {
    "type": "string",
    "description": (
        "Vault-relative path of the note containing the projsync block "
        "(e.g. 'projects/site/index.md')"
    ),
}


MIRROR_TOOLS: list[types.Tool] = [
    types.Tool(
        name="projsync_parse",
        description=(
            "Parse every projsync block in a vault note and report each "
            "block's destination and exclusion patterns, or its error."
        ),
        annotations=types.ToolAnnotations(
            readOnlyHint=True,
            destructiveHint=False,
            idempotentHint=True,
            openWorldHint=False,
        ),
        inputSchema={
            "type": "object",
            "properties": {"note": _NOTE_PROPERTY},
            "required": ["note"],
        },
    ),
    types.Tool(
        name="projsync_sync",
        description=(
            "Mirror the folder containing a note onto the filesystem "
            "directory named by one of its projsync blocks. One-way: "
            "existing files are overwritten, nothing is deleted."
        ),
        annotations=types.ToolAnnotations(
            readOnlyHint=False,
            destructiveHint=True,
            idempotentHint=True,
            openWorldHint=False,
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "note": _NOTE_PROPERTY,
                "block": {
                    "type": "integer",
                    "minimum": 0,
                    "default": 0,
                    "description": "Index of the projsync block in the note",
                },
            },
            "required": ["note"],
        },
    ),
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _load_blocks(
    context: HostContext, note: str
) -> tuple[str, list[str]]:
    if not note:
        raise ValueError("note is required")
    vault_path, full_path = context.resolve_note(note)
    markdown = await run_sync(full_path.read_text, encoding="utf-8")
    return vault_path, extract_blocks(markdown)


def _describe(index: int, result: Directive | Failure) -> dict[str, Any]:
    if isinstance(result, Failure):
        return {
            "index": index,
            "ok": False,
            "error": {
                "name": result.name,
                "kind": result.kind.value,
                "message": result.message,
            },
        }
    return {
        "index": index,
        "ok": True,
        "display_path": result.display_path,
        "destination": result.destination_path,
        "exclude": result.patterns,
    }


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


async def _handle_parse(
    context: HostContext, args: dict[str, Any]
) -> types.CallToolResult:
    """Handle the ``projsync_parse`` tool."""
    vault_path, blocks = await _load_blocks(context, args.get("note", ""))
    if not blocks:
        return build_error_response(
            "not_found",
            f"No projsync block in '{vault_path}'.",
            "Add a ```projsync fenced block with a 'path' line to the note.",
        )

    settings = context.settings.snapshot()
    described = [
        _describe(i, parse_directive(source, settings))
        for i, source in enumerate(blocks)
    ]

    lines = [f"{len(blocks)} projsync block(s) in '{vault_path}'"]
    for entry in described:
        if entry["ok"]:
            lines.append(f"  [{entry['index']}] -> {entry['display_path']}")
            for pattern in entry["exclude"]:
                lines.append(f"        exclude {pattern}")
        else:
            err = entry["error"]
            lines.append(
                f"  [{entry['index']}] {err['name']}: {err['message']}"
            )

    return types.CallToolResult(
        content=[types.TextContent(type="text", text="\n".join(lines))],
        structuredContent={"note": vault_path, "blocks": described},
    )


async def _handle_sync(
    context: HostContext, args: dict[str, Any]
) -> types.CallToolResult:
    """Handle the ``projsync_sync`` tool."""
    vault_path, blocks = await _load_blocks(context, args.get("note", ""))

    index = args.get("block", 0)
    if not isinstance(index, int) or isinstance(index, bool):
        raise ValueError(f"block must be an integer, got {index!r}")
    if not 0 <= index < len(blocks):
        return build_error_response(
            "not_found",
            f"Block {index} not found: '{vault_path}' has {len(blocks)} projsync block(s).",
            "Use projsync_parse to list the note's blocks.",
        )

    # One snapshot for the whole run, read after any settings update
    settings = context.settings.snapshot()

    directive = parse_directive(blocks[index], settings)
    if isinstance(directive, Failure):
        return failure_response(
            directive, context=f"Block {index} in '{vault_path}'"
        )

    tree = await run_sync(scan_vault, context.vault_root)
    report = await context.engine.sync(
        directive, tree, parent_path(vault_path), settings
    )

    if report.fatal is not None:
        return failure_response(report.fatal, context="Sync aborted")

    text = format_sync_report(report)
    notices = format_failure_notices(report)
    if notices:
        text += "\n\n" + "\n".join(notices)

    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)],
        structuredContent=report_to_json(report),
    )


MIRROR_SPECS: list[ToolSpec] = [
    ToolSpec(tool=MIRROR_TOOLS[0], handler=_handle_parse),
    ToolSpec(tool=MIRROR_TOOLS[1], handler=_handle_sync),
]
