"""Error response builders for MCP tool handlers.

Structured error responses carry a corrective action so that an agent can
recover (fix the block, change a setting) without human intervention.
"""

import mcp.types as types

from ...errors import ErrorKind, Failure


def build_error_response(
    error_type: str, message: str, corrective_action: str
) -> types.CallToolResult:
    """Build a structured error response with corrective action.

    Args:
        error_type: Error category (an ``ErrorKind`` value, ``validation_error``,
            ``unknown_tool`` or ``server_error``)
        message: Human-readable error description
        corrective_action: Specific action the agent can take to resolve the error

    Returns:
        CallToolResult with isError=True

    Examples:
        >>> build_error_response("not_found", "Path '/x' does not exist.", "Create the directory.")
        CallToolResult(content=[TextContent(...)], isError=True)
    """
    error_text = f"Error ({error_type}): {message}\n\nAction: {corrective_action}"

    return types.CallToolResult(
        content=[types.TextContent(type="text", text=error_text)],
        isError=True,
    )


_CORRECTIVE_ACTIONS: dict[ErrorKind, str] = {
    ErrorKind.SYNTAX: (
        "Fix the projsync block: use exactly one 'path <dir>' line and "
        "any number of 'exclude <regex>' lines."
    ),
    ErrorKind.INVALID_INPUT: "Provide a non-empty value and retry.",
    ErrorKind.NOT_FOUND: (
        "Create the destination directory or correct the path, then retry."
    ),
    ErrorKind.SYMLINK_POLICY: (
        "Enable follow_symlinks_dir / follow_symlinks_file with "
        "projsync_settings_set, or point the block at the real path."
    ),
    ErrorKind.TYPE_MISMATCH: (
        "Remove or rename the conflicting entry in the destination, then retry."
    ),
    ErrorKind.PERMISSION: (
        "Grant read and write access to the destination, then retry."
    ),
}


def failure_response(
    failure: Failure, context: str | None = None
) -> types.CallToolResult:
    """Translate a ``Failure`` into a structured error response.

    Args:
        failure: The failure to report.
        context: Optional prefix naming what failed (e.g. a block).
    """
    message = f"{failure.name}: {failure.message}"
    if context:
        message = f"{context}: {message}"
    return build_error_response(
        failure.kind.value, message, _CORRECTIVE_ACTIONS[failure.kind]
    )
