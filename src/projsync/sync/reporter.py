"""Mirror report formatting functions.

- ``format_sync_report`` -- full post-run summary.
- ``format_failure_notices`` -- one persistent notice per failed file.
- ``report_to_json`` -- structured dict for MCP tool output.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import SyncReport


def format_failure_notices(report: SyncReport) -> list[str]:
    """Return one notice line per failed file, in processing order."""
    return [f.notice for f in report.failures]


def format_sync_report(report: SyncReport) -> str:
    """Format a complete mirror report as human-readable text.

    Sections are only included when they contain at least one entry.
    Written files are summarised by count only to avoid excessive output.

    Args:
        report: The completed report.

    Returns:
        Multi-line formatted string.
    """
    lines: list[str] = [report.summary(), ""]
    lines.append(f"Started: {report.started_at}")
    if report.completed_at:
        lines.append(f"Completed: {report.completed_at}")
    lines.append("")

    if report.folders_created:
        lines.append("Created folders:")
        for path in report.folders_created:
            lines.append(f"  {path}/")
        lines.append("")

    if report.files_excluded:
        lines.append("Excluded:")
        for path in report.files_excluded:
            lines.append(f"  {path}")
        lines.append("")

    if report.failures:
        lines.append("Failures:")
        for f in report.failures:
            lines.append(f"  {f.path}: {f.message}")
        lines.append("")

    return "\n".join(lines).rstrip()


def report_to_json(report: SyncReport) -> dict:
    """Convert a report to a structured dict for JSON serialisation.

    Suitable for MCP ``structuredContent`` output.
    """
    fatal = None
    if report.fatal is not None:
        fatal = {
            "name": report.fatal.name,
            "kind": report.fatal.kind.value,
            "message": report.fatal.message,
        }

    return {
        "context_folder": report.context_folder,
        "destination": report.destination,
        "started_at": report.started_at,
        "completed_at": report.completed_at,
        "ok": report.ok,
        "fatal": fatal,
        "counts": {
            "folders_created": len(report.folders_created),
            "folders_existing": len(report.folders_existing),
            "files_written": len(report.files_written),
            "files_excluded": len(report.files_excluded),
            "failures": len(report.failures),
        },
        "files_written": list(report.files_written),
        "files_excluded": list(report.files_excluded),
        "failures": [
            {
                "path": f.path,
                "destination": f.destination,
                "kind": f.kind.value,
                "message": f.message,
            }
            for f in report.failures
        ],
    }
