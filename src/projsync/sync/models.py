"""Pydantic models describing the outcome of one mirror run.

- ``FileFailure``: a single file that could not be mirrored.
- ``SyncReport``: aggregate results for a full run.

All models are frozen.
"""

from __future__ import annotations

from pydantic import BaseModel

from ..errors import ErrorKind, Failure


class FileFailure(BaseModel):
    """A file the engine skipped after an error.

    Attributes:
        path: Vault path of the source file.
        destination: Filesystem path that was being written.
        kind: Error category.
        message: Human-readable reason.
    """

    path: str
    destination: str
    kind: ErrorKind
    message: str

    model_config = {"frozen": True}

    @property
    def notice(self) -> str:
        """One-line message suitable for a persistent notice."""
        return f"Failed to sync '{self.path}': {self.message}"


class SyncReport(BaseModel):
    """Aggregate report for a mirror run.

    Attributes:
        context_folder: Vault folder whose subtree was mirrored.
        destination: Destination directory.
        started_at: ISO 8601 timestamp when the run started.
        completed_at: ISO 8601 timestamp when the run ended.
        folders_created: Destination folders created by this run.
        folders_existing: Destination folders that already existed.
        files_written: Vault paths of files written.
        files_excluded: Vault paths of files skipped by an exclusion.
        failures: Per-file failures; the run continued past each one.
        fatal: Set when the run aborted before writing any file.
    """

    context_folder: str
    destination: str
    started_at: str
    completed_at: str | None = None
    folders_created: list[str] = []
    folders_existing: list[str] = []
    files_written: list[str] = []
    files_excluded: list[str] = []
    failures: list[FileFailure] = []
    fatal: Failure | None = None

    model_config = {"frozen": True}

    @property
    def ok(self) -> bool:
        """True when nothing failed."""
        return self.fatal is None and not self.failures

    @property
    def partial(self) -> bool:
        """True when the run completed but some files failed."""
        return self.fatal is None and bool(self.failures)

    def summary(self) -> str:
        """Format the header and counts of the report.

        The header carries an ``(ABORTED)`` or ``(PARTIAL)`` marker; an
        aborted run also names the fatal failure.

        Returns:
            Multi-line summary string with counts.
        """
        header = f"Mirror of '{self.context_folder}' to {self.destination}"
        if self.fatal is not None:
            header += " (ABORTED)"
        elif self.failures:
            header += " (PARTIAL)"
        lines = [header]
        if self.fatal is not None:
            lines.append(str(self.fatal))
            lines.append("No files were written.")
        lines.append(
            f"{len(self.files_written)} files written, "
            f"{len(self.files_excluded)} excluded, "
            f"{len(self.failures)} failed; "
            f"{len(self.folders_created)} folders created"
        )
        return "\n".join(lines)
