"""Mirror engine: replicate a vault subtree onto a destination directory.

The ``MirrorEngine`` performs one full, one-way run:

1. Re-checks preconditions (context folder, destination directory).
2. Selects every node strictly below the context folder.
3. Pass 1 -- creates or validates every destination folder.
4. Pass 2 -- writes every non-excluded file, overwriting existing content.
5. Builds and returns a ``SyncReport``.

Error handling is split by phase: a precondition or folder failure aborts
the run before any file is written; a file failure is recorded and the
remaining files are still processed.  Nothing is deleted and nothing is
compared, every run rewrites every file.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import assert_never

from projsync.config_schema import MirrorSettings
from projsync.directive import Directive
from projsync.errors import ErrorKind, Failure, fail, kind_for_os_error
from projsync.sync.mapper import PathMapper
from projsync.sync.models import FileFailure, SyncReport
from projsync.tree import ROOT_PATH, VaultFile, VaultFolder, VaultNode, VaultTree
from projsync.validators import check_destination, check_directory, check_file

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class _RunState:
    """Mutable accumulator for a single run."""

    folders_created: list[str] = field(default_factory=list)
    folders_existing: list[str] = field(default_factory=list)
    files_written: list[str] = field(default_factory=list)
    files_excluded: list[str] = field(default_factory=list)
    failures: list[FileFailure] = field(default_factory=list)


class MirrorEngine:
    """Mirror a vault subtree onto the filesystem.

    The engine keeps no state between runs; every call to ``sync()`` is a
    fresh traversal with its own settings snapshot.
    """

    async def sync(
        self,
        directive: Directive,
        tree: VaultTree,
        context_folder: str | None,
        settings: MirrorSettings | None = None,
    ) -> SyncReport:
        """Execute a full mirror run.

        Args:
            directive: Parsed directive naming the destination and exclusions.
            tree: Snapshot of the vault.
            context_folder: Vault path of the folder containing the note
                with the directive (``"/"`` for the vault root).
            settings: Settings snapshot read by the host for this run.

        Returns:
            A ``SyncReport``; ``fatal`` is set when the run aborted.
        """
        settings = settings or MirrorSettings()
        started_at = _now()
        destination = directive.destination_path

        def _aborted(failure: Failure, state: _RunState | None = None) -> SyncReport:
            logger.error("Mirror to %s aborted: %s", destination, failure)
            state = state or _RunState()
            return SyncReport(
                context_folder=context_folder or "",
                destination=destination,
                started_at=started_at,
                completed_at=_now(),
                folders_created=state.folders_created,
                folders_existing=state.folders_existing,
                fatal=failure,
            )

        if not context_folder:
            return _aborted(
                fail(
                    ErrorKind.INVALID_INPUT,
                    "No active note folder to sync from.",
                )
            )

        failure = self._check_preconditions(
            tree, context_folder, destination, settings
        )
        if failure is not None:
            return _aborted(failure)

        mapper = PathMapper(context_folder, destination)
        selected = sorted(
            mapper.select(tree),
            key=lambda n: (PathMapper.depth(n.path), n.path),
        )
        logger.info(
            "Mirroring %d nodes from '%s' to %s",
            len(selected),
            context_folder,
            destination,
        )

        state = _RunState()

        failure = self._mirror_folders(selected, mapper, settings, state)
        if failure is not None:
            return _aborted(failure, state)

        self._mirror_files(selected, mapper, directive, settings, state)

        report = SyncReport(
            context_folder=context_folder,
            destination=destination,
            started_at=started_at,
            completed_at=_now(),
            folders_created=state.folders_created,
            folders_existing=state.folders_existing,
            files_written=state.files_written,
            files_excluded=state.files_excluded,
            failures=state.failures,
        )
        logger.info(
            "Mirror to %s finished: %d written, %d excluded, %d failed",
            destination,
            len(report.files_written),
            len(report.files_excluded),
            len(report.failures),
        )
        return report

    # ------------------------------------------------------------------
    # Preconditions
    # ------------------------------------------------------------------

    def _check_preconditions(
        self,
        tree: VaultTree,
        context_folder: str,
        destination: str,
        settings: MirrorSettings,
    ) -> Failure | None:
        if context_folder != ROOT_PATH and not isinstance(
            tree.get(context_folder), VaultFolder
        ):
            return fail(
                ErrorKind.NOT_FOUND,
                f"Folder '{context_folder}' is not in the vault.",
            )
        return check_destination(destination, settings.follow_symlinks_dir)

    # ------------------------------------------------------------------
    # Pass 1: folders
    # ------------------------------------------------------------------

    def _mirror_folders(
        self,
        nodes: list[VaultNode],
        mapper: PathMapper,
        settings: MirrorSettings,
        state: _RunState,
    ) -> Failure | None:
        """Create or validate every destination folder.

        Returns the first failure; the caller aborts the run on it.
        """
        for node in nodes:
            match node:
                case VaultFolder():
                    failure = self._mirror_folder(node, mapper, settings, state)
                    if failure is not None:
                        return failure
                case VaultFile():
                    continue
                case _:
                    assert_never(node)
        return None

    def _mirror_folder(
        self,
        node: VaultFolder,
        mapper: PathMapper,
        settings: MirrorSettings,
        state: _RunState,
    ) -> Failure | None:
        target = mapper.destination_for(node.path)

        failure = check_directory(target, settings.follow_symlinks_dir)
        if failure is not None:
            return failure

        if os.path.lexists(target):
            state.folders_existing.append(node.path)
            return None

        try:
            os.makedirs(target, exist_ok=True)
        except OSError as exc:
            return fail(
                kind_for_os_error(exc),
                f"Cannot create folder '{target}': {exc.strerror or exc}.",
            )
        logger.debug("Created folder %s", target)
        state.folders_created.append(node.path)
        return None

    # ------------------------------------------------------------------
    # Pass 2: files
    # ------------------------------------------------------------------

    def _mirror_files(
        self,
        nodes: list[VaultNode],
        mapper: PathMapper,
        directive: Directive,
        settings: MirrorSettings,
        state: _RunState,
    ) -> None:
        """Write every non-excluded file; failures are recorded, not raised."""
        for node in nodes:
            match node:
                case VaultFile():
                    self._mirror_file(node, mapper, directive, settings, state)
                case VaultFolder():
                    continue
                case _:
                    assert_never(node)

    def _mirror_file(
        self,
        node: VaultFile,
        mapper: PathMapper,
        directive: Directive,
        settings: MirrorSettings,
        state: _RunState,
    ) -> None:
        matcher = directive.match_exclusion(node.name)
        if matcher is not None:
            logger.debug(
                "Excluded %s (pattern %r)", node.path, matcher.pattern
            )
            state.files_excluded.append(node.path)
            return

        target = mapper.destination_for(node.path)

        failure = check_file(target, settings.follow_symlinks_file)
        if failure is None:
            try:
                content = node.read()
                with open(target, "wb") as fh:
                    fh.write(content)
            except OSError as exc:
                failure = fail(
                    kind_for_os_error(exc),
                    f"Cannot write '{target}': {exc.strerror or exc}.",
                )
            except Exception as exc:
                # Readers come from the host and may raise anything
                failure = fail(
                    ErrorKind.INVALID_INPUT,
                    f"Cannot write '{target}': {exc}.",
                )

        if failure is not None:
            logger.warning("Failed to sync %s: %s", node.path, failure.message)
            state.failures.append(
                FileFailure(
                    path=node.path,
                    destination=target,
                    kind=failure.kind,
                    message=failure.message,
                )
            )
            return

        logger.debug("Wrote %s (%d bytes)", target, len(content))
        state.files_written.append(node.path)
