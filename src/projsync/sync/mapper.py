"""Path mapper from vault space to destination space.

Selection and remapping are structural:

1. **Selection** -- a node belongs to the subtree when its path lies
   strictly below the context folder (every non-root node when the
   context folder is the vault root).
2. **Relative suffix** -- the context folder is stripped segment-wise, so
   ``Notes2/a.md`` is never treated as being inside ``Notes``.
3. **Join** -- the suffix is joined onto the destination directory.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import PurePosixPath

from projsync.tree import ROOT_PATH, VaultNode


def _segments(path: str) -> tuple[str, ...]:
    return PurePosixPath(path.strip("/")).parts if path != ROOT_PATH else ()


class PathMapper:
    """Map vault nodes below a context folder onto a destination directory.

    Args:
        context_folder: Vault path of the folder holding the directive
            (``"/"`` for the vault root).
        destination: Destination directory on the filesystem.
    """

    def __init__(self, context_folder: str, destination: str) -> None:
        self.context_folder = context_folder or ROOT_PATH
        self.destination = destination
        self._prefix = _segments(self.context_folder)

    def relative_path(self, vault_path: str) -> str | None:
        """Return *vault_path* relative to the context folder.

        Returns:
            POSIX relative path, or ``None`` when the path is not strictly
            inside the context folder.
        """
        if vault_path == ROOT_PATH:
            return None
        parts = _segments(vault_path)
        if len(parts) <= len(self._prefix):
            return None
        if parts[: len(self._prefix)] != self._prefix:
            return None
        return PurePosixPath(*parts[len(self._prefix) :]).as_posix()

    def contains(self, vault_path: str) -> bool:
        return self.relative_path(vault_path) is not None

    def select(self, nodes: Iterable[VaultNode]) -> list[VaultNode]:
        """Filter *nodes* down to the mirrored subtree, preserving order."""
        return [n for n in nodes if self.contains(n.path)]

    def destination_for(self, vault_path: str) -> str:
        """Return the destination filesystem path for a node in the subtree.

        Raises:
            ValueError: If *vault_path* is outside the context folder.
        """
        rel = self.relative_path(vault_path)
        if rel is None:
            raise ValueError(
                f"'{vault_path}' is not inside '{self.context_folder}'"
            )
        return os.path.join(self.destination, *rel.split("/"))

    @staticmethod
    def depth(vault_path: str) -> int:
        return len(_segments(vault_path))
