"""Logical vault tree: the read-only source side of a mirror.

A vault is a set of nodes addressed by slash-separated paths relative to the
vault root.  The root folder is ``"/"``; everything else has no leading
slash (``"note.md"``, ``"assets/img.png"``).

Nodes form a closed variant:

- ``VaultFolder`` -- no payload.
- ``VaultFile`` -- carries a ``read()`` accessor returning the full content.

``scan_vault()`` builds a ``VaultTree`` snapshot from a directory on disk.
File contents are read lazily when the mirror engine asks for them.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Literal, Union

logger = logging.getLogger(__name__)

ROOT_PATH = "/"


def parent_path(path: str) -> str:
    """Return the vault path of the folder containing *path*.

    >>> parent_path("notes/today.md")
    'notes'
    >>> parent_path("today.md")
    '/'
    """
    parent = PurePosixPath(path).parent.as_posix()
    if parent in (".", "/", ""):
        return ROOT_PATH
    return parent


def base_name(path: str) -> str:
    return PurePosixPath(path).name


@dataclass(frozen=True)
class VaultFolder:
    """A folder in the vault."""

    path: str
    kind: Literal["folder"] = field(default="folder", init=False)

    @property
    def name(self) -> str:
        return base_name(self.path)

    @property
    def parent(self) -> str:
        return parent_path(self.path)


@dataclass(frozen=True)
class VaultFile:
    """A file in the vault with an on-demand content accessor."""

    path: str
    read: Callable[[], bytes] = field(compare=False, repr=False)
    kind: Literal["file"] = field(default="file", init=False)

    @property
    def name(self) -> str:
        return base_name(self.path)

    @property
    def parent(self) -> str:
        return parent_path(self.path)


VaultNode = Union[VaultFolder, VaultFile]


class VaultTree:
    """Immutable snapshot of a vault.

    The root folder is always present, even when *nodes* does not list it.

    Args:
        nodes: Folder and file nodes, in any order.
    """

    def __init__(self, nodes: Iterable[VaultNode]) -> None:
        self._nodes: dict[str, VaultNode] = {ROOT_PATH: VaultFolder(ROOT_PATH)}
        for node in nodes:
            self._nodes[node.path] = node

    def __iter__(self) -> Iterator[VaultNode]:
        return iter(self._nodes.values())

    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def nodes(self) -> list[VaultNode]:
        return list(self._nodes.values())

    def get(self, path: str) -> VaultNode | None:
        return self._nodes.get(path)

    def folders(self) -> list[VaultFolder]:
        return [n for n in self._nodes.values() if isinstance(n, VaultFolder)]

    def files(self) -> list[VaultFile]:
        return [n for n in self._nodes.values() if isinstance(n, VaultFile)]

    @classmethod
    def from_contents(cls, contents: dict[str, bytes]) -> VaultTree:
        """Build an in-memory tree from ``{path: content}``.

        Intermediate folders are created implicitly; a path ending in
        ``/`` denotes an empty folder.
        """
        nodes: list[VaultNode] = []
        folders: set[str] = set()

        def _add_parents(path: str) -> None:
            parent = parent_path(path)
            while parent != ROOT_PATH and parent not in folders:
                folders.add(parent)
                parent = parent_path(parent)

        for path, data in contents.items():
            if path.endswith("/"):
                folder = path.rstrip("/")
                folders.add(folder)
                _add_parents(folder)
                continue
            nodes.append(VaultFile(path, read=_constant_reader(data)))
            _add_parents(path)

        nodes.extend(VaultFolder(f) for f in sorted(folders))
        return cls(nodes)


def _constant_reader(data: bytes) -> Callable[[], bytes]:
    return lambda: data


def _file_reader(path: Path) -> Callable[[], bytes]:
    return path.read_bytes


def scan_vault(root: Path) -> VaultTree:
    """Snapshot a vault directory.

    Hidden entries (names starting with ``.``, e.g. ``.obsidian``) are
    skipped.  Symbolic links to folders are listed but not descended into.

    Args:
        root: Vault root directory.

    Returns:
        ``VaultTree`` whose file nodes read from disk on demand.

    Raises:
        NotADirectoryError: If *root* is not a directory.
    """
    root = root.resolve()
    if not root.is_dir():
        raise NotADirectoryError(f"Vault root is not a directory: {root}")

    nodes: list[VaultNode] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
        current = Path(dirpath)
        for dirname in dirnames:
            rel = (current / dirname).relative_to(root).as_posix()
            nodes.append(VaultFolder(rel))
        for filename in sorted(filenames):
            if filename.startswith("."):
                continue
            full = current / filename
            rel = full.relative_to(root).as_posix()
            nodes.append(VaultFile(rel, read=_file_reader(full)))

    logger.debug("Scanned vault %s: %d nodes", root, len(nodes))
    return VaultTree(nodes)
