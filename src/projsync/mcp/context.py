"""Host state shared by every tool handler."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ..config import SettingsStore
from ..sync.engine import MirrorEngine
from ..tree import ROOT_PATH


@dataclass
class HostContext:
    """What the MCP host knows about its environment.

    Attributes:
        vault_root: Directory holding the vault.
        settings: Single owner of the mutable mirror settings.
        engine: Stateless mirror engine.
    """

    vault_root: Path
    settings: SettingsStore
    engine: MirrorEngine = field(default_factory=MirrorEngine)

    def resolve_note(self, note: str) -> tuple[str, Path]:
        """Resolve a note's vault path to ``(vault_path, filesystem_path)``.

        Args:
            note: Vault-relative note path, e.g. ``"projects/site/index.md"``.

        Raises:
            ValueError: If the path is empty, escapes the vault, is not
                an existing file, or lies in a hidden folder (one that
                ``scan_vault`` skips).
        """
        cleaned = note.strip().strip("/")
        if not cleaned or cleaned == ROOT_PATH.strip("/"):
            raise ValueError("Note path cannot be empty")

        root = self.vault_root.resolve()
        full = (root / cleaned).resolve()
        if not full.is_relative_to(root):
            raise ValueError(f"Note path is outside the vault: {note}")
        if not full.is_file():
            raise ValueError(f"Note not found in vault: {note}")
        vault_path = full.relative_to(root).as_posix()
        hidden = [p for p in vault_path.split("/")[:-1] if p.startswith(".")]
        if hidden:
            raise ValueError(
                f"Note is inside hidden folder '{hidden[0]}', which is not "
                f"synced: {note}"
            )
        return vault_path, full
