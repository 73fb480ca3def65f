"""Error taxonomy shared by the directive parser and the mirror engine.

Validation never raises.  Every check returns ``None`` on success or a
``Failure`` describing the first violated condition, and callers propagate
it by returning early.  The host renders a failure as its ``name`` plus
``message``.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class ErrorKind(str, Enum):
    """Categories of parse, validation and sync failures."""

    SYNTAX = "syntax"
    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    SYMLINK_POLICY = "symlink_policy"
    TYPE_MISMATCH = "type_mismatch"
    PERMISSION = "permission"

    @property
    def display_name(self) -> str:
        """Short error name shown next to the message."""
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES: dict[ErrorKind, str] = {
    ErrorKind.SYNTAX: "SyntaxError",
    ErrorKind.INVALID_INPUT: "InvalidInputError",
    ErrorKind.NOT_FOUND: "NotFoundError",
    ErrorKind.SYMLINK_POLICY: "SymlinkPolicyError",
    ErrorKind.TYPE_MISMATCH: "TypeMismatchError",
    ErrorKind.PERMISSION: "PermissionError",
}


class Failure(BaseModel):
    """A typed, terminal failure.

    Attributes:
        kind: Error category.
        message: Human-readable description.
    """

    kind: ErrorKind
    message: str

    model_config = {"frozen": True}

    @property
    def name(self) -> str:
        return self.kind.display_name

    def __str__(self) -> str:
        return f"{self.name}: {self.message}"


def fail(kind: ErrorKind, message: str) -> Failure:
    """Shorthand used by validation chains."""
    return Failure(kind=kind, message=message)


def kind_for_os_error(exc: OSError) -> ErrorKind:
    """Map a filesystem exception onto the error taxonomy.

    Errors with no closer match (disk full, I/O errors) are reported as
    ``permission`` failures: the path could not be accessed.
    """
    match exc:
        case FileNotFoundError():
            return ErrorKind.NOT_FOUND
        case IsADirectoryError() | NotADirectoryError() | FileExistsError():
            return ErrorKind.TYPE_MISMATCH
        case _:
            return ErrorKind.PERMISSION
