"""
Filesystem path checks for projsync destinations.

Each check returns ``None`` when the path is acceptable, or a ``Failure``
carrying the first violated condition.  Checks are evaluated in a fixed
order so the reported error is deterministic:

    empty -> missing -> disallowed symlink -> wrong type -> access
"""

import os

from .errors import ErrorKind, Failure, fail

# ---------------------------------------------------------------------------
# Error message formatting helpers
# ---------------------------------------------------------------------------


def format_path_error(path: str, reason: str) -> str:
    """
    Generate a consistent error message for a path check failure.

    Args:
        path: The offending path (may be empty)
        reason: Description of the failure (e.g., "does not exist")

    Returns:
        Formatted error message string
    """
    if not path:
        return f"Path {reason}."
    return f"Path '{path}' {reason}."


def _has_access(path: str) -> bool:
    return os.access(path, os.R_OK | os.W_OK)


# ---------------------------------------------------------------------------
# Destination root
# ---------------------------------------------------------------------------


def check_destination(path: str, follow_symlinks: bool) -> Failure | None:
    """
    Validate the destination directory named by a ``path`` directive.

    Args:
        path: Expanded destination path
        follow_symlinks: Whether a symlinked destination may be followed

    Returns:
        ``None`` if valid, otherwise the first ``Failure``.

    Validation rules:
        - Cannot be empty
        - Must exist (a dangling symlink does not)
        - Cannot be a symlink unless ``follow_symlinks`` is set
        - Must be a directory (the symlink target when followed)
        - Must be readable and writable by this process
    """
    if not path:
        return fail(ErrorKind.INVALID_INPUT, format_path_error(path, "is empty"))

    if not os.path.exists(path):
        return fail(
            ErrorKind.NOT_FOUND, format_path_error(path, "does not exist")
        )

    if os.path.islink(path) and not follow_symlinks:
        return fail(
            ErrorKind.SYMLINK_POLICY,
            format_path_error(
                path,
                "is a symbolic link, enable follow_symlinks_dir to sync through it",
            ),
        )

    if not os.path.isdir(path):
        return fail(
            ErrorKind.TYPE_MISMATCH,
            format_path_error(path, "is not a directory"),
        )

    if not _has_access(path):
        return fail(
            ErrorKind.PERMISSION,
            format_path_error(path, "is not readable and writable"),
        )

    return None


# ---------------------------------------------------------------------------
# Entries inside the destination tree
# ---------------------------------------------------------------------------


def check_directory(path: str, follow_symlinks: bool) -> Failure | None:
    """
    Validate an existing folder inside the destination tree.

    A missing path is not an error: the caller creates it.

    Args:
        path: Destination-space folder path
        follow_symlinks: Value of the ``follow_symlinks_dir`` setting

    Returns:
        ``None`` if the path is missing or is a usable directory.
    """
    if not path:
        return fail(ErrorKind.INVALID_INPUT, format_path_error(path, "is empty"))

    if not os.path.lexists(path):
        return None

    if os.path.islink(path):
        if not follow_symlinks:
            return fail(
                ErrorKind.SYMLINK_POLICY,
                format_path_error(
                    path, "is a symbolic link to a folder and links are not followed"
                ),
            )
        if not os.path.exists(path):
            return fail(
                ErrorKind.NOT_FOUND,
                format_path_error(path, "is a dangling symbolic link"),
            )

    if not os.path.isdir(path):
        return fail(
            ErrorKind.TYPE_MISMATCH,
            format_path_error(path, "exists but is not a directory"),
        )

    if not _has_access(path):
        return fail(
            ErrorKind.PERMISSION,
            format_path_error(path, "is not readable and writable"),
        )

    return None


def check_file(path: str, follow_symlinks: bool) -> Failure | None:
    """
    Validate an existing file inside the destination tree before overwrite.

    Same shape as ``check_directory`` but governed by the
    ``follow_symlinks_file`` setting, and the entry must be a regular file.
    """
    if not path:
        return fail(ErrorKind.INVALID_INPUT, format_path_error(path, "is empty"))

    if not os.path.lexists(path):
        return None

    if os.path.islink(path):
        if not follow_symlinks:
            return fail(
                ErrorKind.SYMLINK_POLICY,
                format_path_error(
                    path, "is a symbolic link to a file and links are not followed"
                ),
            )
        if not os.path.exists(path):
            return fail(
                ErrorKind.NOT_FOUND,
                format_path_error(path, "is a dangling symbolic link"),
            )

    if os.path.isdir(path):
        return fail(
            ErrorKind.TYPE_MISMATCH,
            format_path_error(path, "is a directory, expected a file"),
        )

    if not os.path.isfile(path):
        return fail(
            ErrorKind.TYPE_MISMATCH,
            format_path_error(path, "is not a regular file"),
        )

    if not _has_access(path):
        return fail(
            ErrorKind.PERMISSION,
            format_path_error(path, "is not readable and writable"),
        )

    return None
