"""Parser for ``projsync`` directive blocks.

Block language (one directive per line)::

    # comment, also allowed after a directive
    path ~/projects/site/content
    exclude \\.canvas$
    exclude ^draft-

- ``path <value>`` -- destination directory, required, exactly once.
  ``~`` and ``$VAR`` placeholders are expanded; unknown ones stay as-is.
- ``exclude <regex>`` -- skip files whose base name matches; repeatable,
  duplicates are ignored.
- ``\\#`` is a literal ``#``; an unescaped ``#`` starts a comment.

``parse_directive()`` returns a ``Directive`` or a ``Failure``.  A
Directive is only ever built after the destination passed validation.
"""

from __future__ import annotations

import logging
import os
import re

from pydantic import BaseModel

from .config_schema import MirrorSettings
from .errors import ErrorKind, Failure, fail
from .validators import check_destination

logger = logging.getLogger(__name__)

BLOCK_LANGUAGE = "projsync"


class Directive(BaseModel):
    """Parsed, validated configuration for one block.

    Attributes:
        destination_path: Expanded destination directory.
        display_path: Normalized path as written, before expansion.
        exclusions: Compiled exclusion matchers in declaration order.
    """

    destination_path: str
    display_path: str
    exclusions: tuple[re.Pattern, ...] = ()

    model_config = {"frozen": True}

    @property
    def patterns(self) -> list[str]:
        """Source strings of the exclusion matchers."""
        return [p.pattern for p in self.exclusions]

    def match_exclusion(self, name: str) -> re.Pattern | None:
        """Return the first matcher that hits *name*, or ``None``."""
        for matcher in self.exclusions:
            if matcher.search(name):
                return matcher
        return None

    def is_excluded(self, name: str) -> bool:
        return self.match_exclusion(name) is not None


# ---------------------------------------------------------------------------
# Line handling
# ---------------------------------------------------------------------------


def strip_comment(line: str) -> str:
    """Drop everything from the first unescaped ``#`` and trim.

    ``\\#`` yields a literal ``#``; any other backslash is kept so regex
    escapes such as ``\\.`` survive.
    """
    out: list[str] = []
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "\\" and i + 1 < len(line) and line[i + 1] == "#":
            out.append("#")
            i += 2
            continue
        if ch == "#":
            break
        out.append(ch)
        i += 1
    return "".join(out).strip()


def split_directive(line: str) -> tuple[str, str]:
    """Split a stripped line into ``(keyword, remainder)``.

    The remainder's words are rejoined with single spaces.
    """
    words = line.split()
    return words[0], " ".join(words[1:])


def normalize_path(raw: str) -> str:
    """Collapse separators and resolve ``.``/``..`` segments.

    An empty value stays empty so validation can reject it.
    """
    if not raw:
        return ""
    return os.path.normpath(raw)


def expand_path(path: str) -> str:
    """Substitute ``$VAR``/``${VAR}`` and ``~`` placeholders.

    Placeholders whose value is unavailable are left untouched.  The
    result is normalized only after expansion, so ``~/..`` resolves
    against the home directory.
    """
    if not path:
        return ""
    return os.path.normpath(os.path.expanduser(os.path.expandvars(path)))


def compile_exclusion(pattern: str) -> re.Pattern | Failure:
    try:
        return re.compile(pattern)
    except re.error as exc:
        return fail(
            ErrorKind.SYNTAX,
            f"Invalid exclude pattern '{pattern}': {exc}.",
        )


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def parse_directive(
    source: str, settings: MirrorSettings | None = None
) -> Directive | Failure:
    """Parse and validate a block's text.

    Args:
        source: Raw block text.
        settings: Settings snapshot; only ``follow_symlinks_dir`` is used.

    Returns:
        A ``Directive``, or the first ``Failure`` encountered.
    """
    settings = settings or MirrorSettings()

    raw_path: str | None = None
    exclusions: list[re.Pattern] = []
    seen_patterns: set[str] = set()

    for lineno, raw_line in enumerate(source.splitlines(), 1):
        line = strip_comment(raw_line)
        if not line:
            continue

        keyword, remainder = split_directive(line)

        match keyword:
            case "path":
                if raw_path is not None:
                    return fail(
                        ErrorKind.SYNTAX,
                        f"Only one path directive allowed (line {lineno}).",
                    )
                raw_path = remainder

            case "exclude":
                if not remainder or remainder in seen_patterns:
                    continue
                compiled = compile_exclusion(remainder)
                if isinstance(compiled, Failure):
                    return compiled
                seen_patterns.add(remainder)
                exclusions.append(compiled)

            case _:
                return fail(
                    ErrorKind.SYNTAX,
                    f"Invalid key: '{keyword}' (line {lineno}).",
                )

    if raw_path is None:
        return fail(ErrorKind.SYNTAX, "Path value was not set.")

    display_path = normalize_path(raw_path)
    # ".." segments apply to the expanded path, not to "~" itself
    destination = expand_path(raw_path)

    failure = check_destination(destination, settings.follow_symlinks_dir)
    if failure is not None:
        logger.debug("Destination rejected: %s", failure)
        return failure

    return Directive(
        destination_path=destination,
        display_path=display_path,
        exclusions=tuple(exclusions),
    )
