"""Locate ``projsync`` fenced code blocks inside a Markdown note."""

from typing import Any

import mistune

from .directive import BLOCK_LANGUAGE

_parse_ast = mistune.create_markdown(renderer=None)


def _walk(tokens: list[dict[str, Any]]) -> list[str]:
    found: list[str] = []
    for token in tokens:
        if token.get("type") == "block_code":
            info = (token.get("attrs") or {}).get("info") or ""
            words = info.split()
            if words and words[0] == BLOCK_LANGUAGE:
                found.append(token.get("raw", ""))
        children = token.get("children")
        if isinstance(children, list):
            found.extend(_walk(children))
    return found


def extract_blocks(markdown: str) -> list[str]:
    """Return the source text of every ``projsync`` block, in document order.

    Blocks nested in lists or block quotes are included.

    Args:
        markdown: Note content.

    Returns:
        List of raw block bodies (without the fences).
    """
    tokens = _parse_ast(markdown)
    return _walk(tokens)  # type: ignore[arg-type]  # AST mode returns a token list
