"""Tests for projsync.blocks -- locating projsync fences in notes."""

import textwrap

from projsync.blocks import extract_blocks


class TestExtractBlocks:
    def test_single_block(self):
        note = textwrap.dedent(
            """\
            # Site

            ```projsync
            path ~/site
            exclude \\.canvas$
            ```
            """
        )
        blocks = extract_blocks(note)
        assert len(blocks) == 1
        assert blocks[0].strip() == "path ~/site\nexclude \\.canvas$"

    def test_other_languages_ignored(self):
        note = textwrap.dedent(
            """\
            ```python
            path = 1
            ```

            ```
            path /tmp
            ```
            """
        )
        assert extract_blocks(note) == []

    def test_multiple_blocks_in_order(self):
        note = textwrap.dedent(
            """\
            ```projsync
            path /first
            ```

            Some text.

            ```projsync
            path /second
            ```
            """
        )
        blocks = extract_blocks(note)
        assert [b.strip() for b in blocks] == ["path /first", "path /second"]

    def test_info_string_with_extra_words(self):
        note = "```projsync deploy\npath /x\n```\n"
        assert [b.strip() for b in extract_blocks(note)] == ["path /x"]

    def test_similar_language_name_ignored(self):
        note = "```projsync2\npath /x\n```\n"
        assert extract_blocks(note) == []

    def test_block_inside_quote(self):
        note = "> ```projsync\n> path /quoted\n> ```\n"
        assert [b.strip() for b in extract_blocks(note)] == ["path /quoted"]

    def test_no_blocks(self):
        assert extract_blocks("just text\n") == []
