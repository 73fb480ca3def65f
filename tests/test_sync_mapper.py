"""Tests for projsync.sync.mapper -- vault to destination path mapping."""

import os

import pytest

from projsync.sync.mapper import PathMapper
from projsync.tree import ROOT_PATH, VaultTree


class TestRelativePath:
    def test_root_context(self):
        mapper = PathMapper(ROOT_PATH, "/dest")
        assert mapper.relative_path("note.md") == "note.md"
        assert mapper.relative_path("assets/img.png") == "assets/img.png"

    def test_root_itself_excluded(self):
        assert PathMapper(ROOT_PATH, "/dest").relative_path(ROOT_PATH) is None

    def test_nested_context(self):
        mapper = PathMapper("Projects/Site", "/dest")
        assert mapper.relative_path("Projects/Site/a.md") == "a.md"
        assert mapper.relative_path("Projects/Site/img/b.png") == "img/b.png"

    def test_context_folder_itself_excluded(self):
        mapper = PathMapper("Notes", "/dest")
        assert mapper.relative_path("Notes") is None

    def test_sibling_with_common_prefix_excluded(self):
        mapper = PathMapper("Notes", "/dest")
        assert mapper.relative_path("Notes2/a.md") is None
        assert not mapper.contains("Notes2/a.md")

    def test_outside_context(self):
        mapper = PathMapper("Notes", "/dest")
        assert mapper.relative_path("top.md") is None

    def test_empty_context_means_root(self):
        mapper = PathMapper("", "/dest")
        assert mapper.context_folder == ROOT_PATH
        assert mapper.contains("a.md")


class TestSelectAndMap:
    def test_select_keeps_subtree_only(self):
        tree = VaultTree.from_contents(
            {
                "Notes/a.md": b"",
                "Notes/sub/c.md": b"",
                "Notes2/b.md": b"",
                "top.md": b"",
            }
        )
        mapper = PathMapper("Notes", "/dest")
        selected = {n.path for n in mapper.select(tree)}
        assert selected == {"Notes/a.md", "Notes/sub", "Notes/sub/c.md"}

    def test_destination_for(self):
        mapper = PathMapper("Notes", "/dest")
        assert mapper.destination_for("Notes/sub/c.md") == os.path.join(
            "/dest", "sub", "c.md"
        )

    def test_destination_for_outside_raises(self):
        mapper = PathMapper("Notes", "/dest")
        with pytest.raises(ValueError, match="not inside"):
            mapper.destination_for("Other/a.md")

    def test_depth(self):
        assert PathMapper.depth(ROOT_PATH) == 0
        assert PathMapper.depth("a") == 1
        assert PathMapper.depth("a/b/c.md") == 3
