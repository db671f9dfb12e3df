# SPDX-License-Identifier: MIT
"""Tests for projgen.core.filters."""

from __future__ import annotations

import pytest

from projgen.core.filters import (
    Classification,
    FileKind,
    FilterRules,
    file_kind,
    filter_tree,
    iter_files,
    split_filename,
)
from projgen.core.node import FileNode


class TestSplitFilename:
    def test_simple(self):
        assert split_filename("engine.cpp") == ("engine", "cpp")

    def test_last_dot_wins(self):
        assert split_filename("archive.tar.gz") == ("archive.tar", "gz")

    def test_no_extension(self):
        assert split_filename("Makefile") == ("Makefile", "")
        assert split_filename(".gitignore") == (".gitignore", "")


class TestFileKind:
    @pytest.mark.parametrize(
        "name,kind",
        [
            ("a.cpp", FileKind.SOURCE),
            ("a.c", FileKind.SOURCE),
            ("a.mm", FileKind.SOURCE),
            ("icon.rc", FileKind.RESOURCE),
            ("ICON.RC", FileKind.RESOURCE),
            ("scale.asm", FileKind.ASSEMBLY),
            ("scale.nasm", FileKind.ASSEMBLY),
            ("engine.h", FileKind.OTHER),
            ("README", FileKind.OTHER),
        ],
    )
    def test_kind_by_extension(self, name, kind):
        assert file_kind(name) is kind


class TestFilterRules:
    """Tests for include/exclude classification."""

    def test_empty_rules_include_everything(self):
        rules = FilterRules()
        assert rules.classify("a.cpp") is Classification.INCLUDED
        assert rules.accepts("sub/dir/b.cpp")

    def test_exclude_wins_over_include(self):
        """A file matching both lists is excluded."""
        rules = FilterRules.of(include=["*.cpp"], exclude=["a.cpp"])
        assert rules.classify("a.cpp") is Classification.EXCLUDED
        assert rules.classify("b.cpp") is Classification.INCLUDED

    def test_include_restricts(self):
        rules = FilterRules.of(include=["*.cpp"])
        assert rules.accepts("a.cpp")
        assert not rules.accepts("a.h")

    def test_directory_fragment_excludes_subtree(self):
        rules = FilterRules.of(exclude=["engines"])
        assert not rules.accepts("engines/engine/engine.cpp")
        assert rules.accepts("main.cpp")
        assert rules.accepts("enginesx/a.cpp")

    def test_basename_fragment(self):
        rules = FilterRules.of(exclude=["config.h"])
        assert not rules.accepts("sub/config.h")

    def test_glob_matches_basename(self):
        rules = FilterRules.of(exclude=["*_win32.cpp"])
        assert not rules.accepts("gui/window_win32.cpp")
        assert rules.accepts("gui/window.cpp")

    def test_glob_with_separator_matches_whole_path(self):
        rules = FilterRules.of(include=["gui/*.cpp"])
        assert rules.accepts("gui/window.cpp")
        assert not rules.accepts("window.cpp")

    def test_backslash_patterns(self):
        rules = FilterRules.of(exclude=["engines\\engine"])
        assert not rules.accepts("engines/engine/engine.cpp")


class TestFilterTree:
    def test_prunes_excluded_files_and_empty_dirs(self):
        tree = FileNode.directory(
            "src",
            [
                FileNode.directory("engines", [FileNode("engine.cpp")]),
                FileNode("main.cpp"),
            ],
        )
        filtered = filter_tree(tree, FilterRules.of(exclude=["engines"]))
        assert filtered is not None
        assert [child.name for child in filtered.children] == ["main.cpp"]

    def test_returns_none_when_nothing_left(self):
        tree = FileNode.directory("src", [FileNode("a.h")])
        assert filter_tree(tree, FilterRules.of(include=["*.cpp"])) is None


class TestIterFiles:
    def test_paths_and_kinds(self):
        tree = FileNode.directory(
            "src", [FileNode("a.cpp"), FileNode("icon.rc"), FileNode("b.h")]
        )
        assert list(iter_files(tree)) == [
            ("a.cpp", FileKind.SOURCE),
            ("icon.rc", FileKind.RESOURCE),
            ("b.h", FileKind.OTHER),
        ]

    def test_rules_applied(self):
        tree = FileNode.directory("src", [FileNode("a.cpp"), FileNode("b.cpp")])
        rules = FilterRules.of(exclude=["b.cpp"])
        assert [p for p, _ in iter_files(tree, rules)] == ["a.cpp"]

    def test_none_tree(self):
        assert list(iter_files(None)) == []
