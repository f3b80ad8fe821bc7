# SPDX-License-Identifier: Apache-2.0
"""Tests for Change records and path helpers."""

from pathlib import Path

import pytest

from ccbatch.core.changes import Change, ChangeKind
from ccbatch.core.paths import ancestors, canonical, is_under, rebase, sort_outermost_first


def test_renamed_directory_becomes_folder_rename():
    change = Change(ChangeKind.RENAMED, "/v/new", old_path="/v/old", is_dir=True)
    assert change.kind is ChangeKind.FOLDER_RENAME
    assert change.is_folder_rename


def test_folder_rename_requires_old_path():
    with pytest.raises(ValueError):
        Change(ChangeKind.FOLDER_RENAME, "/v/new")


def test_deleted_has_no_target():
    change = Change.deleted("/v/gone.txt")
    assert change.target is None
    assert change.source == Path("/v/gone.txt")


def test_paths_normalised():
    change = Change.modified("/v//a/./b.txt")
    assert change.path == Path("/v/a/b.txt")


def test_canonical_accepts_backslashes():
    assert canonical("v\\a\\b.txt") == Path("v/a/b.txt")


def test_ancestors_innermost_first():
    assert list(ancestors("/a/b/c.txt")) == [Path("/a/b"), Path("/a")]


def test_ancestors_relative():
    assert list(ancestors("a/b/c.txt")) == [Path("a/b"), Path("a")]


def test_is_under():
    assert is_under("/v/new/f.txt", "/v/new")
    assert is_under("/v/new", "/v/new")
    assert not is_under("/v/newer/f.txt", "/v/new")


def test_sort_outermost_first():
    paths = ["/a/b/c", "/a", "/b", "/a/b"]
    assert sort_outermost_first(paths) == [
        Path("/a"), Path("/b"), Path("/a/b"), Path("/a/b/c"),
    ]


def test_rebase_moves_paths_under_folder():
    assert rebase("/v/A/x/f.txt", "/v/A", "/v/B") == Path("/v/B/x/f.txt")
    assert rebase("/v/A", "/v/A", "/v/B") == Path("/v/B")
    assert rebase("/v/AB/f.txt", "/v/A", "/v/B") == Path("/v/AB/f.txt")
