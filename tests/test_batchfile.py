# SPDX-License-Identifier: Apache-2.0
"""Tests for batch file parsing."""

import json
from pathlib import Path

import pytest

from ccbatch.batchfile import load_batch, parse_batch
from ccbatch.core.changes import ChangeKind, FileStatus
from ccbatch.exceptions import BatchFileError


def test_load_batch(tmp_path):
    doc = {
        "comment": "fix parser",
        "changes": [
            {"kind": "new", "path": "/v/src/a", "dir": True},
            {"kind": "new", "path": "/v/src/a/b.c"},
            {"kind": "renamed", "old_path": "/v/x/old.c", "path": "/v/y/old.c"},
            {"kind": "deleted", "path": "/v/gone.c"},
            {"kind": "modified", "path": "/v/m.c", "activity": "feature"},
        ],
        "status": {"/v/src": "not_changed"},
    }
    f = tmp_path / "batch.json"
    f.write_text(json.dumps(doc))

    batch = load_batch(f)

    assert batch.comment == "fix parser"
    assert [c.kind for c in batch.changes] == [
        ChangeKind.NEW, ChangeKind.NEW, ChangeKind.RENAMED,
        ChangeKind.DELETED, ChangeKind.MODIFIED,
    ]
    assert batch.changes[0].is_dir
    assert batch.changes[2].old_path == Path("/v/x/old.c")
    assert batch.changes[3].source == Path("/v/gone.c")
    assert batch.changes[4].activity == "feature"
    assert batch.status == {Path("/v/src"): FileStatus.NOT_CHANGED}


def test_renamed_dir_becomes_folder_rename():
    batch = parse_batch({"changes": [
        {"kind": "renamed", "old_path": "/v/a", "path": "/v/b", "dir": True},
    ]})
    assert batch.changes[0].kind is ChangeKind.FOLDER_RENAME


@pytest.mark.parametrize("doc, fragment", [
    ([], "JSON object"),
    ({}, "'changes'"),
    ({"changes": [{"kind": "exploded", "path": "/a"}]}, "change #0"),
    ({"changes": [{"kind": "new"}]}, "missing 'path'"),
    ({"changes": [{"kind": "renamed", "path": "/b"}]}, "needs an old path"),
    ({"changes": [], "status": {"/a": "weird"}}, "unknown status"),
    ({"changes": [], "comment": 3}, "'comment'"),
])
def test_malformed_batches(doc, fragment):
    with pytest.raises(BatchFileError, match=fragment):
        parse_batch(doc)


def test_unreadable_file(tmp_path):
    with pytest.raises(BatchFileError):
        load_batch(tmp_path / "missing.json")
