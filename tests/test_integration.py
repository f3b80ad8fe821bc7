# SPDX-License-Identifier: Apache-2.0
"""Integration tests against a live ClearCase view.

These tests require a working cleartool and a writable VOB directory
inside a view. They are skipped automatically when none is available
(e.g. unit-test-only runs).

The CCBATCH_TEST_VOB_DIR environment variable names a checked-in,
versioned directory the tests may create elements in.
"""

import os
import uuid
from pathlib import Path

import pytest

needs_clearcase = pytest.mark.skipif(
    not os.environ.get("CCBATCH_TEST_VOB_DIR"),
    reason="CCBATCH_TEST_VOB_DIR not set (no live ClearCase view)",
)


@pytest.fixture
def vob_dir():
    return Path(os.environ["CCBATCH_TEST_VOB_DIR"]).resolve()


@pytest.fixture
def reconciler(vob_dir):
    from ccbatch import CommitReconciler, ReconcilerConfig
    from ccbatch.backends.cleartool import CleartoolBackend, CleartoolStatusOracle

    backend = CleartoolBackend(ReconcilerConfig.from_env())
    return CommitReconciler(backend, CleartoolStatusOracle(backend))


@needs_clearcase
def test_add_new_tree(vob_dir, reconciler):
    """A new folder tree with one file goes in with a single commit."""
    from ccbatch import Change

    top = vob_dir / f"ccbatch_{uuid.uuid4().hex[:8]}"
    leaf = top / "sub"
    leaf.mkdir(parents=True)
    (leaf / "file.txt").write_text("hello\n")

    errors = reconciler.commit([Change.new(leaf / "file.txt")], "ccbatch integration test")

    assert errors == []


@needs_clearcase
def test_rename_then_delete(vob_dir, reconciler):
    """Rename a freshly added file, then remove it again."""
    from ccbatch import Change

    name = f"ccbatch_{uuid.uuid4().hex[:8]}.txt"
    path = vob_dir / name
    path.write_text("x\n")
    assert reconciler.commit([Change.new(path)], "add") == []

    renamed = vob_dir / f"renamed_{name}"
    reconciler.index.record_rename(path, renamed)
    assert reconciler.commit([Change.modified(renamed)], "rename") == []
    assert reconciler.index.old_path_of(renamed) is None

    reconciler.index.record_removal(renamed)
    assert reconciler.schedule_deletion([renamed]) == []
