#!/usr/bin/env python3
# SPDX-License-Identifier: Apache-2.0
"""Show how a batch of pending changes is ordered before it reaches ClearCase.

Runs against the dry-run backend, so no ClearCase installation is needed.

Usage:
    python plan_batch.py
"""

from ccbatch import Change, CommitReconciler, FileStatus, MappingStatusOracle, PendingPathIndex
from ccbatch.backends.recording import RecordingBackend


def main():
    backend = RecordingBackend()
    oracle = MappingStatusOracle({
        "/view/src/net": FileStatus.UNKNOWN,
        "/view/src/net/http": FileStatus.UNKNOWN,
    })

    # What the host saw happen in the working copy since the last commit.
    index = PendingPathIndex()
    index.record_rename("/view/src/old_util", "/view/src/util", is_dir=True)
    index.record_rename("/view/src/main.c", "/view/app/main.c")
    index.record_removal("/view/src/legacy.c")

    reconciler = CommitReconciler(backend, oracle, index=index)

    # Deliberately unordered: the reconciler sorts it out.
    batch = [
        Change.modified("/view/src/util/strings.c"),
        Change.modified("/view/app/main.c"),
        Change.deleted("/view/src/legacy.c"),
        Change.new("/view/src/net/http/client.c"),
    ]

    print("--- Batch as submitted ---")
    for change in batch:
        print(f"  {change.kind.value:<14} {change.path}")

    errors = reconciler.commit(batch, "restructure sources")

    print("\n--- Backend operations ---")
    for i, (op, args) in enumerate(backend.calls, 1):
        print(f"  {i}. {op} {' '.join(map(str, args))}")

    print(f"\nerrors: {len(errors)}, still pending: {len(index)}")


if __name__ == "__main__":
    main()
