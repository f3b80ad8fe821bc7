# SPDX-License-Identifier: Apache-2.0
"""Implementation of 'ccbatch commit' command."""

import signal

from ccbatch.batchfile import load_batch
from ccbatch.core.reconciler import CommitReconciler

from . import (
    _LogProgress,
    _build_backend,
    _build_config,
    _build_oracle,
    _load_index,
    _print_error,
    _print_result,
)


def cmd_commit(args) -> int:
    batch = load_batch(args.batch)
    config = _build_config(args)
    backend = _build_backend(args, config)
    index = _load_index(args)
    reconciler = CommitReconciler(
        backend, _build_oracle(backend, batch.status), index=index, config=config
    )

    comment = args.message or batch.comment
    if not comment:
        comment = reconciler.default_message(c.path for c in batch.changes)
    if not comment:
        _print_error("no checkin comment; use -m or set 'comment' in the batch", args)
        return 1

    # Ctrl-C stops dispatch between backend calls instead of killing
    # cleartool halfway through an operation.
    progress = _LogProgress()

    def _on_sigint(signum, frame):
        progress.cancelled = True

    previous = signal.signal(signal.SIGINT, _on_sigint)
    try:
        errors = reconciler.commit(batch.changes, comment, progress)
    finally:
        signal.signal(signal.SIGINT, previous)

    if args.state:
        index.save(args.state)

    _print_result(
        {
            "command": "commit",
            "changes": len(batch.changes),
            "cancelled": progress.cancelled,
            "pending": len(index),
            "errors": [str(e) for e in errors],
        },
        args,
    )
    if progress.cancelled:
        return 130
    return 1 if errors else 0
