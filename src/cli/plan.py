# SPDX-License-Identifier: Apache-2.0
"""Implementation of 'ccbatch plan' command."""

import json

from ccbatch.backends.recording import RecordingBackend
from ccbatch.batchfile import load_batch
from ccbatch.core.reconciler import CommitReconciler

from . import _build_config, _build_oracle, _load_index


def cmd_plan(args) -> int:
    batch = load_batch(args.batch)
    backend = RecordingBackend(_build_config(args))
    reconciler = CommitReconciler(
        backend, _build_oracle(backend, batch.status), index=_load_index(args)
    )
    # Dispatch without a comment so the listing only shows paths.
    reconciler.commit(batch.changes, None)

    steps = [
        (op, [str(a) for a in call_args if a is not None])
        for op, call_args in backend.calls
    ]

    if getattr(args, "json", False):
        print(json.dumps({
            "command": "plan",
            "operations": [{"operation": op, "args": a} for op, a in steps],
        }))
    else:
        if not steps:
            print("nothing to do")
        for i, (op, call_args) in enumerate(steps, 1):
            print(f"{i:3d}. {op} {' '.join(call_args)}")
    return 0
