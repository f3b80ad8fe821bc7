# SPDX-License-Identifier: Apache-2.0
"""Implementation of 'ccbatch message' command."""

import json

from ccbatch.core.host import MappingStatusOracle
from ccbatch.core.reconciler import CommitReconciler

from . import _build_backend, _build_config


def cmd_message(args) -> int:
    config = _build_config(args)
    backend = _build_backend(args, config)
    reconciler = CommitReconciler(backend, MappingStatusOracle(), config=config)
    message = reconciler.default_message(args.paths)

    if getattr(args, "json", False):
        print(json.dumps({"command": "message", "message": message}))
    elif message is not None:
        print(message)
    return 0 if message is not None else 1
