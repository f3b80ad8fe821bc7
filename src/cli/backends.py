# SPDX-License-Identifier: Apache-2.0
"""Implementation of 'ccbatch backends' command."""

import json

from ccbatch.core.registry import list_supported


def cmd_backends(args) -> int:
    names = list_supported()
    if getattr(args, "json", False):
        print(json.dumps({"command": "backends", "backends": names}))
    else:
        for name in names:
            print(name)
    return 0
