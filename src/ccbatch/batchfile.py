# SPDX-License-Identifier: Apache-2.0
"""JSON batch files consumed by the command line front-end.

Example document:

    {
      "comment": "fix parser",
      "changes": [
        {"kind": "new", "path": "/v/src/a", "dir": true},
        {"kind": "new", "path": "/v/src/a/b.c"},
        {"kind": "renamed", "old_path": "/v/x/old.c", "path": "/v/y/old.c"}
      ],
      "status": {"/v/src": "not_changed"}
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .core.changes import Change, ChangeKind, FileStatus
from .core.paths import canonical
from .exceptions import BatchFileError


@dataclass
class BatchFile:
    """Parsed contents of a batch file."""

    changes: List[Change] = field(default_factory=list)
    comment: Optional[str] = None
    status: Dict[Path, FileStatus] = field(default_factory=dict)


def _parse_change(index: int, entry: Any) -> Change:
    if not isinstance(entry, dict):
        raise BatchFileError(f"change #{index}: expected an object")
    try:
        kind = ChangeKind(entry.get("kind"))
    except ValueError:
        raise BatchFileError(
            f"change #{index}: unknown kind {entry.get('kind')!r}"
        ) from None
    path = entry.get("path")
    if not isinstance(path, str) or not path:
        raise BatchFileError(f"change #{index}: missing 'path'")
    old_path = entry.get("old_path")
    if old_path is not None and not isinstance(old_path, str):
        raise BatchFileError(f"change #{index}: 'old_path' must be a string")
    if kind is ChangeKind.DELETED and old_path is None:
        old_path = path
    try:
        return Change(
            kind,
            path,
            old_path=old_path,
            is_dir=bool(entry.get("dir", False)),
            activity=entry.get("activity"),
        )
    except ValueError as e:
        raise BatchFileError(f"change #{index}: {e}") from e


def parse_batch(data: Any) -> BatchFile:
    """Validate a decoded batch document.

    Raises:
        BatchFileError: If the document or one of its entries is malformed.
    """
    if not isinstance(data, dict):
        raise BatchFileError("batch must be a JSON object")
    entries = data.get("changes")
    if not isinstance(entries, list):
        raise BatchFileError("batch needs a 'changes' list")
    changes = [_parse_change(i, entry) for i, entry in enumerate(entries)]

    status: Dict[Path, FileStatus] = {}
    for path, value in (data.get("status") or {}).items():
        try:
            status[canonical(path)] = FileStatus(value)
        except ValueError:
            raise BatchFileError(f"unknown status {value!r} for {path}") from None

    comment = data.get("comment")
    if comment is not None and not isinstance(comment, str):
        raise BatchFileError("'comment' must be a string")
    return BatchFile(changes=changes, comment=comment, status=status)


def load_batch(path: str | Path) -> BatchFile:
    """Read and validate a batch file."""
    try:
        data = json.loads(Path(path).read_text())
    except (OSError, ValueError) as e:
        raise BatchFileError(f"cannot read batch file {path}: {e}") from e
    return parse_batch(data)
