# SPDX-License-Identifier: Apache-2.0
"""PendingPathIndex - what the host believes is pending but the backend has not seen.

The host records renames, removals and additions as they happen in the
working copy. The reconciler consults the index when a commit is replayed
and drains an entry once the matching backend operation succeeded.
Entries that survive a failed commit stay pending for the next attempt.

Example:
    index = PendingPathIndex()
    index.record_rename("/x/old.txt", "/y/old.txt")
    index.old_path_of("/y/old.txt")   # Path('/x/old.txt')
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Set, Tuple

from ..exceptions import StateFileError
from .paths import PathLike, canonical, depth, is_under, rebase

log = logging.getLogger(__name__)

STATE_VERSION = 1


class PendingPathIndex:
    """Reconciler-owned record of in-flight renames, removals and additions.

    Rename maps are keyed by the *new* path, since that is the path the
    host reports in a commit batch.
    """

    def __init__(self) -> None:
        self.renamed_files: Dict[Path, Path] = {}
        self.renamed_folders: Dict[Path, Path] = {}
        self.removed_files: Set[Path] = set()
        self.removed_folders: Set[Path] = set()
        self.new_files: Set[Path] = set()

    # -- insert points ----------------------------------------------------

    def record_rename(self, old: PathLike, new: PathLike, is_dir: bool = False) -> None:
        """Record that *old* was renamed to *new* in the working copy.

        A path renamed twice before a commit keeps its first old path so a
        single backend rename covers the whole chain.
        """
        old_p, new_p = canonical(old), canonical(new)
        table = self.renamed_folders if is_dir else self.renamed_files
        origin = table.pop(old_p, None) or self._backend_path(old_p)
        if is_dir:
            # Working-copy paths inside the folder moved with it; the
            # origins still name what the backend has.
            self.renamed_files = _rebase_keys(self.renamed_files, old_p, new_p)
            self.renamed_folders = _rebase_keys(self.renamed_folders, old_p, new_p)
            self.new_files = {rebase(p, old_p, new_p) for p in self.new_files}
        if origin in (new_p, self._backend_path(new_p)):
            # Renamed back to where it started.
            return
        table[new_p] = origin

    def _backend_path(self, path: Path) -> Path:
        """Undo the innermost pending folder rename that contains *path*."""
        best = None
        for new, old in self.renamed_folders.items():
            if new != path and is_under(path, new):
                if best is None or depth(new) > depth(best[0]):
                    best = (new, old)
        if best is None:
            return path
        return rebase(path, *best)

    def record_removal(self, path: PathLike, is_dir: bool = False) -> None:
        p = canonical(path)
        if p in self.new_files:
            # Never reached the backend; nothing to remove there.
            self.new_files.discard(p)
            return
        (self.removed_folders if is_dir else self.removed_files).add(p)

    def record_new(self, path: PathLike) -> None:
        self.new_files.add(canonical(path))

    # -- lookups ----------------------------------------------------------

    def old_path_of(self, new: PathLike) -> Optional[Path]:
        return self.renamed_files.get(canonical(new))

    def old_folder_of(self, new: PathLike) -> Optional[Path]:
        return self.renamed_folders.get(canonical(new))

    def is_removed(self, path: PathLike) -> bool:
        p = canonical(path)
        return p in self.removed_files or p in self.removed_folders

    def is_new(self, path: PathLike) -> bool:
        return canonical(path) in self.new_files

    def pending_folder_renames(self) -> Iterator[Tuple[Path, Path]]:
        """Yield ``(new, old)`` pairs of folder renames still pending."""
        yield from list(self.renamed_folders.items())

    def __len__(self) -> int:
        return (
            len(self.renamed_files)
            + len(self.renamed_folders)
            + len(self.removed_files)
            + len(self.removed_folders)
            + len(self.new_files)
        )

    def __bool__(self) -> bool:
        return len(self) > 0

    # -- drain points -----------------------------------------------------

    def drain_file_rename(self, new: PathLike) -> Optional[Path]:
        return self.renamed_files.pop(canonical(new), None)

    def drain_folder_rename(self, new: PathLike) -> Optional[Path]:
        return self.renamed_folders.pop(canonical(new), None)

    def settle_folder_rename(self, new: PathLike) -> Optional[Path]:
        """Drain a folder rename the backend has applied.

        Origins and pending removals under the folder's old path now live
        under *new* on the backend side as well, so they are moved there.
        Returns the folder's old path, or None if it was not pending.
        """
        new_p = canonical(new)
        old_p = self.renamed_folders.pop(new_p, None)
        if old_p is None:
            return None
        self.renamed_files = {
            k: rebase(v, old_p, new_p) for k, v in self.renamed_files.items()
        }
        self.renamed_folders = {
            k: rebase(v, old_p, new_p) for k, v in self.renamed_folders.items()
        }
        self.removed_files = {rebase(p, old_p, new_p) for p in self.removed_files}
        self.removed_folders = {rebase(p, old_p, new_p) for p in self.removed_folders}
        return old_p

    def drain_removal(self, path: PathLike) -> None:
        """Forget a pending removal. Safe to call for paths never recorded."""
        p = canonical(path)
        self.removed_files.discard(p)
        self.removed_folders.discard(p)

    def drain_new(self, path: PathLike) -> None:
        self.new_files.discard(canonical(path))

    # -- persistence ------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": STATE_VERSION,
            "renamed_files": {str(k): str(v) for k, v in sorted(self.renamed_files.items())},
            "renamed_folders": {str(k): str(v) for k, v in sorted(self.renamed_folders.items())},
            "removed_files": sorted(str(p) for p in self.removed_files),
            "removed_folders": sorted(str(p) for p in self.removed_folders),
            "new_files": sorted(str(p) for p in self.new_files),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PendingPathIndex:
        if not isinstance(data, dict):
            raise StateFileError("state must be a JSON object")
        version = data.get("version", STATE_VERSION)
        if version != STATE_VERSION:
            raise StateFileError(f"unsupported state version: {version!r}")
        index = cls()
        try:
            for new, old in data.get("renamed_files", {}).items():
                index.renamed_files[canonical(new)] = canonical(old)
            for new, old in data.get("renamed_folders", {}).items():
                index.renamed_folders[canonical(new)] = canonical(old)
            index.removed_files.update(canonical(p) for p in data.get("removed_files", []))
            index.removed_folders.update(canonical(p) for p in data.get("removed_folders", []))
            index.new_files.update(canonical(p) for p in data.get("new_files", []))
        except (AttributeError, TypeError) as e:
            raise StateFileError(f"malformed state: {e}") from e
        return index

    @classmethod
    def load(cls, path: PathLike) -> PendingPathIndex:
        """Load an index from a JSON state file. A missing file is empty."""
        state_path = Path(path)
        if not state_path.exists():
            log.debug("no state file at %s, starting empty", state_path)
            return cls()
        try:
            data = json.loads(state_path.read_text())
        except (OSError, ValueError) as e:
            raise StateFileError(f"cannot read state file {state_path}: {e}") from e
        return cls.from_dict(data)

    def save(self, path: PathLike) -> None:
        state_path = Path(path)
        try:
            state_path.write_text(json.dumps(self.to_dict(), indent=2) + "\n")
        except OSError as e:
            raise StateFileError(f"cannot write state file {state_path}: {e}") from e

    def __repr__(self) -> str:
        return (
            f"PendingPathIndex(renamed_files={len(self.renamed_files)}, "
            f"renamed_folders={len(self.renamed_folders)}, "
            f"removed={len(self.removed_files) + len(self.removed_folders)}, "
            f"new={len(self.new_files)})"
        )


def _rebase_keys(table: Dict[Path, Path], old: Path, new: Path) -> Dict[Path, Path]:
    return {rebase(k, old, new): v for k, v in table.items()}
