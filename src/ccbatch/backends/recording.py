# SPDX-License-Identifier: Apache-2.0
"""Dry-run backend that records primitive calls instead of executing them.

Used by ``ccbatch plan`` to show the dispatch order of a batch, and handy
for exercising the reconciler without a ClearCase installation.
"""

from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

from ..core.base import Backend
from ..core.paths import PathLike, canonical
from ..exceptions import BackendError

Call = Tuple[str, tuple]


class RecordingBackend(Backend):
    """Records every call as ``(operation, args)``.

    Failures, checkout comments and activities can be primed per path.
    A primed failure still records the call before raising.
    """

    def __init__(self, config=None):
        super().__init__(config)
        self.calls: List[Call] = []
        self._failures: Dict[Tuple[str, Path], str] = {}
        self._any_failures: Set[Path] = set()
        self.comments: Dict[Path, str] = {}
        self.view_activities: Dict[Path, str] = {}
        self.checkout_activities: Dict[Path, str] = {}

    @classmethod
    def name(cls) -> str:
        return "dry-run"

    def fail(self, path: PathLike, operation: Optional[str] = None, reason: str = "primed failure") -> None:
        """Make *operation* (or any mutating operation) on *path* fail."""
        p = canonical(path)
        if operation is None:
            self._any_failures.add(p)
            self._failures[("*", p)] = reason
        else:
            self._failures[(operation, p)] = reason

    def _record(self, operation: str, path: Path, *args) -> None:
        self.calls.append((operation, (path, *args)))
        reason = self._failures.get((operation, path))
        if reason is None and path in self._any_failures:
            reason = self._failures[("*", path)]
        if reason is not None:
            raise BackendError(operation, path, reason)

    def operations(self) -> List[str]:
        return [op for op, _ in self.calls]

    def add_file(self, path: Path, comment: Optional[str]) -> None:
        self._record("add", path, comment)

    def remove_file(self, path: Path, comment: Optional[str]) -> None:
        self._record("remove", path, comment)

    def checkin_file(self, path: Path, comment: Optional[str]) -> None:
        self._record("checkin", path, comment)

    def rename_and_checkin(self, old_path: Path, new_name: str, comment: Optional[str]) -> None:
        self._record("rename", old_path, new_name, comment)

    def move_rename_and_checkin(
        self, old_path: Path, new_parent: Path, new_name: str, comment: Optional[str]
    ) -> None:
        self._record("move", old_path, new_parent, new_name, comment)

    def change_activity(self, path: Path, from_activity: str, to_activity: str) -> None:
        self._record("chactivity", path, from_activity, to_activity)

    def checkout_comment(self, path: Path) -> Optional[str]:
        return self.comments.get(canonical(path))

    def activity_of_view(self, path: Path) -> Optional[str]:
        return self.view_activities.get(canonical(path))

    def checkout_activity(self, path: Path) -> Optional[str]:
        return self.checkout_activities.get(canonical(path))


# Auto-register on import
from ..core.registry import register

register("dry-run", RecordingBackend)
