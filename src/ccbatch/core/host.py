# SPDX-License-Identifier: Apache-2.0
"""Capabilities the reconciler needs from its host.

The reconciler never talks to a UI toolkit. Everything it needs from the
surrounding application (file status, change lists, dirty marking,
progress and cancellation) is injected through these small interfaces.
Each comes with a do-nothing default.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Iterable, List, Mapping, Optional

from .changes import Change, FileStatus
from .paths import PathLike, canonical


class StatusOracle(ABC):
    """Reports the VCS status of a path."""

    @abstractmethod
    def status_of(self, path: Path) -> FileStatus:
        pass


class MappingStatusOracle(StatusOracle):
    """Status oracle backed by a plain mapping.

    Paths not present in the mapping are answered by *fallback* when one
    is given, otherwise they report *default*.
    """

    def __init__(
        self,
        statuses: Optional[Mapping[PathLike, FileStatus]] = None,
        default: FileStatus = FileStatus.NOT_CHANGED,
        fallback: Optional[StatusOracle] = None,
    ):
        self._statuses = {canonical(p): s for p, s in (statuses or {}).items()}
        self._default = default
        self._fallback = fallback

    def set(self, path: PathLike, status: FileStatus) -> None:
        self._statuses[canonical(path)] = status

    def status_of(self, path: Path) -> FileStatus:
        p = canonical(path)
        if p in self._statuses:
            return self._statuses[p]
        if self._fallback is not None:
            return self._fallback.status_of(p)
        return self._default


class ChangeListHost:
    """Access to the host's change-list bookkeeping."""

    def change_for(self, path: Path) -> Optional[Change]:
        """Return the host's pending change for *path*, if it tracks one."""
        return None

    def changelist_name(self, path: Path) -> Optional[str]:
        """Name of the changelist (activity) *path* currently belongs to."""
        return None

    def clear_conflict(self, path: Path) -> None:
        """Drop any transient merge-conflict marker on *path*."""


class DirtyNotifier:
    """Tells the host which paths need their status recomputed."""

    def mark_dirty(self, path: Path) -> None:
        pass

    def mark_dirty_later(self, path: Path) -> None:
        """Schedule a dirty mark on the host's own loop. Fire-and-forget."""
        self.mark_dirty(path)

    def refresh(self, paths: Iterable[Path]) -> None:
        pass


class DeferredNotifier(DirtyNotifier):
    """Notifier that queues deferred marks until :meth:`flush`.

    Args:
        on_dirty: Optional callback invoked for every dirty path.
    """

    def __init__(self, on_dirty: Optional[Callable[[Path], None]] = None):
        self._on_dirty = on_dirty
        self.dirty: List[Path] = []
        self.deferred: List[Path] = []
        self.refreshed: List[Path] = []

    def mark_dirty(self, path: Path) -> None:
        self.dirty.append(path)
        if self._on_dirty is not None:
            self._on_dirty(path)

    def mark_dirty_later(self, path: Path) -> None:
        self.deferred.append(path)

    def flush(self) -> None:
        pending, self.deferred = self.deferred, []
        for path in pending:
            self.mark_dirty(path)

    def refresh(self, paths: Iterable[Path]) -> None:
        self.refreshed.extend(sorted(paths, key=str))


class ProgressSink:
    """Progress reporting and cooperative cancellation."""

    def start(self, total: int) -> None:
        pass

    def advance(self, text: str) -> None:
        pass

    def is_cancelled(self) -> bool:
        return False


class CancelAfter(ProgressSink):
    """Progress sink that requests cancellation at a chosen point.

    Cancels once *steps* advances were reported, or as soon as *text* has
    been reported, whichever is configured.
    """

    def __init__(self, steps: Optional[int] = None, text: Optional[str] = None):
        self._steps = steps
        self._text = text
        self._cancelled = False
        self.total = 0
        self.reported: List[str] = []

    def start(self, total: int) -> None:
        self.total = total

    def advance(self, text: str) -> None:
        self.reported.append(text)
        if self._steps is not None and len(self.reported) >= self._steps:
            self._cancelled = True
        if self._text is not None and text == self._text:
            self._cancelled = True

    def cancel(self) -> None:
        self._cancelled = True

    def is_cancelled(self) -> bool:
        return self._cancelled
