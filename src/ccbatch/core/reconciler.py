# SPDX-License-Identifier: Apache-2.0
"""CommitReconciler - replays a batch of pending changes against a backend.

Path-addressed backends such as ClearCase impose structural ordering on a
commit: a folder must exist before a file can be added to it, and a file
inside a renamed folder can only be checked in once the folder rename
itself is in. The reconciler turns an unordered batch into four phases:

1. renamed folders
2. new folders (outermost first), then new files
3. deletions
4. modifications and file renames

Each phase runs to completion before the next. Backend failures are
collected and returned; one failing path never blocks its siblings.

Example:
    reconciler = CommitReconciler(backend, oracle)
    errors = reconciler.commit([Change.new("/v/a/b", is_dir=True),
                                Change.new("/v/a/b/c.txt")], "initial")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Set, Tuple

from ..config import ReconcilerConfig
from ..exceptions import BackendError, CommitCancelled
from .base import Backend
from .changes import Change, FileStatus, UNSUBMITTED
from .host import ChangeListHost, DirtyNotifier, ProgressSink, StatusOracle
from .paths import (
    PathLike,
    ancestors,
    canonical,
    depth,
    is_under,
    rebase,
    sort_outermost_first,
)
from .pending import PendingPathIndex

log = logging.getLogger(__name__)

COMMENT_SEPARATOR = "\n-----"


class _Dispatch:
    """State of a single commit invocation."""

    def __init__(self, comment: Optional[str], progress: ProgressSink):
        self.comment = comment
        self.progress = progress
        self.errors: List[BackendError] = []
        self.processed: Set[Path] = set()
        self.moved_folders: List[Tuple[Path, Path]] = []

    def relocate(self, path: Path) -> Path:
        """Where *path* lives on the backend after this run's folder renames."""
        for old, new in self.moved_folders:
            path = rebase(path, old, new)
        return path

    def checkpoint(self) -> None:
        if self.progress.is_cancelled():
            raise CommitCancelled()

    def step(self, path: Path) -> None:
        self.progress.advance(str(path))
        self.checkpoint()


class CommitReconciler:
    """
    Orders and dispatches commit batches and owns the pending-path index.

    Args:
        backend: Backend adapter receiving the primitive operations
        oracle: Reports the status of ancestor folders
        index: Pending-path state; a fresh one is created if omitted
        host: Change-list access (folder-rename expansion, UCM activities)
        notifier: Dirty marking and post-commit refresh
        config: Reconciler settings (defaults to the backend's config)
    """

    def __init__(
        self,
        backend: Backend,
        oracle: StatusOracle,
        *,
        index: Optional[PendingPathIndex] = None,
        host: Optional[ChangeListHost] = None,
        notifier: Optional[DirtyNotifier] = None,
        config: Optional[ReconcilerConfig] = None,
    ):
        self._backend = backend
        self._oracle = oracle
        self._index = index if index is not None else PendingPathIndex()
        self._host = host or ChangeListHost()
        self._notifier = notifier or DirtyNotifier()
        self._config = config or backend.config

    @property
    def index(self) -> PendingPathIndex:
        return self._index

    @property
    def config(self) -> ReconcilerConfig:
        return self._config

    # -- commit -----------------------------------------------------------

    def commit(
        self,
        changes: Sequence[Change],
        comment: Optional[str],
        progress: Optional[ProgressSink] = None,
    ) -> List[BackendError]:
        """
        Replay *changes* against the backend in dependency order.

        Args:
            changes: Pending changes; the sequence itself is not modified
            comment: Checkin comment used for every operation
            progress: Progress sink polled for cancellation

        Returns:
            Errors from every failed backend operation (empty on success).
            Cancellation is not an error; operations already applied stay.
        """
        batch = list(changes)
        run = _Dispatch(comment, progress or ProgressSink())

        for change in batch:
            if change.target is not None:
                self._host.clear_conflict(change.target)

        self._expand_renamed_folders(batch)
        log.debug("committing %d change(s)", len(batch))

        try:
            run.progress.start(len(batch))
            self._commit_renamed_folders(batch, run)
            self._commit_new(batch, run)
            self._commit_deleted(batch, run)
            self._commit_changed(batch, run)
        except CommitCancelled:
            log.info(
                "commit cancelled after %d path(s), %d error(s)",
                len(run.processed), len(run.errors),
            )

        self._notifier.refresh(run.processed)
        return run.errors

    def _call(self, run: _Dispatch, op: Callable[..., None], *args) -> bool:
        """Invoke a backend primitive, recording its failure. Returns success."""
        run.checkpoint()
        try:
            op(*args)
        except BackendError as e:
            log.warning("%s", e)
            run.errors.append(e)
            return False
        return True

    def _query(self, op: Callable[[Path], Optional[str]], path: Path) -> Optional[str]:
        """Run a read-only backend lookup; a failed lookup counts as no answer."""
        try:
            return op(path)
        except BackendError as e:
            log.debug("lookup failed for %s: %s", path, e)
            return None

    def _expand_renamed_folders(self, batch: List[Change]) -> None:
        """Append pending folder renames that the batch depends on.

        A file inside a renamed but uncommitted folder can only be checked
        in after the folder rename, so the folder joins the batch unless the
        batch already submits that exact folder.
        """
        pending = dict(self._index.pending_folder_renames())
        if not pending:
            return

        needed = []
        for change in batch:
            target = change.target
            if target is None:
                continue
            for folder in pending:
                if is_under(target, folder) and folder not in needed:
                    needed.append(folder)

        submitted = {c.target for c in batch if c.target is not None}
        for folder in sort_outermost_first(needed):
            if folder in submitted:
                continue
            change = self._host.change_for(folder)
            if change is None:
                change = Change.folder_rename(pending[folder], folder)
            log.debug("adding pending folder rename %s -> %s", change.source, folder)
            batch.append(change)

    def _commit_renamed_folders(self, batch: Sequence[Change], run: _Dispatch) -> None:
        renames = [c for c in batch if c.is_folder_rename]
        # An enclosing folder settles before anything renamed inside it.
        renames.sort(key=lambda c: (depth(c.path), str(c.path)))
        for change in renames:
            source = run.relocate(change.source)
            ok = self._call(
                run, self._backend.rename_and_checkin,
                source, change.path.name, run.comment,
            )
            if ok:
                self._index.settle_folder_rename(change.path)
                run.moved_folders.append((source, change.path))
            elif self._config.drain_failed_folder_renames:
                self._index.drain_folder_rename(change.path)
            run.processed.add(change.path)
            run.step(change.path)

    def _commit_new(self, batch: Sequence[Change], run: _Dispatch) -> None:
        folders: Set[Path] = set()
        files: List[Change] = []
        seen: Set[Path] = set()

        for change in batch:
            if not change.is_new:
                continue
            if change.is_dir:
                folders.add(change.path)
            elif change.path not in seen:
                seen.add(change.path)
                files.append(change)
            folders.update(self.analyze_parent(change.path))

        run.processed.update(folders)
        run.processed.update(f.path for f in files)

        # Add all folders first, then the files that live in them.
        for folder in sort_outermost_first(folders):
            if self._call(run, self._backend.add_file, folder, run.comment):
                self._index.drain_new(folder)

        for change in files:
            if self._call(run, self._backend.add_file, change.path, run.comment):
                self._index.drain_new(change.path)
            if self._config.use_ucm:
                self._reassign_activity(
                    run, change, self._query(self._backend.activity_of_view, change.path)
                )
            run.step(change.path)

    def analyze_parent(self, path: PathLike) -> Set[Path]:
        """
        Collect the ancestors of *path* the backend does not know yet.

        Walks upwards while the status is ADDED or UNKNOWN and stops at the
        first ancestor already under version control.
        """
        required: Set[Path] = set()
        for parent in ancestors(path):
            if self._oracle.status_of(parent) not in UNSUBMITTED:
                break
            required.add(parent)
        return required

    def _commit_deleted(self, batch: Sequence[Change], run: _Dispatch) -> None:
        for change in batch:
            if not change.is_deleted:
                continue
            path = run.relocate(change.source)
            if self._call(run, self._backend.remove_file, path, run.comment):
                self._index.drain_removal(path)
                self._index.drain_removal(change.source)
            self._notifier.mark_dirty_later(path)
            run.step(path)

    def _commit_changed(self, batch: Sequence[Change], run: _Dispatch) -> None:
        for change in batch:
            if change.is_new or change.is_deleted or change.is_dir:
                continue
            path = change.path
            old_path = self._index.old_path_of(path)
            if old_path is None and change.old_path is not None:
                old_path = run.relocate(change.old_path)
            if old_path == path:
                # Only an enclosing folder moved, and that rename is in.
                self._index.drain_file_rename(path)
                old_path = None

            if old_path is not None:
                # Same parent folder means a plain rename, otherwise the
                # element moves across folders.
                if old_path.parent == path.parent:
                    ok = self._call(
                        run, self._backend.rename_and_checkin,
                        old_path, path.name, run.comment,
                    )
                else:
                    ok = self._call(
                        run, self._backend.move_rename_and_checkin,
                        old_path, path.parent, path.name, run.comment,
                    )
                if ok:
                    self._index.drain_file_rename(path)
            else:
                self._call(run, self._backend.checkin_file, path, run.comment)

            if self._config.use_ucm:
                self._reassign_activity(
                    run, change, self._query(self._backend.checkout_activity, path)
                )
            run.processed.add(path)
            run.step(path)

    def _reassign_activity(
        self, run: _Dispatch, change: Change, activity: Optional[str]
    ) -> None:
        """Move *change* to its changelist's activity if it was recorded elsewhere."""
        current = change.activity or self._host.changelist_name(change.path)
        if activity is None or current is None or activity == current:
            return
        log.debug("moving %s from activity %s to %s", change.path, activity, current)
        self._call(run, self._backend.change_activity, change.path, activity, current)

    # -- host-driven scheduling --------------------------------------------

    def schedule_deletion(self, paths: Iterable[PathLike]) -> List[BackendError]:
        """
        Confirm local deletions of files and folders missing from disk.

        Paths pending removal are removed in the backend right away. Every
        path is drained from the removal sets afterwards, so calling this
        twice for the same path is harmless.
        """
        errors: List[BackendError] = []
        for raw in paths:
            path = canonical(raw)
            if self._index.is_removed(path):
                try:
                    self._backend.remove_file(path, None)
                except BackendError as e:
                    log.warning("%s", e)
                    errors.append(e)
            self._index.drain_removal(path)
        return errors

    def schedule_addition(self, paths: Iterable[PathLike]) -> List[BackendError]:
        """
        Mark unversioned paths (and unknown parent folders) as pending-new.

        Nothing reaches the backend here; the additions are submitted by
        the next commit. Always returns an empty list.
        """
        for raw in paths:
            path = canonical(raw)
            self._mark_new(path)
            # Carry the status up to parents outside the user's selection.
            for parent in ancestors(path):
                if self._oracle.status_of(parent) is not FileStatus.UNKNOWN:
                    break
                self._mark_new(parent)
        return []

    def mark_for_addition(self, path: PathLike) -> bool:
        """Mark a single unknown path as pending-new. Returns True if marked."""
        p = canonical(path)
        if self._oracle.status_of(p) is not FileStatus.UNKNOWN:
            return False
        self._mark_new(p)
        return True

    def _mark_new(self, path: Path) -> None:
        self._index.record_new(path)
        self._notifier.mark_dirty(path)

    # -- messages ---------------------------------------------------------

    def default_message(self, paths: Iterable[PathLike]) -> Optional[str]:
        """
        Build a commit message from the checkout comments of *paths*.

        Distinct comments are kept in first-seen order, each followed by a
        separator line. Returns None when no path has a comment, so the
        caller can fall back to its previous message.
        """
        comments: List[str] = []
        for raw in paths:
            comment = self._query(self._backend.checkout_comment, canonical(raw))
            if comment and comment not in comments:
                comments.append(comment)
        if not comments:
            return None
        return "".join(c + COMMENT_SEPARATOR for c in comments)

    def __repr__(self) -> str:
        return f"CommitReconciler(backend={self._backend!r}, index={self._index!r})"
