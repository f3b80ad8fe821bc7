# SPDX-License-Identifier: Apache-2.0
"""ClearCase implementation of the Backend interface.

Drives the ``cleartool`` command line client:
- elements are created with ``mkelem`` inside a checked-out parent folder
- names are removed with ``rmname`` and moved with ``mv``
- folder versions touched by a structural change are checked in right away
- UCM activities are moved with ``chactivity``

Commands run without a shell, so comments need no quoting.
"""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional

from ..core.base import Backend
from ..core.changes import FileStatus
from ..core.host import StatusOracle
from ..exceptions import BackendError

log = logging.getLogger(__name__)

_ALREADY_CHECKED_OUT = "already checked out"
_NOT_CHECKED_OUT = "not checked out"
_VIEW_PRIVATE = "view private object"


def _comment_args(comment: Optional[str]) -> List[str]:
    return ["-c", comment] if comment else ["-nc"]


class CleartoolBackend(Backend):
    """Backend that shells out to ``cleartool`` for every primitive."""

    @classmethod
    def name(cls) -> str:
        return "cleartool"

    def run(
        self,
        operation: str,
        path: Optional[Path],
        args: List[str],
        cwd: Optional[Path] = None,
    ) -> str:
        """Run one cleartool command and return its stdout.

        Raises:
            BackendError: On a non-zero exit, a timeout or a missing executable.
        """
        cmd = [self.config.cleartool, *args]
        log.debug("> %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                cwd=str(cwd or self.config.view_root or Path.cwd()),
                capture_output=True,
                text=True,
                timeout=self.config.timeout,
                # Own session so a terminal Ctrl-C reaches ccbatch, not cleartool.
                start_new_session=True,
            )
        except subprocess.TimeoutExpired as e:
            raise BackendError(operation, path, f"timed out after {e.timeout}s") from e
        except OSError as e:
            raise BackendError(operation, path, f"cannot run {cmd[0]}: {e}") from e

        if result.returncode != 0:
            reason = (result.stderr + result.stdout).strip() or f"exit code {result.returncode}"
            raise BackendError(operation, path, reason)
        return result.stdout

    def _checkout_folder(self, operation: str, folder: Path) -> None:
        try:
            self.run(operation, folder, ["co", "-nc", str(folder)])
        except BackendError as e:
            if _ALREADY_CHECKED_OUT not in e.reason.lower():
                raise

    def _checkin_if_checked_out(self, operation: str, path: Path, comment: Optional[str]) -> None:
        try:
            self.run(operation, path, ["ci", *_comment_args(comment), "-identical", str(path)])
        except BackendError as e:
            if _NOT_CHECKED_OUT not in e.reason.lower():
                raise

    def add_file(self, path: Path, comment: Optional[str]) -> None:
        self._checkout_folder("add", path.parent)
        args = ["mkelem", *_comment_args(comment), "-ci"]
        if path.is_dir():
            args += ["-eltype", "directory"]
        self.run("add", path, args + [str(path)])
        self._checkin_if_checked_out("add", path.parent, comment)

    def remove_file(self, path: Path, comment: Optional[str]) -> None:
        self._checkout_folder("remove", path.parent)
        self.run("remove", path, ["rmname", *_comment_args(comment), str(path)])
        self._checkin_if_checked_out("remove", path.parent, comment)

    def checkin_file(self, path: Path, comment: Optional[str]) -> None:
        self.run("checkin", path, ["ci", *_comment_args(comment), "-identical", str(path)])

    def rename_and_checkin(self, old_path: Path, new_name: str, comment: Optional[str]) -> None:
        folder = old_path.parent
        new_path = folder / new_name
        self._checkout_folder("rename", folder)
        self.run("rename", old_path, ["mv", *_comment_args(comment), str(old_path), str(new_path)])
        self._checkin_if_checked_out("rename", folder, comment)
        self._checkin_if_checked_out("rename", new_path, comment)

    def move_rename_and_checkin(
        self, old_path: Path, new_parent: Path, new_name: str, comment: Optional[str]
    ) -> None:
        old_folder = old_path.parent
        new_path = new_parent / new_name
        self._checkout_folder("move", old_folder)
        self._checkout_folder("move", new_parent)
        self.run("move", old_path, ["mv", *_comment_args(comment), str(old_path), str(new_path)])
        self._checkin_if_checked_out("move", old_folder, comment)
        self._checkin_if_checked_out("move", new_parent, comment)
        self._checkin_if_checked_out("move", new_path, comment)

    def change_activity(self, path: Path, from_activity: str, to_activity: str) -> None:
        self.run(
            "chactivity", path,
            ["chactivity", "-fcset", from_activity, "-tcset", to_activity, str(path)],
        )

    def _describe(self, operation: str, path: Path, fmt: str) -> Optional[str]:
        out = self.run(operation, path, ["describe", "-fmt", fmt, str(path)]).strip()
        return out or None

    def checkout_comment(self, path: Path) -> Optional[str]:
        return self._describe("describe", path, "%c")

    def activity_of_view(self, path: Path) -> Optional[str]:
        cwd = path.parent if path.parent.is_dir() else None
        out = self.run("lsactivity", path, ["lsactivity", "-cact", "-short"], cwd=cwd).strip()
        return out or None

    def checkout_activity(self, path: Path) -> Optional[str]:
        return self._describe("describe", path, "%[activity]p")


class CleartoolStatusOracle(StatusOracle):
    """Status oracle answering from ``cleartool describe``.

    Anything cleartool cannot describe is treated as unknown to the backend.
    """

    def __init__(self, backend: CleartoolBackend):
        self._backend = backend

    def status_of(self, path: Path) -> FileStatus:
        try:
            out = self._backend.run("status", path, ["describe", "-fmt", "%m|%Vn", str(path)])
        except BackendError as e:
            log.debug("treating %s as unknown: %s", path, e.reason)
            return FileStatus.UNKNOWN
        kind, _, version = out.strip().partition("|")
        if kind == _VIEW_PRIVATE:
            return FileStatus.UNKNOWN
        if version.endswith("CHECKEDOUT"):
            return FileStatus.MODIFIED
        return FileStatus.NOT_CHANGED


# Auto-register on import
from ..core.registry import register

register("cleartool", CleartoolBackend)
