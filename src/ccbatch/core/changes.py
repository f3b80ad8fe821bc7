# SPDX-License-Identifier: Apache-2.0
"""Change records submitted to the reconciler."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .paths import PathLike, canonical


class ChangeKind(enum.Enum):
    NEW = "new"
    DELETED = "deleted"
    MODIFIED = "modified"
    RENAMED = "renamed"
    FOLDER_RENAME = "folder_rename"


class FileStatus(enum.Enum):
    """Status of a path as reported by the host's status oracle.

    ``UNKNOWN`` means the backend has never heard of the path (a
    view-private object in ClearCase terms).
    """

    UNKNOWN = "unknown"
    ADDED = "added"
    MODIFIED = "modified"
    NOT_CHANGED = "not_changed"
    DELETED = "deleted"
    UNVERSIONED = "unversioned"
    IGNORED = "ignored"


# Ancestors in one of these states still have to be created in the backend.
UNSUBMITTED = frozenset({FileStatus.ADDED, FileStatus.UNKNOWN})


@dataclass(frozen=True)
class Change:
    """A single pending change.

    Attributes:
        kind: What happened to the path.
        path: Path after the change. For deletions, the removed path.
        old_path: Path before the change (renames, modifications, deletions).
        is_dir: Whether the change concerns a folder.
        activity: Backend activity (UCM) or changelist the change belongs to.
    """

    kind: ChangeKind
    path: Path
    old_path: Optional[Path] = None
    is_dir: bool = False
    activity: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "path", canonical(self.path))
        if self.old_path is not None:
            object.__setattr__(self, "old_path", canonical(self.old_path))
        if self.kind is ChangeKind.RENAMED and self.is_dir:
            object.__setattr__(self, "kind", ChangeKind.FOLDER_RENAME)
        if self.kind is ChangeKind.FOLDER_RENAME:
            object.__setattr__(self, "is_dir", True)
            if self.old_path is None:
                raise ValueError(f"folder rename of {self.path} needs an old path")
        if self.kind is ChangeKind.RENAMED and self.old_path is None:
            raise ValueError(f"rename of {self.path} needs an old path")

    @classmethod
    def new(cls, path: PathLike, *, is_dir: bool = False, activity: Optional[str] = None) -> Change:
        return cls(ChangeKind.NEW, path, is_dir=is_dir, activity=activity)

    @classmethod
    def deleted(cls, path: PathLike, *, is_dir: bool = False) -> Change:
        return cls(ChangeKind.DELETED, path, old_path=path, is_dir=is_dir)

    @classmethod
    def modified(cls, path: PathLike, *, activity: Optional[str] = None) -> Change:
        return cls(ChangeKind.MODIFIED, path, old_path=path, activity=activity)

    @classmethod
    def renamed(
        cls, old_path: PathLike, path: PathLike, *, activity: Optional[str] = None
    ) -> Change:
        return cls(ChangeKind.RENAMED, path, old_path=old_path, activity=activity)

    @classmethod
    def folder_rename(cls, old_path: PathLike, path: PathLike) -> Change:
        return cls(ChangeKind.FOLDER_RENAME, path, old_path=old_path, is_dir=True)

    @property
    def is_new(self) -> bool:
        return self.kind is ChangeKind.NEW

    @property
    def is_deleted(self) -> bool:
        return self.kind is ChangeKind.DELETED

    @property
    def is_folder_rename(self) -> bool:
        return self.kind is ChangeKind.FOLDER_RENAME

    @property
    def target(self) -> Optional[Path]:
        """Path that exists after the change, or None for deletions."""
        if self.is_deleted:
            return None
        return self.path

    @property
    def source(self) -> Path:
        """Path the backend currently knows the element under."""
        return self.old_path if self.old_path is not None else self.path
