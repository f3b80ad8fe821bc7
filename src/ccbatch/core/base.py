# SPDX-License-Identifier: Apache-2.0
"""Abstract base class for version-control backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ..config import ReconcilerConfig


class Backend(ABC):
    """
    Abstract base class for path-addressed version-control backends.

    Implementations should:
    1. Extend this class
    2. Implement all abstract methods
    3. Register themselves using registry.register()

    Every mutating operation either returns normally or raises
    BackendError describing the single operation that failed.
    """

    def __init__(self, config: Optional[ReconcilerConfig] = None):
        self.config = config or ReconcilerConfig()

    @classmethod
    @abstractmethod
    def name(cls) -> str:
        """Registry name of the backend (e.g. 'cleartool')."""
        pass

    @abstractmethod
    def add_file(self, path: Path, comment: Optional[str]) -> None:
        """
        Put a new file or folder under version control.

        The containing folder must already be known to the backend.

        Raises:
            BackendError: If the element could not be created
        """
        pass

    @abstractmethod
    def remove_file(self, path: Path, comment: Optional[str]) -> None:
        """
        Remove an element name from its containing folder.

        Raises:
            BackendError: If the removal fails
        """
        pass

    @abstractmethod
    def checkin_file(self, path: Path, comment: Optional[str]) -> None:
        """
        Check in a modified, checked-out element.

        Raises:
            BackendError: If the checkin fails
        """
        pass

    @abstractmethod
    def rename_and_checkin(self, old_path: Path, new_name: str, comment: Optional[str]) -> None:
        """
        Rename an element within its folder and check the result in.

        Args:
            old_path: Current backend path of the element
            new_name: New leaf name
            comment: Checkin comment
        """
        pass

    @abstractmethod
    def move_rename_and_checkin(
        self, old_path: Path, new_parent: Path, new_name: str, comment: Optional[str]
    ) -> None:
        """
        Move an element to another folder under a (possibly) new leaf name.

        Args:
            old_path: Current backend path of the element
            new_parent: Destination folder
            new_name: New leaf name
            comment: Checkin comment
        """
        pass

    @abstractmethod
    def change_activity(self, path: Path, from_activity: str, to_activity: str) -> None:
        """
        Move the latest version of *path* from one activity to another.
        """
        pass

    @abstractmethod
    def checkout_comment(self, path: Path) -> Optional[str]:
        """Comment given when *path* was checked out, if any."""
        pass

    @abstractmethod
    def activity_of_view(self, path: Path) -> Optional[str]:
        """Current activity of the view that contains *path*."""
        pass

    @abstractmethod
    def checkout_activity(self, path: Path) -> Optional[str]:
        """Activity *path* was checked out under."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name()!r})"
