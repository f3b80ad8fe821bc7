# SPDX-License-Identifier: Apache-2.0
"""Exception hierarchy for commit reconciliation."""

from pathlib import Path
from typing import Optional


class CCBatchError(Exception):
    """Base exception for all ccbatch errors."""

    pass


class ConfigError(CCBatchError):
    """Invalid configuration value."""

    pass


class StateFileError(CCBatchError):
    """Pending-path state file could not be read or written."""

    pass


class BatchFileError(CCBatchError):
    """Batch description file is malformed."""

    pass


class BackendNotFoundError(CCBatchError):
    """No backend registered under the requested name."""

    pass


class BackendError(CCBatchError):
    """A single backend operation failed.

    One instance is produced per failed operation. The reconciler collects
    these instead of letting them abort the batch.
    """

    def __init__(self, operation: str, path: Optional[Path], reason: str):
        self.operation = operation
        self.path = path
        self.reason = reason
        where = f" {path}" if path is not None else ""
        super().__init__(f"{operation}{where}: {reason}")


class CommitCancelled(CCBatchError):
    """Commit was cancelled through the progress sink.

    Used for early exit only; never reported as a failure.
    """

    pass
