# SPDX-License-Identifier: Apache-2.0
"""
ccbatch - commit batch reconciliation for path-addressed VCS backends.

Takes an unordered batch of pending changes (adds, deletions,
modifications, file and folder renames) and replays it against a backend
such as ClearCase in an order the backend accepts, collecting failures
instead of aborting.

Layers are loaded lazily, importing only what you need:

    from ccbatch import Change               # only loads core types
    from ccbatch import CommitReconciler     # loads the reconciler
    from ccbatch import create_backend       # loads backend registry

Example:
    from ccbatch import Change, CommitReconciler, create_backend
    from ccbatch.backends.cleartool import CleartoolStatusOracle

    backend = create_backend("cleartool")
    reconciler = CommitReconciler(backend, CleartoolStatusOracle(backend))

    errors = reconciler.commit(
        [Change.new("/view/src/pkg", is_dir=True),
         Change.new("/view/src/pkg/mod.c")],
        "add pkg",
    )
"""

# Exceptions are lightweight and always available.
from .exceptions import (
    CCBatchError,
    ConfigError,
    StateFileError,
    BatchFileError,
    BackendNotFoundError,
    BackendError,
    CommitCancelled,
)

__all__ = [
    # Core
    "Change",
    "ChangeKind",
    "FileStatus",
    "PendingPathIndex",
    "CommitReconciler",
    "ReconcilerConfig",
    # Backends
    "Backend",
    "create_backend",
    "list_supported",
    # Host capabilities
    "StatusOracle",
    "MappingStatusOracle",
    "ChangeListHost",
    "DirtyNotifier",
    "ProgressSink",
    # Exceptions
    "CCBatchError",
    "ConfigError",
    "StateFileError",
    "BatchFileError",
    "BackendNotFoundError",
    "BackendError",
    "CommitCancelled",
]

__version__ = "0.1.0"

# Lazy imports: each layer loads only when first accessed.
_LAZY_IMPORTS = {
    # Core
    "Change": ".core.changes",
    "ChangeKind": ".core.changes",
    "FileStatus": ".core.changes",
    "PendingPathIndex": ".core.pending",
    "CommitReconciler": ".core.reconciler",
    "ReconcilerConfig": ".config",
    # Backends
    "Backend": ".core.base",
    "create_backend": ".core.registry",
    "list_supported": ".core.registry",
    # Host capabilities
    "StatusOracle": ".core.host",
    "MappingStatusOracle": ".core.host",
    "ChangeListHost": ".core.host",
    "DirtyNotifier": ".core.host",
    "ProgressSink": ".core.host",
}


def __getattr__(name: str):
    if name in _LAZY_IMPORTS:
        import importlib
        module = importlib.import_module(_LAZY_IMPORTS[name], __name__)
        value = getattr(module, name)
        # Cache on the module so __getattr__ isn't called again.
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
