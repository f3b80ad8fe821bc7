# SPDX-License-Identifier: Apache-2.0
"""Backend registration and lookup."""

from typing import Dict, Optional, Type, TYPE_CHECKING

from .base import Backend
from ..exceptions import BackendNotFoundError

if TYPE_CHECKING:
    from ..config import ReconcilerConfig

# Global registry of backend implementations
_registry: Dict[str, Type[Backend]] = {}


def register(name: str, backend_class: Type[Backend]) -> None:
    """
    Register a backend implementation.

    Called by backend modules during import to register themselves.

    Args:
        name: Backend name (e.g., 'cleartool', 'dry-run')
        backend_class: Backend subclass implementing the primitives
    """
    _registry[name] = backend_class


def get_backend(name: str) -> Optional[Type[Backend]]:
    """
    Get backend implementation by name.

    Args:
        name: Backend name

    Returns:
        Backend subclass or None if not registered
    """
    _ensure_implementations_loaded()
    return _registry.get(name)


def create_backend(name: str, config: Optional["ReconcilerConfig"] = None) -> Backend:
    """
    Instantiate the backend registered under *name*.

    Raises:
        BackendNotFoundError: If no backend is registered under that name
    """
    backend_class = get_backend(name)
    if backend_class is None:
        raise BackendNotFoundError(
            f"Unknown backend '{name}'. "
            f"Supported backends: {', '.join(sorted(_registry)) or 'none'}"
        )
    return backend_class(config)


def list_supported() -> list[str]:
    """Return list of registered backend names."""
    _ensure_implementations_loaded()
    return sorted(_registry.keys())


def _ensure_implementations_loaded() -> None:
    """Ensure all bundled backends are loaded.

    Imports backend modules which register themselves on import.
    """
    if "cleartool" not in _registry:
        from ..backends import cleartool as _  # noqa: F401
    if "dry-run" not in _registry:
        from ..backends import recording as _  # noqa: F401
