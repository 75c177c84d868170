"""Storage backends for temporary upload I/O."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from upload_tokens.storage.backends.base import StorageBackend, UrlCapability
from upload_tokens.storage.backends.local import LocalStorageBackend

if TYPE_CHECKING:
    from upload_tokens.storage.config import StorageConfig

BackendFactory = Callable[["StorageConfig"], StorageBackend]

_registry: dict[str, BackendFactory] = {
    "local": lambda config: LocalStorageBackend(config.root),
}


def register_backend(disk: str, factory: BackendFactory) -> None:
    """Register a backend factory under a disk identifier."""
    _registry[disk] = factory


def get_backend(disk: str, config: "StorageConfig") -> StorageBackend:
    """Build the backend for a disk identifier.

    Raises:
        KeyError: If no backend is registered for the disk.
    """
    try:
        factory = _registry[disk]
    except KeyError:
        raise KeyError(f"No storage backend registered for disk '{disk}'") from None
    return factory(config)


__all__ = [
    "LocalStorageBackend",
    "StorageBackend",
    "UrlCapability",
    "get_backend",
    "register_backend",
]
