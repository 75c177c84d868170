"""Abstract base class for storage backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import timedelta
from enum import Enum
from typing import Any, AsyncIterator


class UrlCapability(str, Enum):
    """How a backend hands out time-limited URLs.

    - NATIVE_EXPIRING: Remote object store issuing expiring URLs itself,
      honouring response headers such as content disposition
    - GENERIC_TEMPORARY: Adapter with a generic temporary-URL capability
    - SELF_SIGNED: No URL support; this service signs its own preview links
    """

    NATIVE_EXPIRING = "native_expiring"
    GENERIC_TEMPORARY = "generic_temporary"
    SELF_SIGNED = "self_signed"


class StorageBackend(ABC):
    """Abstract storage backend addressed by disk-relative path.

    Implementations handle byte I/O only and know nothing about how
    stored names are encoded.
    """

    url_capability: UrlCapability = UrlCapability.SELF_SIGNED

    @abstractmethod
    async def put(
        self,
        path: str,
        data: bytes | AsyncIterator[bytes],
        options: dict[str, Any] | None = None,
    ) -> None:
        """Write bytes (or a stream of chunks) to a path.

        Args:
            path: Disk-relative file path.
            data: Bytes or an async iterator of byte chunks.
            options: Backend-specific write options (visibility, headers...).
        """

    @abstractmethod
    async def get(self, path: str) -> bytes:
        """Read the whole file.

        Raises:
            FileNotFoundError: If the path does not exist.
        """

    @abstractmethod
    def read_stream(self, path: str) -> AsyncIterator[bytes]:
        """Stream the file as byte chunks."""

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """Check if a path exists."""

    @abstractmethod
    async def delete(self, path: str) -> bool:
        """Delete a file.

        Returns:
            True if a file was removed.
        """

    @abstractmethod
    async def size(self, path: str) -> int:
        """Size of the file in bytes."""

    @abstractmethod
    async def mime_type(self, path: str) -> str:
        """Mime type reported by the backend (may be a generic placeholder)."""

    @abstractmethod
    def path(self, path: str) -> str:
        """Resolve a disk-relative path to an absolute path or URI."""

    async def issue_temporary_url(
        self,
        path: str,
        ttl: timedelta,
        options: dict[str, Any] | None = None,
    ) -> str:
        """Issue an expiring URL for a path.

        Only backends whose url_capability is not SELF_SIGNED implement this.
        """
        raise NotImplementedError(
            f"{type(self).__name__} does not issue temporary URLs"
        )
