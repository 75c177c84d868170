"""Handle for one temporarily stored upload.

Wraps a (disk, path) pair and exposes identity, size, mime type,
previewability and byte-level operations, delegating I/O to the backend.

Examples:
    >>> ref = TemporaryUploadedFile.from_stored_name(stored_name, config, backend)
    >>> await ref.original_name()
    'My Report (Final).pdf'
    >>> ref.serialize()
    'livewire-file:...'
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, AsyncIterator
from urllib.parse import quote_plus

from upload_tokens.storage.backends import get_backend
from upload_tokens.storage.backends.base import StorageBackend, UrlCapability
from upload_tokens.storage.config import StorageConfig
from upload_tokens.storage.errors import NotPreviewableError
from upload_tokens.storage.mime import detect_mime_type, is_generic
from upload_tokens.storage.naming import (
    basename,
    decode_stored_name,
    extension_of,
    hash_name,
)
from upload_tokens.storage.sidecar import TruncationSidecarStore
from upload_tokens.storage.signing import end_of_hour, temporary_signed_route

logger = logging.getLogger(__name__)

SINGLE_PREFIX = "livewire-file:"
BATCH_PREFIX = "livewire-files:"


class TemporaryUploadedFile:
    """A temporarily stored upload addressed by disk and path.

    The embedded name is decoded at construction, so a malformed stored
    name fails here rather than on first use.

    Attributes:
        disk: Identifier of the storage disk.
        path: Disk-relative path of the bytes.
        backend: Storage backend for the disk.
        config: Storage configuration.
        sidecars: Sidecar store for truncated original names.
    """

    def __init__(
        self,
        path: str,
        disk: str,
        backend: StorageBackend,
        config: StorageConfig,
        sidecars: TruncationSidecarStore | None = None,
    ) -> None:
        self.disk = disk
        self.path = path.strip("/")
        self.backend = backend
        self.config = config
        self.sidecars = sidecars or TruncationSidecarStore(config, backend)
        self._decoded = decode_stored_name(self.path)

    @classmethod
    def from_stored_name(
        cls,
        stored_name: str,
        config: StorageConfig,
        backend: StorageBackend | None = None,
    ) -> "TemporaryUploadedFile":
        """Build a reference to a stored name in the configured temporary directory."""
        backend = backend or get_backend(config.disk, config)
        return cls(config.path(basename(stored_name)), config.disk, backend, config)

    def __repr__(self) -> str:
        return f"TemporaryUploadedFile(disk={self.disk!r}, path={self.path!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TemporaryUploadedFile):
            return NotImplemented
        return (self.disk, self.path) == (other.disk, other.path)

    def __hash__(self) -> int:
        return hash((self.disk, self.path))

    @property
    def filename(self) -> str:
        """Stored (encoded) name of the file."""
        return basename(self.path)

    @property
    def extension(self) -> str:
        """Lower-cased extension embedded in the stored name."""
        return extension_of(self.path)

    @property
    def is_truncated(self) -> bool:
        """Whether the original name lives in a sidecar."""
        return self._decoded.is_truncated

    def is_valid(self) -> bool:
        """Temporary uploads were validated when stored."""
        return True

    async def original_name(self) -> str:
        """Client filename at upload time.

        Falls back to the truncation marker if the sidecar is missing.
        """
        if not self._decoded.is_truncated:
            return self._decoded.name
        name = await self.sidecars.read(self.filename)
        return name if name is not None else self._decoded.name

    async def size(self) -> int:
        """Size in bytes."""
        return await self.backend.size(self.path)

    async def mime_type(self) -> str:
        """Mime type, sniffing the content when the backend reports a placeholder."""
        mime = await self.backend.mime_type(self.path)
        if not is_generic(mime):
            return mime
        data = await self.backend.get(self.path)
        return detect_mime_type(data, self.filename)

    def is_previewable(self) -> bool:
        """Check the extension against the preview allow-list."""
        return self.extension in self.config.preview_mimes

    async def temporary_url(self) -> str:
        """Time-limited URL for previewing the file.

        Raises:
            NotPreviewableError: If the extension is not previewable.
        """
        if not self.is_previewable():
            raise NotPreviewableError(self.filename, self.extension)

        capability = self.backend.url_capability
        now = datetime.now(timezone.utc)
        ttl = timedelta(hours=self.config.temporary_url_ttl_hours)

        if capability == UrlCapability.NATIVE_EXPIRING:
            original = await self.original_name()
            disposition = f'attachment; filename="{quote_plus(original)}"'
            return await self.backend.issue_temporary_url(
                self.path,
                end_of_hour(now + ttl) - now,
                {"ResponseContentDisposition": disposition},
            )

        if capability == UrlCapability.GENERIC_TEMPORARY:
            return await self.backend.issue_temporary_url(self.path, ttl)

        return temporary_signed_route(self.filename, self.config)

    def read_stream(self) -> AsyncIterator[bytes]:
        """Stream the file contents."""
        return self.backend.read_stream(self.path)

    async def get(self) -> bytes:
        """Read the whole file."""
        return await self.backend.get(self.path)

    async def exists(self) -> bool:
        """Check whether the bytes are still stored."""
        return await self.backend.exists(self.path)

    async def delete(self) -> bool:
        """Delete the file, and its sidecar if the name was truncated."""
        deleted = await self.backend.delete(self.path)
        if self._decoded.is_truncated:
            await self.sidecars.delete(self.filename)
        logger.info(f"Temporary upload deleted: {self.path}")
        return deleted

    def real_path(self) -> str:
        """Backend-resolved location of the file."""
        return self.backend.path(self.path)

    def directory_path(self) -> str:
        """Backend-resolved location of the temporary directory."""
        return self.backend.path(self.config.directory)

    async def store_as(
        self,
        path: str,
        name: str | None = None,
        options: dict[str, Any] | str | None = None,
    ) -> str:
        """Copy the file to a permanent location.

        Args:
            path: Target directory.
            name: Target filename (appended to path if given).
            options: Write options; "disk" selects the target disk. A plain
                string is treated as the disk.

        Returns:
            Final path with leading/trailing separators removed.
        """
        if isinstance(options, str):
            options = {"disk": options}
        options = dict(options or {})
        disk = options.pop("disk", None) or self.disk

        target = self.backend if disk == self.disk else get_backend(disk, self.config)
        new_path = f"{path.rstrip('/')}/{name or ''}".strip("/")

        await target.put(new_path, self.read_stream(), options)
        logger.info(f"Temporary upload stored: {self.path} -> {disk}:{new_path}")
        return new_path

    async def store(self, path: str = "", options: dict[str, Any] | str | None = None) -> str:
        """Copy the file under a freshly generated random name."""
        return await self.store_as(path, hash_name(self.extension), options)

    def serialize(self) -> str:
        """Single wire token for this reference."""
        return SINGLE_PREFIX + self.filename
