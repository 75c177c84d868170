"""Upload service: stores temporary uploads and resolves them again.

Examples:
    >>> from upload_tokens.storage.service import TemporaryUploadService
    >>> service = TemporaryUploadService.from_config(config)
    >>> ref = await service.store_temporary_file("holiday.JPG", data)
    >>> ref.serialize()
    'livewire-file:...-.jpg'
"""

from __future__ import annotations

import logging
from typing import Iterable

from upload_tokens.storage.backends import get_backend
from upload_tokens.storage.backends.base import StorageBackend
from upload_tokens.storage.config import StorageConfig
from upload_tokens.storage.errors import StoredNameTooLongError
from upload_tokens.storage.naming import (
    MAX_STORED_NAME_LEN,
    encode_stored_name,
    requires_truncation,
    split_extension,
)
from upload_tokens.storage.reference import TemporaryUploadedFile
from upload_tokens.storage.sidecar import TruncationSidecarStore
from upload_tokens.storage.tokens import TokenDeserializer

logger = logging.getLogger(__name__)


class TemporaryUploadService:
    """Main orchestrator for temporary upload storage.

    Attributes:
        config: Storage configuration.
        backend: Storage backend for the configured disk.
        sidecars: Sidecar store sharing the backend.
    """

    def __init__(self, config: StorageConfig, backend: StorageBackend | None = None) -> None:
        self.config = config
        self.backend = backend or get_backend(config.disk, config)
        self.sidecars = TruncationSidecarStore(config, self.backend)

    @classmethod
    def from_config(cls, config: StorageConfig) -> "TemporaryUploadService":
        """Create a TemporaryUploadService from config."""
        return cls(config=config, backend=get_backend(config.disk, config))

    async def store_temporary_file(self, original_name: str, data: bytes) -> TemporaryUploadedFile:
        """Store uploaded bytes under a freshly encoded name.

        Args:
            original_name: Client filename.
            data: Uploaded bytes.

        Returns:
            Reference to the stored upload.

        Raises:
            StoredNameTooLongError: If the encoded name exceeds MAX_STORED_NAME_LEN.
            InvalidStoredNameError: If the encoded name does not decode.
        """
        stored_name = encode_stored_name(original_name, split_extension(original_name))
        if len(stored_name) > MAX_STORED_NAME_LEN:
            raise StoredNameTooLongError(stored_name, MAX_STORED_NAME_LEN)

        path = self.config.path(stored_name)
        ref = TemporaryUploadedFile(path, self.config.disk, self.backend, self.config, self.sidecars)

        await self.backend.put(path, data)
        if requires_truncation(original_name):
            await self.sidecars.write(stored_name, original_name)

        logger.info(f"Temporary upload stored: {path} ({len(data)} bytes)")
        return ref

    async def store_temporary_files(
        self,
        files: Iterable[tuple[str, bytes]],
    ) -> list[TemporaryUploadedFile]:
        """Store several uploads, preserving order."""
        return [await self.store_temporary_file(name, data) for name, data in files]

    def resolve(self, stored_name: str) -> TemporaryUploadedFile:
        """Reference for a stored name in the temporary directory."""
        return TemporaryUploadedFile.from_stored_name(stored_name, self.config, self.backend)

    def deserializer(self) -> TokenDeserializer:
        """Token deserializer bound to this service's disk."""
        return TokenDeserializer(self.config, self.backend)
