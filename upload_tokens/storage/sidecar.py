"""Out-of-band storage for original filenames too long to embed.

A sidecar lives next to the temporary uploads on the same backend:

    {directory}/meta/{stored_name}.name

and holds the original filename verbatim (UTF-8).
"""

from __future__ import annotations

import logging

from upload_tokens.storage.backends.base import StorageBackend
from upload_tokens.storage.config import StorageConfig
from upload_tokens.storage.naming import basename

logger = logging.getLogger(__name__)

SIDECAR_DIRECTORY = "meta"
SIDECAR_SUFFIX = ".name"


class TruncationSidecarStore:
    """Reads and writes original-name sidecars for truncated uploads.

    Attributes:
        config: Storage configuration.
        backend: Backend shared with the primary files.
    """

    def __init__(self, config: StorageConfig, backend: StorageBackend) -> None:
        self.config = config
        self.backend = backend

    def meta_path(self, stored_name: str) -> str:
        """Sidecar path for a stored name (or a path ending in one)."""
        return self.config.path(f"{SIDECAR_DIRECTORY}/{basename(stored_name)}{SIDECAR_SUFFIX}")

    async def write(self, stored_name: str, original_name: str) -> str:
        """Persist the original filename.

        Returns:
            Sidecar path.
        """
        meta_path = self.meta_path(stored_name)
        await self.backend.put(meta_path, original_name.encode("utf-8"))
        logger.debug(f"Sidecar written: {meta_path}")
        return meta_path

    async def read(self, stored_name: str) -> str | None:
        """Read the original filename, or None if the sidecar is missing."""
        meta_path = self.meta_path(stored_name)
        if not await self.backend.exists(meta_path):
            logger.warning(f"Sidecar missing for truncated upload: {meta_path}")
            return None
        data = await self.backend.get(meta_path)
        return data.decode("utf-8")

    async def delete(self, stored_name: str) -> bool:
        """Remove the sidecar if present."""
        meta_path = self.meta_path(stored_name)
        if not await self.backend.exists(meta_path):
            return False
        return await self.backend.delete(meta_path)
