"""Local filesystem storage backend using pathlib."""

from __future__ import annotations

from pathlib import Path
from typing import Any, AsyncIterator

import magic

from upload_tokens.storage.backends.base import StorageBackend, UrlCapability

CHUNK_SIZE = 64 * 1024


class LocalStorageBackend(StorageBackend):
    """Pathlib-based local filesystem storage backend rooted at a directory."""

    url_capability = UrlCapability.SELF_SIGNED

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()

    def _resolve(self, path: str) -> Path:
        p = (self.root / path.lstrip("/")).resolve()
        if p != self.root and self.root not in p.parents:
            raise ValueError(f"Path escapes storage root: {path}")
        return p

    async def put(
        self,
        path: str,
        data: bytes | AsyncIterator[bytes],
        options: dict[str, Any] | None = None,
    ) -> None:
        """Write bytes or a chunk stream to a local file."""
        p = self._resolve(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(data, (bytes, bytearray)):
            p.write_bytes(data)
            return
        with p.open("wb") as fh:
            async for chunk in data:
                fh.write(chunk)

    async def get(self, path: str) -> bytes:
        """Read a local file."""
        return self._resolve(path).read_bytes()

    async def read_stream(self, path: str) -> AsyncIterator[bytes]:
        """Stream a local file in fixed-size chunks."""
        with self._resolve(path).open("rb") as fh:
            while chunk := fh.read(CHUNK_SIZE):
                yield chunk

    async def exists(self, path: str) -> bool:
        """Check if a local file exists."""
        return self._resolve(path).is_file()

    async def delete(self, path: str) -> bool:
        """Delete a local file."""
        p = self._resolve(path)
        if not p.is_file():
            return False
        p.unlink()
        return True

    async def size(self, path: str) -> int:
        """Size of a local file."""
        return self._resolve(path).stat().st_size

    async def mime_type(self, path: str) -> str:
        """Sniff the mime type of a local file with libmagic."""
        return magic.from_file(str(self._resolve(path)), mime=True)

    def path(self, path: str) -> str:
        """Absolute filesystem path."""
        return str(self._resolve(path))
