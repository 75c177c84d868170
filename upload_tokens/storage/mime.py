"""Content-based mime type fallback.

Backends often report a placeholder (octet-stream, empty-file) for files
they cannot sniff; these helpers look at the bytes and the filename instead.
"""

from __future__ import annotations

import logging
import mimetypes

import magic

logger = logging.getLogger(__name__)

GENERIC_MIME_TYPES = frozenset({
    "",
    "application/octet-stream",
    "inode/x-empty",
    "application/x-empty",
})
DEFAULT_MIME_TYPE = "text/plain"
SAMPLE_BYTES = 8192


def is_generic(mime_type: str | None) -> bool:
    """Check whether a sniffed mime type is a generic placeholder."""
    return (mime_type or "") in GENERIC_MIME_TYPES


def detect_mime_type(data: bytes, filename: str = "") -> str:
    """Detect a mime type from raw bytes, then from the filename.

    Args:
        data: File contents (only the first SAMPLE_BYTES are inspected).
        filename: Filename used for an extension-based guess.

    Returns:
        Detected mime type, or DEFAULT_MIME_TYPE if nothing specific is found.
    """
    detected = magic.from_buffer(data[:SAMPLE_BYTES], mime=True) if data else ""
    if not is_generic(detected):
        return detected

    guessed, _ = mimetypes.guess_type(filename) if filename else (None, None)
    if guessed:
        return guessed

    logger.debug(f"No specific mime type for {filename or '<bytes>'}, using {DEFAULT_MIME_TYPE}")
    return DEFAULT_MIME_TYPE
