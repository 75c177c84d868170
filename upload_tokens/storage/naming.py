"""Stored-name encoding for temporary uploads.

Packs a random hash, the client's original filename and its extension into
one filesystem-safe name, and reverses it.

Format: {hash30}-meta{base64(original_name)}-.{extension}

with the base64 alphabet's "/" replaced by "_" ("+" and "=" are kept).
Original names longer than MAX_EMBED_LEN are replaced by a
"[truncated]..." marker; the real name goes to the sidecar store.

Examples:
    >>> from upload_tokens.storage.naming import encode_stored_name, decode_stored_name
    >>> name = encode_stored_name("My Report (Final).pdf", "pdf")
    >>> name[30:]
    '-metaTXkgUmVwb3J0IChGaW5hbCkucGRm-.pdf'
    >>> decode_stored_name(name).name
    'My Report (Final).pdf'
"""

from __future__ import annotations

import base64
import binascii
import secrets
import string
from typing import NamedTuple

from upload_tokens.storage.errors import InvalidStoredNameError

# Counted in code points. 255 max filename length - 30 hash - 5 "-meta" - 1 "-"
# - 5 extension - 159 * 4/3 base64 name = 2 spare holds for ASCII names only;
# multi-byte names can still exceed MAX_STORED_NAME_LEN.
MAX_EMBED_LEN = 159
MAX_STORED_NAME_LEN = 255
TRUNCATION_PREFIX = "[truncated]"
META_MARKER = "-meta"
HASH_LENGTH = 30

_ALPHABET = string.ascii_letters + string.digits
_EXTENSION_CHARS = frozenset(string.ascii_lowercase + string.digits)


class DecodedName(NamedTuple):
    """Result of decoding a stored name."""

    name: str
    is_truncated: bool


def random_hash(length: int = HASH_LENGTH) -> str:
    """Generate a cryptographically random alphanumeric string."""
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def clean_extension(extension: str) -> str:
    """Lower-case an extension and keep only [a-z0-9] (no "-" can reach decode)."""
    return "".join(c for c in extension.lower() if c in _EXTENSION_CHARS)


def hash_name(extension: str = "") -> str:
    """Generate a random 40 character filename with an optional extension."""
    name = random_hash(40)
    extension = clean_extension(extension)
    return f"{name}.{extension}" if extension else name


def requires_truncation(original_name: str) -> bool:
    """Check whether an original filename is too long to embed."""
    return len(original_name) > MAX_EMBED_LEN


def split_extension(filename: str) -> str:
    """Return the lower-cased extension of a client filename ('' if none)."""
    base = filename.rsplit("/", 1)[-1]
    if "." not in base.lstrip("."):
        return ""
    return clean_extension(base.rsplit(".", 1)[-1])


def encode_stored_name(
    original_name: str,
    extension: str,
    hash_str: str | None = None,
) -> str:
    """Encode an original filename into a stored name.

    Args:
        original_name: Client filename at upload time.
        extension: File extension; anything outside [a-z0-9] is dropped.
        hash_str: Override the random hash (defaults to 30 random chars).

    Returns:
        Filesystem-safe stored name.
    """
    embedded = original_name
    if requires_truncation(original_name):
        embedded = TRUNCATION_PREFIX + random_hash()

    if hash_str is None:
        hash_str = random_hash()

    encoded = base64.b64encode(embedded.encode("utf-8")).decode("ascii")
    meta = f"{META_MARKER}{encoded}-".replace("/", "_")
    extension = clean_extension(extension)
    return f"{hash_str}{meta}.{extension}"


def basename(path: str) -> str:
    """Final segment of a stored path."""
    return path.rstrip("/").rsplit("/", 1)[-1]


def decode_stored_name(stored_name: str) -> DecodedName:
    """Decode the embedded original filename from a stored name or path.

    Args:
        stored_name: Stored name, or a path whose final segment is one.

    Returns:
        DecodedName with the embedded name and whether it is a truncation marker.

    Raises:
        InvalidStoredNameError: If the marker is missing or the base64 is malformed.
    """
    name = basename(stored_name)
    if META_MARKER not in name:
        raise InvalidStoredNameError(f"Missing '{META_MARKER}' marker", name)

    segment = name.rsplit(META_MARKER, 1)[1].split("-", 1)[0]
    try:
        raw = base64.b64decode(segment.replace("_", "/"), validate=True)
        decoded = raw.decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise InvalidStoredNameError(f"Malformed embedded name: {e}", name) from e

    return DecodedName(decoded, decoded.startswith(TRUNCATION_PREFIX))


def extension_of(stored_name: str) -> str:
    """Lower-cased extension of a stored name."""
    name = basename(stored_name)
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[-1].lower()
