"""Self-signed preview URLs for backends without temporary URL support.

Signatures are HS256 JWTs carrying the stored filename and expiry, so the
preview route verifies them without any session state.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from urllib.parse import quote, urlencode

import jwt

from upload_tokens.storage.config import StorageConfig
from upload_tokens.storage.errors import InvalidSignatureError

logger = logging.getLogger(__name__)

PREVIEW_ROUTE = "/livewire/preview-file"
TOKEN_TYPE = "preview"


def end_of_hour(moment: datetime) -> datetime:
    """Last second of the hour containing moment."""
    return moment.replace(minute=59, second=59, microsecond=0)


def preview_expiry(config: StorageConfig, now: datetime | None = None) -> datetime:
    """Expiry for a new preview link: now + TTL, rounded to the end of the hour."""
    now = now or datetime.now(timezone.utc)
    return end_of_hour(now + timedelta(minutes=config.preview_url_ttl_minutes))


def create_preview_signature(filename: str, expires_at: datetime, config: StorageConfig) -> str:
    """Sign a stored filename until expires_at.

    Args:
        filename: Stored name of the temporary upload.
        expires_at: Expiry of the signature.
        config: Storage configuration holding the signing key.

    Returns:
        Encoded JWT string.
    """
    payload = {
        "filename": filename,
        "exp": expires_at,
        "type": TOKEN_TYPE,
    }
    return jwt.encode(payload, config.signing_key, algorithm="HS256")


def temporary_signed_route(
    filename: str,
    config: StorageConfig,
    expires_at: datetime | None = None,
) -> str:
    """Build a signed preview URL pointing at this service's preview route."""
    expires_at = expires_at or preview_expiry(config)
    signature = create_preview_signature(filename, expires_at, config)
    query = urlencode({"expires": int(expires_at.timestamp()), "signature": signature})
    base = config.app_url.rstrip("/")
    return f"{base}{PREVIEW_ROUTE}/{quote(filename, safe='')}?{query}"


def verify_preview_signature(filename: str, signature: str, config: StorageConfig) -> None:
    """Verify a preview signature for a filename.

    Raises:
        InvalidSignatureError: If the signature is expired, tampered with,
            or was issued for another file.
    """
    try:
        payload = jwt.decode(signature, config.signing_key, algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        raise InvalidSignatureError("Preview link has expired", filename)
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected preview signature for {filename}: {e}")
        raise InvalidSignatureError(f"Invalid preview signature: {e}", filename)

    if payload.get("type") != TOKEN_TYPE:
        raise InvalidSignatureError("Signature is not a preview signature", filename)
    if payload.get("filename") != filename:
        raise InvalidSignatureError("Signature was issued for another file", filename)
