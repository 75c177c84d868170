"""Temporary upload storage package.

Encodes uploaded files' original names into filesystem-safe stored names,
wraps stored files in references, and turns references into wire tokens
and back.

Examples:
    >>> from upload_tokens.storage import StorageConfig, TemporaryUploadService
    >>> service = TemporaryUploadService.from_config(StorageConfig())
    >>> ref = await service.store_temporary_file("photo.png", data)
    >>> token = ref.serialize()
"""

from upload_tokens.storage.config import StorageConfig
from upload_tokens.storage.errors import (
    InvalidSignatureError,
    InvalidStoredNameError,
    InvalidTokenError,
    NotPreviewableError,
    StoredNameTooLongError,
    UploadError,
)
from upload_tokens.storage.naming import (
    DecodedName,
    decode_stored_name,
    encode_stored_name,
    requires_truncation,
)
from upload_tokens.storage.reference import TemporaryUploadedFile
from upload_tokens.storage.service import TemporaryUploadService
from upload_tokens.storage.sidecar import TruncationSidecarStore
from upload_tokens.storage.tokens import (
    TokenDeserializer,
    can_deserialize,
    serialize,
    serialize_batch,
)

__all__ = [
    "DecodedName",
    "InvalidSignatureError",
    "InvalidStoredNameError",
    "InvalidTokenError",
    "NotPreviewableError",
    "StorageConfig",
    "StoredNameTooLongError",
    "TemporaryUploadService",
    "TemporaryUploadedFile",
    "TokenDeserializer",
    "TruncationSidecarStore",
    "UploadError",
    "can_deserialize",
    "decode_stored_name",
    "encode_stored_name",
    "requires_truncation",
    "serialize",
    "serialize_batch",
]
