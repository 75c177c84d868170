"""Exceptions raised by the temporary upload core."""

from __future__ import annotations


class UploadError(Exception):
    """Base exception for temporary upload errors.

    Attributes:
        message: Error message
        stored_name: Stored name of the offending upload (if known)
    """

    def __init__(self, message: str, stored_name: str | None = None) -> None:
        super().__init__(message)
        self.stored_name = stored_name

    def __str__(self) -> str:
        if self.stored_name:
            return f"[{self.stored_name}] {self.args[0]}"
        return self.args[0]


class NotPreviewableError(UploadError):
    """Temporary URL requested for a file outside the preview allow-list."""

    def __init__(self, stored_name: str, extension: str) -> None:
        super().__init__(
            f"File with extension '{extension}' is not previewable",
            stored_name,
        )
        self.extension = extension


class InvalidStoredNameError(UploadError, ValueError):
    """Stored name is missing the meta marker or carries malformed base64."""


class InvalidTokenError(UploadError, ValueError):
    """Wire token could not be parsed."""


class InvalidSignatureError(UploadError):
    """Signed preview link failed verification (tampered or expired)."""


class StoredNameTooLongError(UploadError):
    """Encoded stored name exceeds the backend's filename length limit."""

    def __init__(self, stored_name: str, limit: int) -> None:
        super().__init__(
            f"Stored name is {len(stored_name)} characters, limit is {limit}",
            stored_name,
        )
        self.limit = limit
