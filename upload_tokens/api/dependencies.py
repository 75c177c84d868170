"""FastAPI dependencies for the upload routes."""

from __future__ import annotations

from fastapi import HTTPException, status

from upload_tokens.config import get_settings
from upload_tokens.storage import InvalidStoredNameError, StorageConfig, TemporaryUploadService
from upload_tokens.storage.reference import TemporaryUploadedFile


def get_storage_config() -> StorageConfig:
    """Storage config built from application settings."""
    return StorageConfig.from_settings(get_settings())


def get_upload_service() -> TemporaryUploadService:
    """Upload service for the configured disk."""
    return TemporaryUploadService.from_config(get_storage_config())


async def resolve_existing(service: TemporaryUploadService, filename: str) -> TemporaryUploadedFile:
    """Resolve a stored name, mapping bad names to 400 and missing files to 404."""
    try:
        ref = service.resolve(filename)
    except InvalidStoredNameError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if not await ref.exists():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Upload not found")
    return ref
