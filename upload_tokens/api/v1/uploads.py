"""Temporary upload API endpoints.

Endpoints:
    POST   /api/v1/uploads?filename=...  - Store raw request body as a temporary upload
    GET    /api/v1/uploads/{filename}    - Describe a temporary upload
    DELETE /api/v1/uploads/{filename}    - Delete a temporary upload

Examples:
    >>> POST /api/v1/uploads?filename=photo.png  (body: image bytes)
    >>> {"token": "livewire-file:...", "original_name": "photo.png", ...}

Tests:
    - tests/unit/test_api_uploads.py
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pydantic import BaseModel

from upload_tokens.api.dependencies import get_upload_service, resolve_existing
from upload_tokens.storage import TemporaryUploadService, UploadError
from upload_tokens.storage.reference import TemporaryUploadedFile

router = APIRouter(prefix="/uploads", tags=["uploads"])


# Response Models


class UploadResponse(BaseModel):
    """Description of a temporary upload."""

    token: str
    stored_name: str
    original_name: str
    size: int
    mime_type: str
    previewable: bool
    preview_url: str | None = None


class DeleteResponse(BaseModel):
    """Result of deleting a temporary upload."""

    deleted: bool


async def _describe(ref: TemporaryUploadedFile) -> UploadResponse:
    preview_url = await ref.temporary_url() if ref.is_previewable() else None

    return UploadResponse(
        token=ref.serialize(),
        stored_name=ref.filename,
        original_name=await ref.original_name(),
        size=await ref.size(),
        mime_type=await ref.mime_type(),
        previewable=ref.is_previewable(),
        preview_url=preview_url,
    )


@router.post("", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def create_upload(
    request: Request,
    filename: str = Query(..., min_length=1, description="Client filename"),
    service: TemporaryUploadService = Depends(get_upload_service),
) -> UploadResponse:
    """Store the raw request body as a temporary upload."""
    data = await request.body()
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Empty upload")

    try:
        ref = await service.store_temporary_file(filename, data)
    except UploadError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return await _describe(ref)


@router.get("/{filename}", response_model=UploadResponse)
async def get_upload(
    filename: str,
    service: TemporaryUploadService = Depends(get_upload_service),
) -> UploadResponse:
    """Describe a temporary upload by stored name."""
    ref = await resolve_existing(service, filename)
    return await _describe(ref)


@router.delete("/{filename}", response_model=DeleteResponse)
async def delete_upload(
    filename: str,
    service: TemporaryUploadService = Depends(get_upload_service),
) -> DeleteResponse:
    """Delete a temporary upload (and its sidecar)."""
    ref = await resolve_existing(service, filename)
    return DeleteResponse(deleted=await ref.delete())
