"""Signed preview route for temporary uploads.

Serves files for backends that cannot issue temporary URLs themselves.
The link carries the stored name and a signature; no session is needed.

Endpoints:
    GET /livewire/preview-file/{filename}?expires=...&signature=...
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse

from upload_tokens.api.dependencies import get_upload_service, resolve_existing
from upload_tokens.storage import InvalidSignatureError, TemporaryUploadService
from upload_tokens.storage.signing import PREVIEW_ROUTE, verify_preview_signature

logger = logging.getLogger(__name__)

router = APIRouter(prefix=PREVIEW_ROUTE, tags=["preview"])


@router.get("/{filename}")
async def preview_file(
    filename: str,
    signature: str = Query(..., description="Preview signature"),
    expires: int | None = Query(default=None, description="Expiry timestamp (informational)"),
    service: TemporaryUploadService = Depends(get_upload_service),
) -> StreamingResponse:
    """Stream a previewable temporary upload after verifying its signature."""
    try:
        verify_preview_signature(filename, signature, service.config)
    except InvalidSignatureError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))

    ref = await resolve_existing(service, filename)
    if not ref.is_previewable():
        raise HTTPException(
            status_code=422,
            detail=f"File with extension '{ref.extension}' is not previewable",
        )

    logger.debug(f"Serving preview: {ref.path}")
    return StreamingResponse(
        ref.read_stream(),
        media_type=await ref.mime_type(),
        headers={"Content-Length": str(await ref.size())},
    )
