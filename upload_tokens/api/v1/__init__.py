"""API v1 module.

Contains all v1 API routes.
"""

from fastapi import APIRouter

from upload_tokens.api.v1.uploads import router as uploads_router

router = APIRouter(prefix="/api/v1")
router.include_router(uploads_router)

__all__ = ["router"]
