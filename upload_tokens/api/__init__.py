"""API module for upload-tokens.

Contains the versioned API routers and the signed preview route.
"""

from upload_tokens.api.preview import router as preview_router
from upload_tokens.api.v1 import router as v1_router

__all__ = ["preview_router", "v1_router"]
