# =============================================================================
# Health API — Version-Neutral Liveness Endpoint
# =============================================================================
# GET /health has no version segment, so it appears in every API document.
# =============================================================================

from __future__ import annotations

from fastapi import APIRouter, Request

from apidocs.config import get_settings
from apidocs.models.documents import HealthResponse

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Check that the service is running",
)
async def health(request: Request) -> HealthResponse:
    settings = getattr(request.app.state, "settings", None) or get_settings()
    return HealthResponse(version=settings.app_version, service=settings.app_name)
