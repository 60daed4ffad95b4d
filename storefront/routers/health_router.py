"""
Health check and monitoring router.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, status

from ..config import settings
from ..metrics import metrics_endpoint
from ..models import HealthResponse
from ..supabase_client import config as supabase_config

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
)
async def health_check():
    """
    Basic health check.

    Always returns 200 while the process is up; ``backend_configured``
    tells whether requests will reach Supabase or run on local fallbacks.
    """
    return HealthResponse(
        status="healthy",
        service=settings.SERVICE_NAME,
        version=settings.SERVICE_VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
        backend_configured=supabase_config.is_configured,
    )


@router.get("/metrics", include_in_schema=False)
async def metrics():
    """Prometheus metrics endpoint."""
    return await metrics_endpoint()
