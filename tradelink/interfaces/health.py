"""
Health check router.

Provides a simple health endpoint for liveness/readiness checks.
Does not contact the upstream API. Returns application status and version.
"""

from fastapi import APIRouter

from tradelink.core.config import settings
from tradelink.interfaces.brokerage.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns application health status and version.",
)
def health_check() -> HealthResponse:
    """Return current application health status."""
    return HealthResponse(status="ok", version=settings.version)
