"""Liveness endpoint for load balancers and uptime checks."""

from __future__ import annotations

from fastapi import APIRouter, Request

from pawboard.api.openapi_responses import rate_limited_response
from pawboard.api.schemas import HealthResponse
from pawboard.core.config import settings
from pawboard.core.rate_limit import HEALTH_RATE_LIMIT, limit, rate_limit_ip_key

router = APIRouter()


@router.get(
    "/health",
    summary="Health check",
    description="Report that the process is serving, with its environment and build version.",
    response_model=HealthResponse,
    responses={**rate_limited_response()},
)
@limit(HEALTH_RATE_LIMIT, key_func=rate_limit_ip_key)
def health(request: Request) -> HealthResponse:
    # No database round trip: a slow database should not take the process out of rotation.
    return HealthResponse(
        status="ok", environment=settings.environment, version=request.app.version
    )
