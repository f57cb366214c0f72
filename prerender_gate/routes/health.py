"""
Prerender Gate - Health Check Route
====================================

What:  Liveness endpoint for load balancer and container health checks.
How:   Reports the configured rendering service and process uptime. The
       rendering service itself is not called.
"""

import logging
import time

from fastapi import APIRouter, Request

from prerender_gate import __version__
from prerender_gate.schemas.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    settings = request.app.state.prerender_service.settings
    return HealthResponse(
        status="healthy",
        version=__version__,
        rendering_service=settings.service_url,
        token_configured=bool(settings.token),
        uptime_seconds=round(time.time() - _start_time, 2),
    )
