"""
MRI Soundscape Backend - Health Check Route
============================================

What:  Liveness endpoint for monitors and the frontend.
How:   The Store has no external dependencies, so a running process is healthy.
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter

from soundscape_api import __version__
from soundscape_api.config import settings
from soundscape_api.schemas.soundscape import HealthResponse

router = APIRouter(prefix="/api", tags=["Health"])

# Set once when the module loads, for uptime reporting
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        service=settings.service_name,
        version=__version__,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
