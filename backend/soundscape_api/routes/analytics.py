"""
MRI Soundscape Backend - Analytics Route Handlers
==================================================

What:  Record usage events and report the aggregate summary.
Who:   The player posts play/pause/volume_change/download events; the
       metrics page reads the summary.

Summary shape:
    {
        "totalEvents": 3,
        "eventTypes": {"play": 2, "pause": 1},
        "soundscapeUsage": {"ocean": 2},
        "recentEvents": [...]
    }
"""

import logging

from fastapi import APIRouter, Depends

from soundscape_api.models.records import UsageAnalytics
from soundscape_api.schemas.soundscape import (
    AnalyticsCreate,
    AnalyticsSummary,
    ErrorResponse,
)
from soundscape_api.store import MemoryStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analytics", tags=["Analytics"])


@router.post(
    "",
    response_model=UsageAnalytics,
    responses={400: {"description": "Invalid analytics data", "model": ErrorResponse}},
    summary="Record an analytics event",
    description="eventType is required; sessionId and eventData are optional.",
)
async def record_analytics(
    data: AnalyticsCreate,
    store: MemoryStore = Depends(get_store),
) -> UsageAnalytics:
    return store.record_analytics(data)


@router.get(
    "/summary",
    response_model=AnalyticsSummary,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="Aggregate analytics summary",
)
async def get_analytics_summary(
    store: MemoryStore = Depends(get_store),
) -> AnalyticsSummary:
    """Recomputed from every stored event on each call."""
    return store.get_analytics_summary()
