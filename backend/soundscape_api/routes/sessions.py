"""
MRI Soundscape Backend - Session Route Handlers
================================================

What:  Create and fetch soundscape sessions, and list a session's analytics.
Who:   Called by the frontend session page when playback starts.

Sessions are immutable after creation, so GET responses carry a long
private cache header like other immutable records.
"""

import logging

from fastapi import APIRouter, Depends, Response

from soundscape_api.exceptions import NotFoundError
from soundscape_api.models.records import SoundscapeSession, UsageAnalytics
from soundscape_api.schemas.soundscape import ErrorResponse, SessionCreate
from soundscape_api.store import MemoryStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Sessions"])


@router.post(
    "/sessions",
    response_model=SoundscapeSession,
    responses={
        200: {"description": "Session created", "model": SoundscapeSession},
        400: {"description": "Invalid session data", "model": ErrorResponse},
    },
    summary="Start a soundscape session",
    description=(
        "Stores a new session. Only soundscapeType is required; volume, "
        "frequencyLow and frequencyHigh default to 75, 100 and 4000."
    ),
)
async def create_session(
    data: SessionCreate,
    store: MemoryStore = Depends(get_store),
) -> SoundscapeSession:
    # Stored as sent, inverted bands included
    if data.frequency_low > data.frequency_high:
        logger.warning(
            "Session band is inverted: frequencyLow=%d > frequencyHigh=%d",
            data.frequency_low, data.frequency_high,
        )
    return store.create_session(data)


@router.get(
    "/sessions/{session_id}",
    response_model=SoundscapeSession,
    responses={
        200: {"description": "The session", "model": SoundscapeSession},
        404: {"description": "Session not found", "model": ErrorResponse},
    },
    summary="Get a session by ID",
)
async def get_session(
    session_id: str,
    response: Response,
    store: MemoryStore = Depends(get_store),
) -> SoundscapeSession:
    """
    Return one session.

    Raises:
        NotFoundError: No session with this ID (→ 404)
    """
    session = store.get_session(session_id)
    if session is None:
        raise NotFoundError(resource="session", resource_id=session_id)

    response.headers["Cache-Control"] = "private, max-age=3600"
    return session


@router.get(
    "/sessions/{session_id}/analytics",
    response_model=list[UsageAnalytics],
    summary="List analytics events recorded for a session",
)
async def get_session_analytics(
    session_id: str,
    store: MemoryStore = Depends(get_store),
) -> list[UsageAnalytics]:
    # Unknown sessions yield an empty list, same as a session with no events
    return store.get_analytics_by_session(session_id)
