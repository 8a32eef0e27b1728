"""
MRI Soundscape Backend - Preferences Route Handlers
====================================================

What:  Read and save a user's per-soundscape preferences.
How:   POST is an upsert keyed by (userId, soundscapeType): the first save
       creates the row with useCount 1, every later save overwrites the
       fields sent and increments useCount.

The userId always comes from the path; a userId in the body is ignored.
"""

import logging

from fastapi import APIRouter, Depends

from soundscape_api.models.records import SoundscapePreferences
from soundscape_api.schemas.soundscape import (
    ErrorResponse,
    PreferencesPayload,
    PreferencesUpdate,
)
from soundscape_api.store import MemoryStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Preferences"])


@router.get(
    "/users/{user_id}/preferences",
    response_model=list[SoundscapePreferences],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List a user's soundscape preferences",
)
async def get_preferences(
    user_id: str,
    store: MemoryStore = Depends(get_store),
) -> list[SoundscapePreferences]:
    return store.get_preferences(user_id)


@router.post(
    "/users/{user_id}/preferences",
    response_model=SoundscapePreferences,
    responses={
        200: {"description": "Upserted preferences row", "model": SoundscapePreferences},
        400: {"description": "Invalid preferences data", "model": ErrorResponse},
    },
    summary="Save soundscape preferences",
)
async def update_preferences(
    user_id: str,
    payload: PreferencesPayload,
    store: MemoryStore = Depends(get_store),
) -> SoundscapePreferences:
    """
    Upsert preferences for (user_id, payload.soundscape_type).

    Only fields present in the request body overwrite an existing row.
    """
    return store.update_preferences(PreferencesUpdate.for_user(user_id, payload))
