"""
MRI Soundscape Backend - User Route Handlers
=============================================

What:  Register users, fetch a user, list a user's sessions.

There is no authentication: the password is stored as given and never
returned. Usernames are not checked for uniqueness.
"""

import logging

from fastapi import APIRouter, Depends

from soundscape_api.exceptions import NotFoundError
from soundscape_api.models.records import SoundscapeSession
from soundscape_api.schemas.soundscape import ErrorResponse, UserCreate, UserResponse
from soundscape_api.store import MemoryStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Users"])


@router.post(
    "/users",
    response_model=UserResponse,
    responses={400: {"description": "Invalid user data", "model": ErrorResponse}},
    summary="Create a user",
)
async def create_user(
    data: UserCreate,
    store: MemoryStore = Depends(get_store),
) -> UserResponse:
    if store.get_user_by_username(data.username) is not None:
        logger.warning("Creating user with duplicate username '%s'", data.username)
    user = store.create_user(data)
    return UserResponse.model_validate(user)


@router.get(
    "/users/{user_id}",
    response_model=UserResponse,
    responses={404: {"description": "User not found", "model": ErrorResponse}},
    summary="Get a user by ID",
)
async def get_user(
    user_id: str,
    store: MemoryStore = Depends(get_store),
) -> UserResponse:
    user = store.get_user(user_id)
    if user is None:
        raise NotFoundError(resource="user", resource_id=user_id)
    return UserResponse.model_validate(user)


@router.get(
    "/users/{user_id}/sessions",
    response_model=list[SoundscapeSession],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List a user's sessions",
    description="Sessions whose userId matches, in creation order. Empty when none match.",
)
async def get_user_sessions(
    user_id: str,
    store: MemoryStore = Depends(get_store),
) -> list[SoundscapeSession]:
    return store.get_user_sessions(user_id)
