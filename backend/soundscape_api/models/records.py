"""
MRI Soundscape Backend - Stored Record Models
==============================================

What:  Pydantic models for the four record kinds held by the Store.
How:   Python attributes are snake_case; JSON uses camelCase aliases
       (soundscapeType, createdAt, ...) through CamelModel.
Who:   Created only by MemoryStore; returned to routes as copies and
       serialized directly as response bodies.

Records:
    User                   id, username, password
    SoundscapeSession      one listening session with its chosen settings
    UsageAnalytics         one timestamped usage event with optional payload
    SoundscapePreferences  remembered settings per (user_id, soundscape_type)
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Defaults shared by sessions, preferences and the generation stub
DEFAULT_VOLUME = 75
DEFAULT_FREQUENCY_LOW = 100
DEFAULT_FREQUENCY_HIGH = 4000


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class User(CamelModel):
    id: str
    username: str
    password: str


class SoundscapeSession(CamelModel):
    """One instance of a user listening to a soundscape."""

    id: str
    user_id: Optional[str] = None
    soundscape_type: str
    volume: int = DEFAULT_VOLUME
    frequency_low: int = DEFAULT_FREQUENCY_LOW
    frequency_high: int = DEFAULT_FREQUENCY_HIGH
    duration: Optional[int] = Field(default=None, description="Length in seconds")
    created_at: datetime


class UsageAnalytics(CamelModel):
    """
    A timestamped usage event (play, pause, volume_change, download, ...).

    event_data is any JSON value. The only field the backend reads from it
    is `soundscape`, exposed as `soundscape_name`.
    """

    id: str
    session_id: Optional[str] = None
    event_type: str
    event_data: Optional[Any] = None
    timestamp: datetime

    @property
    def soundscape_name(self) -> Optional[str]:
        """The payload's `soundscape` string, or None for any other shape."""
        if isinstance(self.event_data, dict):
            value = self.event_data.get("soundscape")
            if isinstance(value, str):
                return value
        return None


class SoundscapePreferences(CamelModel):
    """Per-user, per-soundscape-type settings plus a usage counter."""

    id: str
    user_id: str
    soundscape_type: str
    preferred_volume: Optional[int] = DEFAULT_VOLUME
    preferred_frequency_low: Optional[int] = DEFAULT_FREQUENCY_LOW
    preferred_frequency_high: Optional[int] = DEFAULT_FREQUENCY_HIGH
    use_count: int = Field(default=1, ge=1)
    avg_rating: Optional[float] = None
    last_used: datetime
