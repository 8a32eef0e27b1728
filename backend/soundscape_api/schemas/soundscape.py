"""
MRI Soundscape Backend - Pydantic Request/Response Schemas
===========================================================

What:  Pydantic models defining the API contract between frontend and backend.
How:   FastAPI uses these models to validate request bodies, serialize responses,
       and generate OpenAPI documentation. Field names are snake_case in Python
       and camelCase on the wire (see CamelModel).
Who:   Used by route handlers and by MemoryStore as its input types.
When:  Validated on every request (input) and serialized on every response (output).

Stored records themselves live in soundscape_api.models.records and are
returned as-is, except User which is exposed without its password.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from soundscape_api.models.records import (
    DEFAULT_FREQUENCY_HIGH,
    DEFAULT_FREQUENCY_LOW,
    DEFAULT_VOLUME,
    CamelModel,
    UsageAnalytics,
)


# ══════════════════════════════════════════════════════════════════════════
# Input Models: what the Store accepts
# ══════════════════════════════════════════════════════════════════════════


class UserCreate(CamelModel):
    username: str
    password: str


class SessionCreate(CamelModel):
    """
    What:  Body of POST /api/sessions.

    soundscape_type is the only required field; the numeric settings fall
    back to 75 / 100 / 4000 when omitted.
    """
    user_id: Optional[str] = None
    soundscape_type: str
    volume: int = DEFAULT_VOLUME
    frequency_low: int = DEFAULT_FREQUENCY_LOW
    frequency_high: int = DEFAULT_FREQUENCY_HIGH
    duration: Optional[int] = Field(default=None, description="Length in seconds")


class AnalyticsCreate(CamelModel):
    """
    What:  Body of POST /api/analytics.

    Empty values for sessionId and eventData ("" or 0 or false) are stored
    as null, the same as leaving them out.
    """
    session_id: Optional[str] = None
    event_type: str
    event_data: Optional[Any] = None

    @field_validator("session_id", "event_data", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if v is False or v == "" or (isinstance(v, (int, float)) and v == 0):
            return None
        return v


class PreferencesPayload(CamelModel):
    """
    What:  Body of POST /api/users/{userId}/preferences.

    The user id comes from the path. useCount is owned by the Store and
    cannot be set by clients; unknown keys (including userId and useCount)
    are ignored.
    """
    soundscape_type: str
    preferred_volume: Optional[int] = DEFAULT_VOLUME
    preferred_frequency_low: Optional[int] = DEFAULT_FREQUENCY_LOW
    preferred_frequency_high: Optional[int] = DEFAULT_FREQUENCY_HIGH
    avg_rating: Optional[float] = None


class PreferencesUpdate(PreferencesPayload):
    """
    What:  Upsert request handed to MemoryStore.update_preferences.

    Only fields the caller explicitly set (model_fields_set) overwrite an
    existing row; build it from a payload with exclude_unset=True.
    """
    user_id: str

    @classmethod
    def for_user(cls, user_id: str, payload: PreferencesPayload) -> "PreferencesUpdate":
        return cls(user_id=user_id, **payload.model_dump(exclude_unset=True))


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserResponse(CamelModel):
    """A user without the password field."""
    id: str
    username: str

    model_config = ConfigDict(from_attributes=True)


class AnalyticsSummary(CamelModel):
    """
    What:  Aggregate view returned by GET /api/analytics/summary.

    Fields:
        total_events:     number of events recorded so far
        event_types:      event_type → occurrence count
        soundscape_usage: soundscape name (from eventData.soundscape) → count
        recent_events:    latest events, oldest first
    """
    total_events: int
    event_types: Dict[str, int]
    soundscape_usage: Dict[str, int]
    recent_events: List[UsageAnalytics]


class CustomSettings(CamelModel):
    """Optional overrides for the generation stub; extra keys are accepted."""
    duration: Optional[int] = None
    frequency_low: Optional[int] = None
    frequency_high: Optional[int] = None

    model_config = ConfigDict(extra="allow")


class GenerateRequest(CamelModel):
    soundscape_type: str
    mri_noise_profile: Optional[Any] = None
    custom_settings: Optional[CustomSettings] = None


class FrequencyMasking(CamelModel):
    low: int
    high: int


class GeneratedSoundscape(CamelModel):
    """Fabricated metadata returned by POST /api/soundscapes/generate."""
    soundscape_id: str
    type: str
    duration: int
    sample_rate: int
    channels: int
    effectiveness_score: float = Field(ge=0.0, le=1.0)
    frequency_masking: FrequencyMasking
    download_url: str
    timestamp: str = Field(description="ISO 8601 UTC timestamp")


class DownloadInfo(BaseModel):
    """Fabricated download metadata; no file is produced."""
    message: str = "Download initiated"
    filename: str
    type: str = "audio/wav"
    size: str = "~5MB"
    estimated_download_time: str = "10-30 seconds"


class HealthResponse(CamelModel):
    status: str = Field(description="Overall service status")
    timestamp: str = Field(description="ISO 8601 UTC timestamp")
    service: str = Field(description="Service name")
    version: str = Field(description="Application version")
    uptime_seconds: float = Field(description="Seconds since service started")


# ══════════════════════════════════════════════════════════════════════════
# Error Response Model: consistent error format across all endpoints
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Example:
        {
            "error": "not_found",
            "message": "session with ID 'abc' was not found",
            "details": null,
            "request_id": "1f2e3d4c"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[Any] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")
