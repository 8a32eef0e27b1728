"""
MRI Soundscape Backend - In-Memory Store
=========================================

What:  Process-lifetime repository for users, sessions, analytics events and
       soundscape preferences, plus the analytics summary aggregation.
How:   Four insertion-ordered dicts keyed by generated UUID strings. Every
       public method runs under one re-entrant lock, so the preferences
       upsert (find by (user_id, soundscape_type), then write) is atomic
       even when handlers run in a worker thread pool.
Who:   Created by create_app() and attached to app.state.store; handlers
       receive it through the get_store dependency.
When:  One instance per application; tests create one per test.

Contract:
    - Lookups return None (or an empty list) when nothing matches.
    - Returned records are deep copies; mutating them does not touch the Store.
    - Records are never deleted. Only preferences are updated in place.
    - Usernames are not checked for uniqueness on create;
      get_user_by_username returns the first match in insertion order.
"""

import logging
import threading
import uuid
from collections import Counter
from datetime import datetime, timezone
from typing import Dict, List, Optional, TypeVar

from fastapi import Request
from pydantic import BaseModel

from soundscape_api.config import settings
from soundscape_api.models.records import (
    SoundscapePreferences,
    SoundscapeSession,
    UsageAnalytics,
    User,
)
from soundscape_api.schemas.soundscape import (
    AnalyticsCreate,
    AnalyticsSummary,
    PreferencesUpdate,
    SessionCreate,
    UserCreate,
)

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _copy(record: RecordT) -> RecordT:
    return record.model_copy(deep=True)


class MemoryStore:
    """
    In-memory CRUD and aggregation over the four record kinds.

    Args:
        recent_events_limit: How many of the latest events
            get_analytics_summary() returns. Defaults to settings.

    Raises:
        ValueError: recent_events_limit is below 1.
    """

    def __init__(self, recent_events_limit: Optional[int] = None):
        if recent_events_limit is not None and recent_events_limit < 1:
            raise ValueError(
                f"recent_events_limit must be at least 1, got {recent_events_limit}"
            )
        self._lock = threading.RLock()
        self._users: Dict[str, User] = {}
        self._sessions: Dict[str, SoundscapeSession] = {}
        self._analytics: Dict[str, UsageAnalytics] = {}
        self._preferences: Dict[str, SoundscapePreferences] = {}
        self.recent_events_limit = (
            recent_events_limit
            if recent_events_limit is not None
            else settings.recent_events_limit
        )

    # ── Users ─────────────────────────────────────────────────────────────

    def create_user(self, data: UserCreate) -> User:
        user = User(id=_new_id(), **data.model_dump())
        with self._lock:
            self._users[user.id] = user
        logger.info("User created: %s", user.id)
        return _copy(user)

    def get_user(self, user_id: str) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            return _copy(user) if user is not None else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            for user in self._users.values():
                if user.username == username:
                    return _copy(user)
        return None

    # ── Sessions ──────────────────────────────────────────────────────────

    def create_session(self, data: SessionCreate) -> SoundscapeSession:
        session = SoundscapeSession(id=_new_id(), created_at=_now(), **data.model_dump())
        with self._lock:
            self._sessions[session.id] = session
        logger.info(
            "Session created: %s (type=%s, user=%s)",
            session.id, session.soundscape_type, session.user_id,
        )
        return _copy(session)

    def get_session(self, session_id: str) -> Optional[SoundscapeSession]:
        with self._lock:
            session = self._sessions.get(session_id)
            return _copy(session) if session is not None else None

    def get_user_sessions(self, user_id: str) -> List[SoundscapeSession]:
        with self._lock:
            return [
                _copy(s) for s in self._sessions.values() if s.user_id == user_id
            ]

    # ── Analytics ─────────────────────────────────────────────────────────

    def record_analytics(self, data: AnalyticsCreate) -> UsageAnalytics:
        event = UsageAnalytics(id=_new_id(), timestamp=_now(), **data.model_dump())
        with self._lock:
            self._analytics[event.id] = event
        logger.debug("Analytics event recorded: %s (%s)", event.id, event.event_type)
        return _copy(event)

    def get_analytics_by_session(self, session_id: str) -> List[UsageAnalytics]:
        with self._lock:
            return [
                _copy(e) for e in self._analytics.values() if e.session_id == session_id
            ]

    def get_analytics_summary(self) -> AnalyticsSummary:
        """
        Full scan over every recorded event.

        soundscape_usage counts only events whose payload is an object with
        a string `soundscape` field (UsageAnalytics.soundscape_name).
        """
        with self._lock:
            events = list(self._analytics.values())
            event_types = Counter(e.event_type for e in events)
            soundscape_usage = Counter(
                e.soundscape_name for e in events if e.soundscape_name is not None
            )
            start = max(len(events) - self.recent_events_limit, 0)
            recent = [_copy(e) for e in events[start:]]

        return AnalyticsSummary(
            total_events=len(events),
            event_types=dict(event_types),
            soundscape_usage=dict(soundscape_usage),
            recent_events=recent,
        )

    # ── Preferences ───────────────────────────────────────────────────────

    def get_preferences(self, user_id: str) -> List[SoundscapePreferences]:
        with self._lock:
            return [
                _copy(p) for p in self._preferences.values() if p.user_id == user_id
            ]

    def update_preferences(self, data: PreferencesUpdate) -> SoundscapePreferences:
        """
        Upsert keyed by (user_id, soundscape_type).

        Existing row: fields the caller explicitly set overwrite stored
        values, id is kept, use_count goes up by one, last_used is now.
        New row: defaults apply, use_count is 1, last_used is now.
        """
        with self._lock:
            existing = self._find_preferences(data.user_id, data.soundscape_type)

            if existing is not None:
                changes = data.model_dump(exclude_unset=True)
                changes.pop("id", None)
                changes.pop("use_count", None)
                prefs = existing.model_copy(
                    update={
                        **changes,
                        "use_count": existing.use_count + 1,
                        "last_used": _now(),
                    }
                )
                logger.debug(
                    "Preferences updated: %s (use_count=%d)", prefs.id, prefs.use_count
                )
            else:
                prefs = SoundscapePreferences(
                    id=_new_id(), use_count=1, last_used=_now(), **data.model_dump()
                )
                logger.info(
                    "Preferences created: %s (user=%s, type=%s)",
                    prefs.id, prefs.user_id, prefs.soundscape_type,
                )

            self._preferences[prefs.id] = prefs
            return _copy(prefs)

    def _find_preferences(
        self, user_id: str, soundscape_type: str
    ) -> Optional[SoundscapePreferences]:
        for prefs in self._preferences.values():
            if prefs.user_id == user_id and prefs.soundscape_type == soundscape_type:
                return prefs
        return None


def get_store(request: Request) -> MemoryStore:
    """
    FastAPI dependency returning the application's MemoryStore.

    Usage:
        async def handler(store: MemoryStore = Depends(get_store)): ...
    """
    return request.app.state.store
