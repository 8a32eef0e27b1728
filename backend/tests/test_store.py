"""
MRI Soundscape Backend - MemoryStore Unit Tests
================================================

What:  Tests for every Store operation, without HTTP.

What we test:
    ✅ Users: create, lookup by id and username, duplicate usernames
    ✅ Sessions: defaults, creation timestamp, per-user listing
    ✅ Analytics: recording, per-session listing, summary aggregation
    ✅ Preferences: upsert keyed by (user, soundscape type), useCount
    ✅ Returned records are copies
"""

import threading
from datetime import datetime

import pytest

from soundscape_api.schemas.soundscape import (
    AnalyticsCreate,
    PreferencesPayload,
    PreferencesUpdate,
    SessionCreate,
    UserCreate,
)
from soundscape_api.store import MemoryStore


def _prefs(user_id, **body):
    """Build an upsert request the way the preferences route does."""
    return PreferencesUpdate.for_user(user_id, PreferencesPayload.model_validate(body))


class TestUsers:

    def test_created_user_round_trips(self, store):
        user = store.create_user(UserCreate(username="alice", password="secret"))

        fetched = store.get_user(user.id)

        assert fetched == user
        assert fetched.username == "alice"
        assert fetched.password == "secret"

    def test_unknown_user_is_none(self, store):
        assert store.get_user("missing") is None

    def test_ids_are_unique(self, store):
        ids = {store.create_user(UserCreate(username=f"u{i}", password="p")).id for i in range(50)}
        assert len(ids) == 50

    def test_get_user_by_username(self, store):
        store.create_user(UserCreate(username="alice", password="a"))
        bob = store.create_user(UserCreate(username="bob", password="b"))

        assert store.get_user_by_username("bob") == bob
        assert store.get_user_by_username("carol") is None

    def test_duplicate_usernames_are_accepted_and_lookup_returns_first(self, store):
        """Uniqueness is not enforced on create; pinned until decided otherwise."""
        first = store.create_user(UserCreate(username="alice", password="one"))
        second = store.create_user(UserCreate(username="alice", password="two"))

        assert first.id != second.id
        assert store.get_user(second.id) is not None
        assert store.get_user_by_username("alice").id == first.id


class TestSessions:

    def test_session_defaults(self, store):
        session = store.create_session(SessionCreate(soundscape_type="ocean", volume=50))

        assert session.id
        assert isinstance(session.created_at, datetime)
        assert session.volume == 50
        assert session.frequency_low == 100
        assert session.frequency_high == 4000
        assert session.duration is None
        assert session.user_id is None

    def test_missing_volume_defaults_to_75(self, store):
        session = store.create_session(SessionCreate(soundscape_type="rain"))
        assert store.get_session(session.id).volume == 75

    def test_get_session(self, store):
        session = store.create_session(
            SessionCreate(soundscape_type="forest", user_id="u1", duration=600)
        )
        assert store.get_session(session.id) == session
        assert store.get_session("missing") is None

    def test_user_sessions_match_exactly(self, store):
        a1 = store.create_session(SessionCreate(soundscape_type="ocean", user_id="a"))
        store.create_session(SessionCreate(soundscape_type="ocean", user_id="b"))
        a2 = store.create_session(SessionCreate(soundscape_type="rain", user_id="a"))
        store.create_session(SessionCreate(soundscape_type="rain"))

        assert [s.id for s in store.get_user_sessions("a")] == [a1.id, a2.id]
        assert len(store.get_user_sessions("b")) == 1
        assert store.get_user_sessions("nobody") == []

    def test_returned_session_is_a_copy(self, store):
        session = store.create_session(SessionCreate(soundscape_type="ocean"))
        session.volume = 1

        assert store.get_session(session.id).volume == 75


class TestAnalytics:

    def test_record_analytics(self, store):
        event = store.record_analytics(
            AnalyticsCreate(event_type="play", session_id="s1", event_data={"soundscape": "ocean"})
        )

        assert event.id
        assert isinstance(event.timestamp, datetime)
        assert event.event_type == "play"
        assert event.event_data == {"soundscape": "ocean"}

    def test_optional_fields_default_to_none(self, store):
        event = store.record_analytics(AnalyticsCreate(event_type="pause"))
        assert event.session_id is None
        assert event.event_data is None

    def test_blank_session_id_is_stored_as_none(self, store):
        event = store.record_analytics(
            AnalyticsCreate.model_validate({"eventType": "play", "sessionId": "", "eventData": ""})
        )
        assert event.session_id is None
        assert event.event_data is None

    def test_analytics_by_session(self, store):
        e1 = store.record_analytics(AnalyticsCreate(event_type="play", session_id="s1"))
        store.record_analytics(AnalyticsCreate(event_type="play", session_id="s2"))
        e3 = store.record_analytics(AnalyticsCreate(event_type="pause", session_id="s1"))

        assert [e.id for e in store.get_analytics_by_session("s1")] == [e1.id, e3.id]
        assert store.get_analytics_by_session("none") == []

    def test_summary_counts_event_types(self, store):
        for event_type in ("play", "pause", "play"):
            store.record_analytics(AnalyticsCreate(event_type=event_type))

        summary = store.get_analytics_summary()

        assert summary.total_events == 3
        assert summary.event_types == {"play": 2, "pause": 1}
        assert sum(summary.event_types.values()) == summary.total_events
        assert summary.soundscape_usage == {}

    def test_summary_soundscape_usage_reads_string_field_only(self, store):
        payloads = [
            {"soundscape": "ocean"},
            {"soundscape": "ocean", "volume": 40},
            {"soundscape": "rain"},
            {"volume": 40},
            {"soundscape": 7},
            ["soundscape"],
            "ocean",
            None,
        ]
        for data in payloads:
            store.record_analytics(AnalyticsCreate(event_type="play", event_data=data))

        summary = store.get_analytics_summary()

        assert summary.total_events == len(payloads)
        assert summary.soundscape_usage == {"ocean": 2, "rain": 1}

    def test_summary_recent_events_are_last_ten_in_order(self, store):
        events = [
            store.record_analytics(AnalyticsCreate(event_type=f"e{i}")) for i in range(15)
        ]

        recent = store.get_analytics_summary().recent_events

        assert [e.id for e in recent] == [e.id for e in events[-10:]]

    def test_recent_events_limit_is_configurable(self):
        store = MemoryStore(recent_events_limit=2)
        for i in range(5):
            store.record_analytics(AnalyticsCreate(event_type=f"e{i}"))

        recent = store.get_analytics_summary().recent_events

        assert [e.event_type for e in recent] == ["e3", "e4"]

    def test_recent_events_limit_larger_than_history(self):
        store = MemoryStore(recent_events_limit=50)
        store.record_analytics(AnalyticsCreate(event_type="play"))

        recent = store.get_analytics_summary().recent_events

        assert [e.event_type for e in recent] == ["play"]

    @pytest.mark.parametrize("limit", [0, -3])
    def test_recent_events_limit_below_one_is_rejected(self, limit):
        with pytest.raises(ValueError, match="recent_events_limit"):
            MemoryStore(recent_events_limit=limit)

    def test_empty_summary(self, store):
        summary = store.get_analytics_summary()
        assert summary.total_events == 0
        assert summary.event_types == {}
        assert summary.recent_events == []


class TestPreferences:

    def test_first_save_creates_row_with_defaults(self, store):
        prefs = store.update_preferences(_prefs("u1", soundscapeType="ocean"))

        assert prefs.id
        assert prefs.user_id == "u1"
        assert prefs.use_count == 1
        assert prefs.preferred_volume == 75
        assert prefs.preferred_frequency_low == 100
        assert prefs.preferred_frequency_high == 4000
        assert prefs.avg_rating is None
        assert isinstance(prefs.last_used, datetime)

    def test_second_save_updates_same_row(self, store):
        first = store.update_preferences(_prefs("u1", soundscapeType="ocean", preferredVolume=60))
        second = store.update_preferences(_prefs("u1", soundscapeType="ocean", preferredVolume=80))

        rows = store.get_preferences("u1")

        assert len(rows) == 1
        assert rows[0].id == first.id == second.id
        assert rows[0].preferred_volume == 80
        assert rows[0].use_count == 2
        assert rows[0].last_used >= first.last_used

    def test_use_count_equals_number_of_saves(self, store):
        for volume in (10, 20, 30, 40):
            store.update_preferences(_prefs("u1", soundscapeType="rain", preferredVolume=volume))

        (row,) = store.get_preferences("u1")
        assert row.use_count == 4
        assert row.preferred_volume == 40

    def test_unsent_fields_keep_stored_values(self, store):
        store.update_preferences(
            _prefs("u1", soundscapeType="ocean", preferredVolume=60, avgRating=4.5)
        )
        updated = store.update_preferences(
            _prefs("u1", soundscapeType="ocean", preferredFrequencyLow=200)
        )

        assert updated.preferred_volume == 60
        assert updated.preferred_frequency_low == 200
        assert updated.avg_rating == 4.5

    def test_client_cannot_set_use_count(self, store):
        store.update_preferences(_prefs("u1", soundscapeType="ocean", useCount=99))
        updated = store.update_preferences(_prefs("u1", soundscapeType="ocean", useCount=99))

        assert updated.use_count == 2

    def test_rows_are_keyed_by_user_and_type(self, store):
        store.update_preferences(_prefs("u1", soundscapeType="ocean"))
        store.update_preferences(_prefs("u1", soundscapeType="rain"))
        store.update_preferences(_prefs("u2", soundscapeType="ocean"))

        assert {p.soundscape_type for p in store.get_preferences("u1")} == {"ocean", "rain"}
        assert len(store.get_preferences("u2")) == 1
        assert store.get_preferences("u3") == []

    def test_concurrent_upserts_keep_one_row(self, store):
        def save():
            for _ in range(25):
                store.update_preferences(_prefs("u1", soundscapeType="ocean"))

        threads = [threading.Thread(target=save) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        (row,) = store.get_preferences("u1")
        assert row.use_count == 100


@pytest.mark.parametrize("volume", [0, 75, 100])
def test_session_volume_is_stored_verbatim(store, volume):
    session = store.create_session(SessionCreate(soundscape_type="ocean", volume=volume))
    assert store.get_session(session.id).volume == volume
