"""
Tests for conversation state persistence (in-memory and JSON file backed).
"""

from __future__ import annotations

import json
import tempfile
from pathlib import Path

import pytest

from barberbot.domain.entities.conversation_state import AppointmentRef, ConversationState, Step
from barberbot.domain.entities.side_conversation import SideConversationSession
from barberbot.infrastructure.store.json_state_store import JsonStateStore
from barberbot.infrastructure.store.memory_state_store import MemoryStateStore

REQUESTER = "5511999990000@c.us"


@pytest.fixture(params=["memory", "json"])
def state_store(request, tmp_path):
    if request.param == "memory":
        return MemoryStateStore()
    return JsonStateStore(data_dir=str(tmp_path / "sessions"))


def test_state_roundtrip_and_delete(state_store):
    """A stored state reads back unchanged and can be deleted."""
    state = ConversationState(
        last_contact_at=1000.0,
        step=Step.AWAIT_NAME,
        pending_date="2025-12-25",
        pending_time="09:00",
    )
    state_store.set_state(REQUESTER, state)

    assert state_store.get_state(REQUESTER) == state

    state_store.delete_state(REQUESTER)
    assert state_store.get_state(REQUESTER) is None


def test_sweep_states_removes_only_idle_entries(state_store):
    """Only states idle since before the cutoff are swept."""
    state_store.set_state("idle@c.us", ConversationState(last_contact_at=100.0, step=Step.AWAIT_DATE))
    state_store.set_state("busy@c.us", ConversationState(last_contact_at=900.0, step=Step.AWAIT_TIME))

    expired = state_store.sweep_states(idle_before_ts=500.0)

    assert expired == ["idle@c.us"]
    assert state_store.get_state("idle@c.us") is None
    assert state_store.get_state("busy@c.us").step == Step.AWAIT_TIME


def test_side_session_lifecycle(state_store):
    """Side sessions are stored, swept once idle and then gone."""
    session = SideConversationSession(requester_id=REQUESTER, started_at=10.0, last_contact_at=20.0)
    state_store.set_side_session(session)

    assert state_store.get_side_session(REQUESTER) == session
    assert state_store.sweep_side_sessions(idle_before_ts=15.0) == []
    assert state_store.sweep_side_sessions(idle_before_ts=30.0) == [session]
    assert state_store.get_side_session(REQUESTER) is None
    assert state_store.delete_side_session(REQUESTER) is False


def test_recent_booking_marker_is_consumed_once(state_store):
    """A booking marker suppresses only the first message after it."""
    state_store.mark_recent_booking(REQUESTER, 1000.0)

    assert state_store.consume_recent_booking(REQUESTER, now_ts=1030.0, ttl_seconds=60) is True
    assert state_store.consume_recent_booking(REQUESTER, now_ts=1031.0, ttl_seconds=60) is False


def test_expired_recent_booking_marker_does_not_suppress(state_store):
    """A marker older than the window does not suppress anything."""
    state_store.mark_recent_booking(REQUESTER, 1000.0)

    assert state_store.consume_recent_booking(REQUESTER, now_ts=1061.0, ttl_seconds=60) is False


def test_recent_booking_marker_is_per_requester(state_store):
    """Markers of one requester do not affect another."""
    state_store.mark_recent_booking(REQUESTER, 1000.0)

    assert state_store.consume_recent_booking("other@c.us", now_ts=1001.0, ttl_seconds=60) is False
    assert state_store.consume_recent_booking(REQUESTER, now_ts=1001.0, ttl_seconds=60) is True


def test_json_store_persists_across_instances():
    """A fresh store pointed at the same directory sees the armed presence confirmation."""
    with tempfile.TemporaryDirectory() as tmpdir:
        state = ConversationState(
            last_contact_at=1000.0,
            step=Step.AWAIT_PRESENCE_CONFIRM,
            pending_appointment=AppointmentRef(client_name="Joao", date="2025-12-02", time="09:00"),
        )
        JsonStateStore(data_dir=tmpdir).set_state(REQUESTER, state)

        retrieved = JsonStateStore(data_dir=tmpdir).get_state(REQUESTER)

        assert retrieved == state
        assert retrieved.pending_appointment.client_name == "Joao"


def test_json_store_removes_file_when_requester_has_nothing_left():
    """The requester file is deleted once its state is cleared."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonStateStore(data_dir=tmpdir)
        store.set_state(REQUESTER, ConversationState(last_contact_at=1.0, step=Step.AWAIT_DATE))

        files = list(Path(tmpdir).glob("*.json"))
        assert len(files) == 1
        with open(files[0], "r", encoding="utf-8") as f:
            assert json.load(f)["state"]["step"] == "await_date"

        store.delete_state(REQUESTER)
        assert list(Path(tmpdir).glob("*.json")) == []


def test_json_store_ignores_corrupted_file():
    """An unreadable file is treated as no state."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonStateStore(data_dir=tmpdir)
        store.set_state(REQUESTER, ConversationState(last_contact_at=1.0, step=Step.AWAIT_DATE))
        next(Path(tmpdir).glob("*.json")).write_text("{not json", encoding="utf-8")

        assert store.get_state(REQUESTER) is None
        assert store.sweep_states(idle_before_ts=10.0) == []


def test_sweep_recent_bookings_drops_only_stale_markers(state_store):
    """Markers older than the cutoff are dropped even if the requester never writes again."""
    state_store.mark_recent_booking(REQUESTER, 1000.0)
    state_store.mark_recent_booking("other@c.us", 1090.0)

    assert state_store.sweep_recent_bookings(marked_before_ts=990.0) == []
    assert state_store.sweep_recent_bookings(marked_before_ts=1040.0) == [REQUESTER]

    assert state_store.consume_recent_booking(REQUESTER, now_ts=1041.0, ttl_seconds=10**6) is False
    assert state_store.consume_recent_booking("other@c.us", now_ts=1091.0, ttl_seconds=60) is True


def test_json_store_sweeping_last_marker_removes_file():
    """A file holding nothing but a stale booking marker is deleted by the sweep."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonStateStore(data_dir=tmpdir)
        store.mark_recent_booking(REQUESTER, 1000.0)
        assert len(list(Path(tmpdir).glob("*.json"))) == 1

        assert store.sweep_recent_bookings(marked_before_ts=1061.0) == [REQUESTER]
        assert list(Path(tmpdir).glob("*.json")) == []
