from __future__ import annotations

from barberbot.application.ports.state_store import StateStorePort
from barberbot.domain.entities.conversation_state import ConversationState
from barberbot.domain.entities.side_conversation import SideConversationSession


class MemoryStateStore(StateStorePort):
    def __init__(self) -> None:
        self._states: dict[str, ConversationState] = {}
        self._side_sessions: dict[str, SideConversationSession] = {}
        self._recent_bookings: dict[str, float] = {}

    def get_state(self, requester_id: str) -> ConversationState | None:
        return self._states.get(requester_id)

    def set_state(self, requester_id: str, state: ConversationState) -> None:
        self._states[requester_id] = state

    def delete_state(self, requester_id: str) -> None:
        self._states.pop(requester_id, None)

    def sweep_states(self, idle_before_ts: float) -> list[str]:
        expired = [rid for rid, state in self._states.items() if state.last_contact_at < idle_before_ts]
        for requester_id in expired:
            del self._states[requester_id]
        return expired

    def get_side_session(self, requester_id: str) -> SideConversationSession | None:
        return self._side_sessions.get(requester_id)

    def set_side_session(self, session: SideConversationSession) -> None:
        self._side_sessions[session.requester_id] = session

    def delete_side_session(self, requester_id: str) -> bool:
        return self._side_sessions.pop(requester_id, None) is not None

    def sweep_side_sessions(self, idle_before_ts: float) -> list[SideConversationSession]:
        expired = [s for s in self._side_sessions.values() if s.last_contact_at < idle_before_ts]
        for session in expired:
            del self._side_sessions[session.requester_id]
        return expired

    def mark_recent_booking(self, requester_id: str, timestamp: float) -> None:
        self._recent_bookings[requester_id] = timestamp

    def consume_recent_booking(self, requester_id: str, now_ts: float, ttl_seconds: float) -> bool:
        marked_at = self._recent_bookings.pop(requester_id, None)
        if marked_at is None:
            return False
        return now_ts - marked_at < ttl_seconds

    def sweep_recent_bookings(self, marked_before_ts: float) -> list[str]:
        expired = [rid for rid, marked_at in self._recent_bookings.items() if marked_at < marked_before_ts]
        for requester_id in expired:
            del self._recent_bookings[requester_id]
        return expired
