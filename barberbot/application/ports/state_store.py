from __future__ import annotations

from abc import ABC, abstractmethod

from barberbot.domain.entities.conversation_state import ConversationState
from barberbot.domain.entities.side_conversation import SideConversationSession


class StateStorePort(ABC):
    @abstractmethod
    def get_state(self, requester_id: str) -> ConversationState | None:
        raise NotImplementedError

    @abstractmethod
    def set_state(self, requester_id: str, state: ConversationState) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete_state(self, requester_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def sweep_states(self, idle_before_ts: float) -> list[str]:
        """
        Remove every conversation state whose last_contact_at is older than idle_before_ts.
        Returns the requester ids that were removed.
        """
        raise NotImplementedError

    @abstractmethod
    def get_side_session(self, requester_id: str) -> SideConversationSession | None:
        raise NotImplementedError

    @abstractmethod
    def set_side_session(self, session: SideConversationSession) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete_side_session(self, requester_id: str) -> bool:
        """Returns True if a session was present."""
        raise NotImplementedError

    @abstractmethod
    def sweep_side_sessions(self, idle_before_ts: float) -> list[SideConversationSession]:
        """Remove idle side-conversation sessions and return the removed ones."""
        raise NotImplementedError

    @abstractmethod
    def mark_recent_booking(self, requester_id: str, timestamp: float) -> None:
        raise NotImplementedError

    @abstractmethod
    def consume_recent_booking(self, requester_id: str, now_ts: float, ttl_seconds: float) -> bool:
        """
        Pop the recent-booking marker for requester_id.
        Returns True only if a marker existed and is younger than ttl_seconds.
        """
        raise NotImplementedError

    @abstractmethod
    def sweep_recent_bookings(self, marked_before_ts: float) -> list[str]:
        """Drop recent-booking markers set before marked_before_ts. Returns the affected requester ids."""
        raise NotImplementedError
