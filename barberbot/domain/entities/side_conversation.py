from dataclasses import dataclass


@dataclass(frozen=True)
class SideConversationSession:
    requester_id: str
    started_at: float
    last_contact_at: float
