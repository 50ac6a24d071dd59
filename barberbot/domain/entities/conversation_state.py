from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Step(str, Enum):
    AWAIT_DATE = "await_date"
    AWAIT_TIME = "await_time"
    AWAIT_NAME = "await_name"
    AWAIT_CANCEL_NAME_TIME = "await_cancel_name_time"
    AWAIT_PRESENCE_CONFIRM = "await_presence_confirm"


@dataclass(frozen=True)
class AppointmentRef:
    client_name: str
    date: str  # YYYY-MM-DD
    time: str  # HH:MM


@dataclass(frozen=True)
class ConversationState:
    last_contact_at: float
    step: Step | None = None  # None means the requester is at the top-level menu
    pending_date: str | None = None  # YYYY-MM-DD
    pending_time: str | None = None  # HH:MM
    pending_appointment: AppointmentRef | None = None
