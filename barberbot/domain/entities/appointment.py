from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class Appointment:
    client_name: str
    date: date
    time: str  # HH:MM
    requester_id: str
    created_at: datetime
    id: int | None = None


@dataclass(frozen=True)
class Cancellation:
    client_name: str
    date: date
    time: str
    reason: str
    created_at: datetime


@dataclass(frozen=True)
class Feedback:
    client_name: str
    comment: str
    rating: int
    created_at: datetime
