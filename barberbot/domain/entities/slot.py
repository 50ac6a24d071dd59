from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SlotStatus:
    time: str  # HH:MM
    booked: bool
    occupant_name: str | None = None  # only filled for the admin identity
