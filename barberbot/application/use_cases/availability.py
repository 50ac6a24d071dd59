from __future__ import annotations

import logging
from datetime import date, datetime, timedelta

from barberbot.application.ports.appointment_repository import AppointmentRepositoryPort
from barberbot.domain.entities.slot import SlotStatus

SATURDAY = 5
SLOT_MINUTES = 30


def business_hours_for(day: date) -> tuple[int, int]:
    """Opening and closing hour for a weekday. Saturday 10-16, every other day 9-20."""
    if day.weekday() == SATURDAY:
        return (10, 16)
    return (9, 20)


def slot_labels(day: date) -> list[str]:
    start_hour, end_hour = business_hours_for(day)
    current = datetime.combine(day, datetime.min.time().replace(hour=start_hour))
    end_time = datetime.combine(day, datetime.min.time().replace(hour=end_hour))

    labels: list[str] = []
    while current < end_time:
        labels.append(current.strftime("%H:%M"))
        current += timedelta(minutes=SLOT_MINUTES)
    return labels


def format_listing(slots: list[SlotStatus]) -> str:
    lines = []
    for slot in slots:
        if not slot.booked:
            lines.append(f"{slot.time} ✅ (disponível)")
        elif slot.occupant_name:
            lines.append(f"{slot.time} ⏰ (agendado - {slot.occupant_name})")
        else:
            lines.append(f"{slot.time} ⏰ (agendado)")
    return "\n".join(lines)


class AvailabilityUseCase:
    def __init__(self, repository: AppointmentRepositoryPort, admin_id: str) -> None:
        self._repository = repository
        self._admin_id = admin_id
        self._logger = logging.getLogger(__name__)

    async def list_slots(self, day: date, viewer_id: str) -> list[SlotStatus]:
        booked = {appt.time: appt for appt in await self._repository.find_by_date(day)}
        is_admin = viewer_id == self._admin_id

        slots: list[SlotStatus] = []
        for label in slot_labels(day):
            appt = booked.get(label)
            if appt is None:
                slots.append(SlotStatus(time=label, booked=False))
            else:
                slots.append(
                    SlotStatus(
                        time=label,
                        booked=True,
                        occupant_name=appt.client_name if is_admin else None,
                    )
                )
        return slots

    async def listing(self, day: date, viewer_id: str) -> str:
        slots = await self.list_slots(day, viewer_id)
        self._logger.info(
            "Availability listed",
            extra={"date": day.isoformat(), "count": sum(1 for s in slots if s.booked)},
        )
        return format_listing(slots)
