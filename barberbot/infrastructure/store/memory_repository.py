from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import date

from barberbot.application.exceptions import AppointmentNotFoundError, SlotConflictError
from barberbot.application.ports.appointment_repository import AppointmentRepositoryPort
from barberbot.domain.entities.appointment import Appointment, Cancellation, Feedback


class MemoryAppointmentRepository(AppointmentRepositoryPort):
    def __init__(self) -> None:
        self._appointments: dict[tuple[date, str], Appointment] = {}
        self._cancellations: list[Cancellation] = []
        self._feedbacks: list[Feedback] = []
        self._next_id = 1
        self._lock = asyncio.Lock()

    async def create(self, appointment: Appointment) -> Appointment:
        async with self._lock:
            key = (appointment.date, appointment.time)
            if key in self._appointments:
                raise SlotConflictError(f"{appointment.date.isoformat()} {appointment.time} already booked")
            stored = replace(appointment, id=self._next_id)
            self._next_id += 1
            self._appointments[key] = stored
            return stored

    async def count_by_requester(self, requester_id: str, from_date: date | None = None) -> int:
        return sum(
            1
            for appt in self._appointments.values()
            if appt.requester_id == requester_id and (from_date is None or appt.date >= from_date)
        )

    async def find_by_date_time(self, day: date, time: str) -> Appointment | None:
        return self._appointments.get((day, time))

    async def find_by_date(self, day: date) -> list[Appointment]:
        return sorted((a for a in self._appointments.values() if a.date == day), key=lambda a: a.time)

    async def find_by_name_date_time(self, client_name: str, day: date, time: str) -> Appointment | None:
        appt = self._appointments.get((day, time))
        if appt is None or appt.client_name != client_name:
            return None
        return appt

    async def delete_by_name_date_time(self, client_name: str, day: date, time: str) -> None:
        async with self._lock:
            appt = self._appointments.get((day, time))
            if appt is None or appt.client_name != client_name:
                raise AppointmentNotFoundError(f"{client_name} {day.isoformat()} {time}")
            del self._appointments[(day, time)]

    async def cancel(self, client_name: str, day: date, time: str, record: Cancellation) -> None:
        async with self._lock:
            appt = self._appointments.get((day, time))
            if appt is None or appt.client_name != client_name:
                raise AppointmentNotFoundError(f"{client_name} {day.isoformat()} {time}")
            await self.insert_cancellation(record)
            del self._appointments[(day, time)]

    async def find_by_date_range_from(self, day: date) -> list[Appointment]:
        return sorted(
            (a for a in self._appointments.values() if a.date >= day),
            key=lambda a: (a.date, a.time),
        )

    async def delete_older_than(self, day: date) -> int:
        async with self._lock:
            old_keys = [key for key, appt in self._appointments.items() if appt.date < day]
            for key in old_keys:
                del self._appointments[key]
            return len(old_keys)

    async def insert_cancellation(self, record: Cancellation) -> None:
        self._cancellations.append(record)

    async def find_cancellations_all(self) -> list[Cancellation]:
        return list(self._cancellations)

    async def insert_feedback(self, record: Feedback) -> None:
        self._feedbacks.append(record)

    def all_appointments(self) -> list[Appointment]:
        return list(self._appointments.values())

    def all_feedbacks(self) -> list[Feedback]:
        return list(self._feedbacks)
