from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from barberbot.domain.entities.appointment import Appointment, Cancellation, Feedback


class AppointmentRepositoryPort(ABC):
    @abstractmethod
    async def create(self, appointment: Appointment) -> Appointment:
        """
        Persist an appointment and return it with its id.
        Raises SlotConflictError if (date, time) is already taken; the check
        must be atomic with the insert.
        """
        raise NotImplementedError

    @abstractmethod
    async def count_by_requester(self, requester_id: str, from_date: date | None = None) -> int:
        """Count a requester's appointments, optionally only those dated on/after from_date."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_date_time(self, day: date, time: str) -> Appointment | None:
        raise NotImplementedError

    @abstractmethod
    async def find_by_date(self, day: date) -> list[Appointment]:
        raise NotImplementedError

    @abstractmethod
    async def find_by_name_date_time(self, client_name: str, day: date, time: str) -> Appointment | None:
        raise NotImplementedError

    @abstractmethod
    async def delete_by_name_date_time(self, client_name: str, day: date, time: str) -> None:
        """Raises AppointmentNotFoundError if nothing matches."""
        raise NotImplementedError

    @abstractmethod
    async def cancel(self, client_name: str, day: date, time: str, record: Cancellation) -> None:
        """
        Delete the matching appointment and append its Cancellation record as one unit:
        either both happen or neither does.
        Raises AppointmentNotFoundError if nothing matches.
        """
        raise NotImplementedError

    @abstractmethod
    async def find_by_date_range_from(self, day: date) -> list[Appointment]:
        """Appointments dated on or after day, ordered by date and time."""
        raise NotImplementedError

    @abstractmethod
    async def delete_older_than(self, day: date) -> int:
        """Delete appointments dated strictly before day. Returns the number removed."""
        raise NotImplementedError

    @abstractmethod
    async def insert_cancellation(self, record: Cancellation) -> None:
        raise NotImplementedError

    @abstractmethod
    async def find_cancellations_all(self) -> list[Cancellation]:
        raise NotImplementedError

    @abstractmethod
    async def insert_feedback(self, record: Feedback) -> None:
        raise NotImplementedError
