from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime

from barberbot.application.exceptions import (
    BookingLimitReachedError,
    BusinessRuleViolation,
    InvalidInputError,
    OutsideBusinessHoursError,
    PastDateTimeError,
    RepositoryError,
    SlotConflictError,
)
from barberbot.application.ports.appointment_repository import AppointmentRepositoryPort
from barberbot.application.ports.state_store import StateStorePort
from barberbot.application.use_cases.availability import AvailabilityUseCase, business_hours_for
from barberbot.application.use_cases.send_message import SendMessageUseCase
from barberbot.application.utils import replies
from barberbot.application.utils.clock import Clock
from barberbot.application.utils.validators import is_valid_time
from barberbot.domain.entities.appointment import Appointment
from barberbot.domain.entities.conversation_state import Step


@dataclass(frozen=True)
class BookingResult:
    action: str  # "booked", "rejected", "limit_reached", "conflict", "error"
    message: str | None
    next_step: Step | None = None
    appointment: Appointment | None = None


class BookingUseCase:
    def __init__(
        self,
        repository: AppointmentRepositoryPort,
        availability: AvailabilityUseCase,
        send_message: SendMessageUseCase,
        store: StateStorePort,
        clock: Clock,
        max_active_appointments: int = 3,
    ) -> None:
        self._repository = repository
        self._availability = availability
        self._send_message = send_message
        self._store = store
        self._clock = clock
        self._max_active = max_active_appointments
        self._logger = logging.getLogger(__name__)

    async def book(self, name: str, day: date, time: str, requester_id: str) -> BookingResult:
        """
        Run the booking checks in order and persist the appointment.
        On success the listing and the confirmation are sent directly to the
        requester, so the result carries no reply text.
        """
        now = self._clock()
        try:
            self._check_slot_rules(day, time, now)
        except (InvalidInputError, BusinessRuleViolation) as e:
            self._logger.info(
                "Booking rejected",
                extra={"requester_id": requester_id, "date": day.isoformat(), "time": time, "reason": str(e)},
            )
            return BookingResult(action="rejected", message=replies.booking_error(str(e)), next_step=Step.AWAIT_DATE)

        try:
            active = await self._repository.count_by_requester(requester_id, from_date=now.date())
            if active >= self._max_active:
                raise BookingLimitReachedError(f"{active} active appointments")

            if await self._repository.find_by_date_time(day, time) is not None:
                raise SlotConflictError(f"{day.isoformat()} {time} already booked")

            appointment = await self._repository.create(
                Appointment(
                    client_name=name,
                    date=day,
                    time=time,
                    requester_id=requester_id,
                    created_at=now,
                )
            )
        except BookingLimitReachedError as e:
            self._logger.info("Booking limit reached", extra={"requester_id": requester_id, "reason": str(e)})
            return BookingResult(action="limit_reached", message=replies.booking_limit(self._max_active))
        except SlotConflictError:
            self._logger.info(
                "Booking conflict",
                extra={"requester_id": requester_id, "date": day.isoformat(), "time": time},
            )
            return BookingResult(action="conflict", message=replies.booking_conflict(), next_step=Step.AWAIT_DATE)
        except RepositoryError as e:
            self._logger.exception(
                "Error saving appointment", extra={"requester_id": requester_id, "error": str(e)}
            )
            return BookingResult(action="error", message=replies.booking_save_error(), next_step=Step.AWAIT_DATE)

        self._logger.info(
            "Appointment created",
            extra={"requester_id": requester_id, "date": day.isoformat(), "time": time},
        )
        await self._confirm(appointment)
        return BookingResult(action="booked", message=None, appointment=appointment)

    def _check_slot_rules(self, day: date, time: str, now: datetime) -> None:
        if not is_valid_time(time):
            raise InvalidInputError("Horário inválido")

        start_hour, end_hour = business_hours_for(day)
        hour = int(time.split(":")[0])
        if hour < start_hour or hour >= end_hour:
            raise OutsideBusinessHoursError(f"Horário fora do expediente ({start_hour}h às {end_hour}h)")

        hour, minute = (int(part) for part in time.split(":"))
        slot_start = datetime.combine(day, datetime.min.time().replace(hour=hour, minute=minute), tzinfo=now.tzinfo)
        if slot_start < now:
            raise PastDateTimeError("Não é possível agendar no passado")

    async def _confirm(self, appointment: Appointment) -> None:
        day_iso = appointment.date.isoformat()
        requester_id = appointment.requester_id

        await self._send_message.notify_admin(
            f"Novo agendamento: {appointment.client_name}, {day_iso}, {appointment.time}"
        )
        try:
            listing = await self._availability.listing(appointment.date, requester_id)
            await self._send_message.execute(requester_id, replies.with_menu(listing))
        except RepositoryError as e:
            self._logger.exception(
                "Error listing slots after booking", extra={"requester_id": requester_id, "error": str(e)}
            )
        await self._send_message.execute(
            requester_id,
            replies.booking_confirmation(appointment.client_name, day_iso, appointment.time),
        )
        self._store.mark_recent_booking(requester_id, self._clock().timestamp())
