from __future__ import annotations

import logging
from datetime import date

from barberbot.application.exceptions import AppointmentNotFoundError
from barberbot.application.ports.appointment_repository import AppointmentRepositoryPort
from barberbot.application.use_cases.send_message import SendMessageUseCase
from barberbot.application.utils import replies
from barberbot.application.utils.clock import Clock
from barberbot.domain.entities.appointment import Cancellation

USER_CANCELLATION_REASON = "Cancelado pelo usuário"


class CancellationUseCase:
    def __init__(
        self,
        repository: AppointmentRepositoryPort,
        send_message: SendMessageUseCase,
        clock: Clock,
    ) -> None:
        self._repository = repository
        self._send_message = send_message
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def cancel(self, client_name: str, day: date, time: str) -> str:
        """Cancel the appointment matching (name, date, time) exactly."""
        day_iso = day.isoformat()
        record = Cancellation(
            client_name=client_name,
            date=day,
            time=time,
            reason=USER_CANCELLATION_REASON,
            created_at=self._clock(),
        )
        try:
            await self._repository.cancel(client_name, day, time, record)
        except AppointmentNotFoundError:
            self._logger.info("Appointment not found for cancellation", extra={"date": day_iso, "time": time})
            return replies.with_menu("Agendamento não encontrado.")

        self._logger.info("Appointment cancelled", extra={"date": day_iso, "time": time})
        await self._send_message.notify_admin(f"Cancelamento: {client_name}, {day_iso}, {time}")
        return replies.with_menu("Agendamento cancelado com sucesso.")
