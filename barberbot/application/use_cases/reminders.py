from __future__ import annotations

import logging
from datetime import timedelta

from barberbot.application.ports.appointment_repository import AppointmentRepositoryPort
from barberbot.application.ports.state_store import StateStorePort
from barberbot.application.use_cases.send_message import SendMessageUseCase
from barberbot.application.utils import replies
from barberbot.application.utils.clock import Clock
from barberbot.domain.entities.conversation_state import AppointmentRef, ConversationState, Step


class ReminderUseCase:
    """Jobs triggered by the external scheduler (startup, 09:00 and 00:00 daily)."""

    def __init__(
        self,
        repository: AppointmentRepositoryPort,
        store: StateStorePort,
        send_message: SendMessageUseCase,
        clock: Clock,
        retention_days: int = 30,
    ) -> None:
        self._repository = repository
        self._store = store
        self._send_message = send_message
        self._clock = clock
        self._retention_days = retention_days
        self._logger = logging.getLogger(__name__)

    async def run_same_day_reminders(self) -> int:
        today = self._clock().date()
        appointments = await self._repository.find_by_date(today)
        for appt in appointments:
            await self._send_message.execute(appt.requester_id, replies.same_day_reminder(appt.client_name, appt.time))
            self._logger.info(
                "Same-day reminder sent", extra={"requester_id": appt.requester_id, "time": appt.time}
            )
        return len(appointments)

    async def run_next_day_reminders(self) -> int:
        now = self._clock()
        tomorrow = now.date() + timedelta(days=1)
        tomorrow_iso = tomorrow.isoformat()
        appointments = await self._repository.find_by_date(tomorrow)
        for appt in appointments:
            await self._send_message.execute(
                appt.requester_id,
                replies.next_day_reminder(appt.client_name, tomorrow_iso, appt.time),
            )
            # One state per requester: with several appointments tomorrow the last one armed wins.
            self._store.set_state(
                appt.requester_id,
                ConversationState(
                    last_contact_at=now.timestamp(),
                    step=Step.AWAIT_PRESENCE_CONFIRM,
                    pending_appointment=AppointmentRef(
                        client_name=appt.client_name,
                        date=tomorrow_iso,
                        time=appt.time,
                    ),
                ),
            )
            self._logger.info(
                "Next-day reminder sent",
                extra={"requester_id": appt.requester_id, "date": tomorrow_iso, "time": appt.time},
            )
        return len(appointments)

    async def run_retention_sweep(self) -> int:
        cutoff = self._clock().date() - timedelta(days=self._retention_days)
        removed = await self._repository.delete_older_than(cutoff)
        self._logger.info("Old appointments removed", extra={"date": cutoff.isoformat(), "count": removed})
        return removed
