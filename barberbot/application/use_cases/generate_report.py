from __future__ import annotations

import csv
import io
import logging

from barberbot.application.exceptions import UnauthorizedActionError
from barberbot.application.ports.appointment_repository import AppointmentRepositoryPort
from barberbot.application.utils import replies
from barberbot.application.utils.clock import Clock


class GenerateReportUseCase:
    def __init__(self, repository: AppointmentRepositoryPort, admin_id: str, clock: Clock) -> None:
        self._repository = repository
        self._admin_id = admin_id
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def execute(self, requester_id: str) -> str:
        """
        One-line summary for the admin. The full CSV dumps go to the log only.
        Raises UnauthorizedActionError for anyone else.
        """
        if requester_id != self._admin_id:
            raise UnauthorizedActionError("report is admin only")

        appointments = await self._repository.find_by_date_range_from(self._clock().date())
        cancellations = await self._repository.find_cancellations_all()

        appointments_csv = _to_csv(
            ["nome", "data", "hora"],
            [[a.client_name, a.date.isoformat(), a.time] for a in appointments],
        )
        cancellations_csv = _to_csv(
            ["nome", "data", "hora", "motivo"],
            [[c.client_name, c.date.isoformat(), c.time, c.reason] for c in cancellations],
        )
        self._logger.info("Appointments report:\n%s", appointments_csv)
        self._logger.info("Cancellations report:\n%s", cancellations_csv)

        return replies.report_summary(len(appointments), len(cancellations))


def _to_csv(header: list[str], rows: list[list[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue().rstrip("\n")
