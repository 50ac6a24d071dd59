from __future__ import annotations

import logging

from barberbot.application.ports.appointment_repository import AppointmentRepositoryPort
from barberbot.application.utils import replies
from barberbot.application.utils.clock import Clock
from barberbot.application.utils.validators import is_valid_rating
from barberbot.domain.entities.appointment import Feedback


class CollectFeedbackUseCase:
    def __init__(self, repository: AppointmentRepositoryPort, clock: Clock) -> None:
        self._repository = repository
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def execute(self, client_name: str, comment: str, rating: int | None) -> str:
        if not is_valid_rating(rating):
            return replies.with_menu(
                "Avaliação inválida. Use um número de 1 a 5.\n\n"
                "Formato: feedback [nome] [comentario] [avaliação]"
            )
        await self._repository.insert_feedback(
            Feedback(client_name=client_name, comment=comment, rating=rating, created_at=self._clock())
        )
        self._logger.info("Feedback collected", extra={"count": rating})
        return replies.with_menu("Valeu pelo feedback, irmão! 😎")
