from __future__ import annotations

import logging
from dataclasses import dataclass

from barberbot.application.ports.state_store import StateStorePort
from barberbot.application.use_cases.send_message import SendMessageUseCase
from barberbot.application.utils import replies
from barberbot.application.utils.clock import Clock
from barberbot.domain.entities.side_conversation import SideConversationSession

EXIT_KEYWORDS = ("sair", "quit")


@dataclass(frozen=True)
class SideConversationReply:
    handled: bool
    text: str | None = None


class SideConversationManager:
    """
    Freeform chat with the barber. While a session is open the bot stays quiet
    and a human answers out-of-band; the periodic sweep closes idle sessions.
    """

    def __init__(
        self,
        store: StateStorePort,
        send_message: SendMessageUseCase,
        clock: Clock,
        idle_timeout_seconds: float = 7 * 60,
    ) -> None:
        self._store = store
        self._send_message = send_message
        self._clock = clock
        self._idle_timeout_seconds = idle_timeout_seconds
        self._logger = logging.getLogger(__name__)

    def is_active(self, requester_id: str) -> bool:
        return self._store.get_side_session(requester_id) is not None

    def start(self, requester_id: str) -> str:
        now_ts = self._clock().timestamp()
        self._store.set_side_session(
            SideConversationSession(requester_id=requester_id, started_at=now_ts, last_contact_at=now_ts)
        )
        self._logger.info("Side conversation started", extra={"requester_id": requester_id})
        return replies.SIDE_CHAT_WELCOME

    def handle(self, requester_id: str, text: str) -> SideConversationReply:
        session = self._store.get_side_session(requester_id)
        if session is None:
            return SideConversationReply(handled=False)

        if text.strip().lower() in EXIT_KEYWORDS:
            self._store.delete_side_session(requester_id)
            self._logger.info("Side conversation closed", extra={"requester_id": requester_id})
            return SideConversationReply(handled=True, text=replies.with_menu(replies.SIDE_CHAT_EXIT))

        self._store.set_side_session(
            SideConversationSession(
                requester_id=requester_id,
                started_at=session.started_at,
                last_contact_at=self._clock().timestamp(),
            )
        )
        return SideConversationReply(handled=True)

    def end(self, requester_id: str) -> None:
        if self._store.delete_side_session(requester_id):
            self._logger.info("Side conversation ended", extra={"requester_id": requester_id})

    async def expire_idle(self) -> list[str]:
        """Close sessions idle past the timeout and tell each requester once."""
        cutoff = self._clock().timestamp() - self._idle_timeout_seconds
        expired = self._store.sweep_side_sessions(cutoff)
        for session in expired:
            self._logger.info(
                "Side conversation closed for inactivity", extra={"requester_id": session.requester_id}
            )
            await self._send_message.execute(session.requester_id, replies.with_menu(replies.SIDE_CHAT_IDLE))
        return [session.requester_id for session in expired]
