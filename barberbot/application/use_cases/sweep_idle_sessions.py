from __future__ import annotations

import logging
from dataclasses import dataclass

from barberbot.application.ports.state_store import StateStorePort
from barberbot.application.use_cases.side_conversation import SideConversationManager
from barberbot.application.utils.clock import Clock


@dataclass(frozen=True)
class SweepResult:
    expired_states: list[str]
    expired_side_sessions: list[str]


class SweepIdleSessionsUseCase:
    def __init__(
        self,
        store: StateStorePort,
        side_conversation: SideConversationManager,
        clock: Clock,
        state_idle_seconds: float = 10 * 60,
        echo_guard_seconds: float = 60,
    ) -> None:
        self._store = store
        self._side_conversation = side_conversation
        self._clock = clock
        self._state_idle_seconds = state_idle_seconds
        self._echo_guard_seconds = echo_guard_seconds
        self._logger = logging.getLogger(__name__)

    async def execute(self) -> SweepResult:
        now_ts = self._clock().timestamp()
        cutoff = now_ts - self._state_idle_seconds
        expired_states = self._store.sweep_states(cutoff)
        for requester_id in expired_states:
            self._logger.info("Conversation state cleared for inactivity", extra={"requester_id": requester_id})
        # Markers whose requester never wrote again
        self._store.sweep_recent_bookings(now_ts - self._echo_guard_seconds)
        expired_side = await self._side_conversation.expire_idle()
        return SweepResult(expired_states=expired_states, expired_side_sessions=expired_side)
