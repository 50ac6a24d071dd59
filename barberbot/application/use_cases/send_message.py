from __future__ import annotations

import logging

from barberbot.application.ports.message_platform import MessagePlatformPort


class SendMessageUseCase:
    def __init__(self, platform: MessagePlatformPort, admin_id: str, enabled: bool) -> None:
        self._platform = platform
        self._admin_id = admin_id
        self._enabled = enabled
        self._logger = logging.getLogger(__name__)

    async def execute(self, recipient_id: str, text: str) -> bool:
        """Send a message. Returns True if actually sent, False if skipped or failed."""
        if not self._enabled:
            self._logger.info("WOULD_SEND_MESSAGE", extra={"requester_id": recipient_id, "text": text})
            return False
        try:
            await self._platform.send_text(recipient_id=recipient_id, text=text)
        except Exception as e:
            self._logger.exception("Outbound send failed", extra={"requester_id": recipient_id, "error": str(e)})
            return False
        return True

    async def notify_admin(self, text: str) -> bool:
        sent = await self.execute(self._admin_id, text)
        if sent:
            self._logger.info("Admin notified", extra={"reason": text})
        return sent
