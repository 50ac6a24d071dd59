from __future__ import annotations

from barberbot.application.ports.message_platform import MessagePlatformPort
from barberbot.infrastructure.whatsapp.gateway_client import GatewayClient


class GatewayPlatform(MessagePlatformPort):
    def __init__(self, client: GatewayClient) -> None:
        self._client = client

    async def send_text(self, recipient_id: str, text: str) -> None:
        await self._client.send_text(recipient_id=recipient_id, text=text)

    async def aclose(self) -> None:
        await self._client.aclose()
