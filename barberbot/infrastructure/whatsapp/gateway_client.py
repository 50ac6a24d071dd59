from __future__ import annotations

import logging

import httpx


class GatewayClient:
    """HTTP client for the WhatsApp gateway that owns the chat session."""

    def __init__(
        self,
        send_endpoint: str,
        api_token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Authorization": f"Bearer {api_token}"} if api_token else {}
        self._send_endpoint = send_endpoint
        self._client = httpx.AsyncClient(timeout=timeout, headers=headers, transport=transport)
        self._logger = logging.getLogger(__name__)

    async def send_text(self, recipient_id: str, text: str) -> None:
        payload = {"chatId": recipient_id, "text": text}
        resp = await self._client.post(self._send_endpoint, json=payload)
        if resp.status_code >= 400:
            try:
                error_message = resp.json().get("error")
            except (ValueError, AttributeError):
                error_message = resp.text

            self._logger.error(
                "Gateway send failed",
                extra={
                    "status": resp.status_code,
                    "error": error_message,
                    "requester_id": recipient_id,
                    "text_length": len(text),
                },
            )
            resp.raise_for_status()

    async def aclose(self) -> None:
        await self._client.aclose()
