from __future__ import annotations

import time

from pydantic import BaseModel, ConfigDict, Field

from barberbot.domain.entities.message import Message


class GatewayMessageDTO(BaseModel):
    """Inbound event posted by the WhatsApp gateway for each received message."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = None
    sender: str = Field(alias="from")
    body: str = ""
    has_media: bool = Field(default=False, alias="hasMedia")
    timestamp: int | None = None

    def to_message(self) -> Message:
        return Message(
            id=self.id or f"{self.sender}:{self.timestamp or int(time.time())}",
            sender_id=self.sender,
            text=self.body,
            timestamp=self.timestamp or int(time.time()),
            platform="whatsapp",
            has_media=self.has_media,
        )


class JobResultDTO(BaseModel):
    job: str
    count: int
