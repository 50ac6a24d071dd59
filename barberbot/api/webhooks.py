from __future__ import annotations

import json
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response
from pydantic import ValidationError

from barberbot.application.dto.webhook_event import GatewayMessageDTO
from barberbot.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase
from barberbot.core.config import settings
from barberbot.infrastructure.whatsapp.webhook_verify import verify_post_signature
from barberbot.wiring.dependencies import get_handle_incoming_message_use_case


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/webhooks/whatsapp")
async def whatsapp_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    use_case: HandleIncomingMessageUseCase = Depends(get_handle_incoming_message_use_case),
) -> Response:
    body = await request.body()
    signature = request.headers.get("X-Gateway-Signature")
    if not verify_post_signature(body, signature, settings.GATEWAY_WEBHOOK_SECRET, settings.ENV):
        return Response(status_code=403)

    try:
        payload = json.loads(body.decode("utf-8")) if body else {}
        event = GatewayMessageDTO.model_validate(payload)
    except (ValueError, ValidationError):
        logger.exception("Failed to parse webhook body")
        return Response(status_code=400)

    message = event.to_message()
    logger.info("Webhook received", extra={"message_id": message.id, "requester_id": message.sender_id})
    background_tasks.add_task(use_case.handle_message, message)
    return Response(status_code=200)
