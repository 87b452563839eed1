"""
File: app/webhooks.py
Path: app/webhooks.py

Project: GST WhatsApp Relay

Purpose:
Inbound Meta WhatsApp webhook (webhook mode).

- GET  /webhook  one-shot verification handshake (hub.* query params)
- POST /webhook  inbound messages

Notes:
- POST always answers 200 straight away (Meta redelivers otherwise).
  The GST pipeline runs as a background task after the response is sent,
  so its errors only ever reach the logs.
- Only entry[0].changes[0].value.messages[0] is read.
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, Response, status
from fastapi.responses import PlainTextResponse

from app.config import BotSettings
from app.gst.models import InboundMessage
from app.services.factory import get_pipeline, get_settings
from app.services.gst_pipeline import GstPipeline

router = APIRouter(tags=["webhooks"])
logger = logging.getLogger("webhooks")


def _extract_first_message(payload: dict) -> dict | None:
    try:
        message = payload["entry"][0]["changes"][0]["value"]["messages"][0]
    except (KeyError, IndexError, TypeError):
        return None
    return message if isinstance(message, dict) else None


def _extract_text(message: dict) -> str | None:
    try:
        text = message["text"]["body"]
    except (KeyError, TypeError):
        return None
    if not isinstance(text, str):
        return None
    return text.strip() or None


# -------------------------------------------------------------------
# Verification (GET)
# -------------------------------------------------------------------
@router.get("/webhook", response_class=PlainTextResponse)
def verify_webhook(request: Request, settings: BotSettings = Depends(get_settings)):
    params = request.query_params
    logger.info("Webhook verification attempt: %s", dict(params))

    mode = params.get("hub.mode")
    token = params.get("hub.verify_token")
    challenge = params.get("hub.challenge")

    if mode == "subscribe" and settings.verify_token and token == settings.verify_token:
        logger.info("Webhook verified successfully!")
        return challenge or ""

    logger.warning("Webhook verification failed. Check VERIFY_TOKEN.")
    raise HTTPException(status_code=403, detail="Forbidden")


# -------------------------------------------------------------------
# Inbound messages (POST)
# -------------------------------------------------------------------
@router.post("/webhook")
async def whatsapp_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    pipeline: GstPipeline = Depends(get_pipeline),
):
    try:
        payload = await request.json()
    except ValueError:
        logger.warning("Webhook body is not JSON")
        return Response(status_code=status.HTTP_200_OK)

    logger.debug("Received webhook: %s", payload)

    message = _extract_first_message(payload)
    if not message:
        logger.info("No message found in webhook payload")
        return Response(status_code=status.HTTP_200_OK)

    sender = message.get("from")
    text = _extract_text(message)

    if not sender or not text:
        logger.info("No text in message (type=%s)", message.get("type"))
        return Response(status_code=status.HTTP_200_OK)

    background_tasks.add_task(
        pipeline.handle,
        InboundMessage(
            sender_address=sender,
            raw_text=text,
            message_id=message.get("id"),
        ),
    )

    return Response(status_code=status.HTTP_200_OK)
