"""
File: app/outbound/green_api.py
Path: app/outbound/green_api.py

Project: GST WhatsApp Relay

Purpose:
Green API WhatsApp client (polling mode).
Supports:
- sendMessage            (bot replies)
- receiveNotification    (pull one pending notification)
- deleteNotification     (acknowledge a notification by receiptId)
- getStateInstance / getSettings (ops status endpoint)

Notes:
- receiveNotification returns JSON null when the queue is empty.
- A notification that is not deleted is redelivered on the next poll.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging
import requests

from app.outbound.gateway import (
    OutboundSendError,
    OutboundSendReceipt,
    OutboundSendRequest,
    SendGateway,
    SendStatus,
)
from app.outbound.settings import GreenApiSettings

logger = logging.getLogger("outbound")

TEXT_MESSAGE_TYPES = ("textMessage", "extendedTextMessage")


class GreenApiError(RuntimeError):
    pass


@dataclass(frozen=True)
class GreenNotification:
    """
    One item pulled from the Green API notification queue.
    """
    receipt_id: int
    body: Dict[str, Any]

    @property
    def type_webhook(self) -> Optional[str]:
        return self.body.get("typeWebhook")

    @property
    def message_id(self) -> Optional[str]:
        return self.body.get("idMessage")

    @property
    def chat_id(self) -> Optional[str]:
        return (self.body.get("senderData") or {}).get("chatId")

    @property
    def text(self) -> Optional[str]:
        """
        Text body for incoming text messages, None for anything else
        (status updates, media, outgoing echoes).
        """
        if self.type_webhook != "incomingMessageReceived":
            return None

        message_data = self.body.get("messageData") or {}
        type_message = message_data.get("typeMessage")
        if type_message not in TEXT_MESSAGE_TYPES:
            return None

        if type_message == "textMessage":
            return (message_data.get("textMessageData") or {}).get("textMessage")
        return (message_data.get("extendedTextMessageData") or {}).get("text")


class GreenApiClient:
    def __init__(
        self,
        settings: GreenApiSettings,
        session: Optional[requests.Session] = None,
        timeout: float = 10,
    ) -> None:
        self._settings = settings
        self._session = session or requests.Session()
        self._timeout = timeout

    def _call(self, http_method: str, method: str, *suffix: str, json: Optional[dict] = None) -> Any:
        url = self._settings.method_url(method, *suffix)
        try:
            resp = self._session.request(
                http_method,
                url,
                json=json,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise GreenApiError(f"{method} failed: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise GreenApiError(f"{method} returned HTTP {resp.status_code}: {resp.text}")

        try:
            return resp.json()
        except ValueError as e:
            raise GreenApiError(f"{method} returned invalid JSON") from e

    # ---------------------------------------------------------
    # Messages
    # ---------------------------------------------------------
    def send_message(self, *, chat_id: str, text: str) -> Dict[str, Any]:
        if not text:
            raise GreenApiError("Message text cannot be empty")
        return self._call("POST", "sendMessage", json={"chatId": chat_id, "message": text})

    # ---------------------------------------------------------
    # Notification queue
    # ---------------------------------------------------------
    def receive_notification(self) -> Optional[GreenNotification]:
        data = self._call("GET", "receiveNotification")
        if not data:
            return None
        return GreenNotification(
            receipt_id=data["receiptId"],
            body=data.get("body") or {},
        )

    def delete_notification(self, receipt_id: int) -> bool:
        data = self._call("DELETE", "deleteNotification", str(receipt_id))
        return bool((data or {}).get("result"))

    # ---------------------------------------------------------
    # Account status
    # ---------------------------------------------------------
    def get_state_instance(self) -> Dict[str, Any]:
        return self._call("GET", "getStateInstance")

    def get_settings(self) -> Dict[str, Any]:
        return self._call("GET", "getSettings")


class GreenApiSendGateway(SendGateway):
    def __init__(self, client: GreenApiClient) -> None:
        self._client = client

    def send_text(self, req: OutboundSendRequest) -> OutboundSendReceipt:
        try:
            data = self._client.send_message(chat_id=req.to_number, text=req.body_text)
        except GreenApiError as e:
            raise OutboundSendError(f"Green API send to {req.to_number} failed: {e}") from e

        logger.info("Green API message sent to %s", req.to_number)
        return OutboundSendReceipt.now(
            status=SendStatus.SENT,
            detail="green_api sendMessage",
            provider_message_id=(data or {}).get("idMessage"),
        )
