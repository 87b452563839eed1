"""
File: app/outbound/meta.py
Path: app/outbound/meta.py

Project: GST WhatsApp Relay

Purpose:
Meta WhatsApp Cloud API client (webhook mode).
Supports:
- Session messages (free text replies)
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
from app.outbound.settings import MetaWhatsAppSettings

logger = logging.getLogger("outbound")


class MetaWhatsAppError(RuntimeError):
    pass


@dataclass(frozen=True)
class MetaSendResult:
    ok: bool
    status_code: int
    response_json: Dict[str, Any]

    @property
    def provider_message_id(self) -> Optional[str]:
        try:
            return self.response_json["messages"][0]["id"]
        except (KeyError, IndexError, TypeError):
            return None


class MetaWhatsAppClient:
    def __init__(
        self,
        settings: MetaWhatsAppSettings,
        session: Optional[requests.Session] = None,
        timeout: float = 10,
    ) -> None:
        self._settings = settings
        self._session = session or requests.Session()
        self._timeout = timeout

    # ---------------------------------------------------------
    # SESSION MESSAGE (bot replies)
    # ---------------------------------------------------------
    def send_session_message(self, *, to_msisdn: str, text: str) -> MetaSendResult:
        if not text:
            raise MetaWhatsAppError("Session message text cannot be empty")

        payload = {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": to_msisdn,
            "type": "text",
            "text": {"body": text, "preview_url": False},
        }

        headers = {
            "Authorization": f"Bearer {self._settings.access_token}",
            "Content-Type": "application/json",
        }

        resp = self._session.post(
            self._settings.messages_url,
            json=payload,
            headers=headers,
            timeout=self._timeout,
        )

        try:
            data = resp.json()
        except ValueError:
            data = {"raw_text": resp.text}

        return MetaSendResult(
            ok=200 <= resp.status_code < 300,
            status_code=resp.status_code,
            response_json=data,
        )


class MetaSendGateway(SendGateway):
    def __init__(self, client: MetaWhatsAppClient) -> None:
        self._client = client

    def send_text(self, req: OutboundSendRequest) -> OutboundSendReceipt:
        try:
            result = self._client.send_session_message(
                to_msisdn=req.to_number,
                text=req.body_text,
            )
        except (requests.RequestException, MetaWhatsAppError) as e:
            raise OutboundSendError(f"Meta send to {req.to_number} failed: {e}") from e

        if not result.ok:
            raise OutboundSendError(
                f"Meta send to {req.to_number} rejected "
                f"(HTTP {result.status_code}): {result.response_json}"
            )

        logger.info("Meta message sent to %s", req.to_number)
        return OutboundSendReceipt.now(
            status=SendStatus.SENT,
            detail=f"meta http={result.status_code}",
            provider_message_id=result.provider_message_id,
        )
