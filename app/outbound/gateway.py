"""
GST WhatsApp Relay
Outbound delivery abstraction

This module defines a stable SendGateway interface and strongly-typed
request/receipt objects for outbound delivery.

Guardrails:
- Gateways raise OutboundSendError when a message could not be delivered.
- Callers decide what to do with a failure (the pipeline logs and moves on).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Protocol, Optional


class SendStatus(str, Enum):
    DRY_RUN = "dry_run"
    SENT = "sent"


class OutboundSendError(RuntimeError):
    pass


@dataclass(frozen=True)
class OutboundSendRequest:
    """
    A single reply to deliver.

    - to_number is the platform address of the recipient
      (MSISDN for Meta, "<msisdn>@c.us" chat id for Green API)
    - body_text is the message text
    """
    to_number: str
    body_text: str


@dataclass(frozen=True)
class OutboundSendReceipt:
    """
    Result of a delivery attempt (or simulated attempt).
    """
    status: SendStatus
    provider_message_id: Optional[str]
    detail: str
    created_at_utc: datetime

    @staticmethod
    def now(status: SendStatus, detail: str, provider_message_id: Optional[str] = None) -> "OutboundSendReceipt":
        return OutboundSendReceipt(
            status=status,
            provider_message_id=provider_message_id,
            detail=detail,
            created_at_utc=datetime.now(timezone.utc),
        )


class SendGateway(Protocol):
    """
    Abstract gateway for outbound delivery.
    """
    def send_text(self, req: OutboundSendRequest) -> OutboundSendReceipt:
        """
        Deliver a WhatsApp text message (or simulate it, depending on gateway).
        Raises OutboundSendError on failure.
        """
        ...
