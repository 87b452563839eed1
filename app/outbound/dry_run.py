"""
GST WhatsApp Relay
Outbound delivery - DRY-RUN gateway

This gateway never sends anything.
It logs the reply and returns a receipt that indicates a simulated send.
"""

from __future__ import annotations

import logging

from .gateway import SendGateway, OutboundSendRequest, OutboundSendReceipt, SendStatus

logger = logging.getLogger("outbound")


class DryRunSendGateway(SendGateway):
    def send_text(self, req: OutboundSendRequest) -> OutboundSendReceipt:
        # No side effects. Never raises. Never calls external services.
        logger.info("DRY_RUN reply to %s:\n%s", req.to_number, req.body_text)
        detail = (
            "DRY_RUN: outbound delivery simulated (not sent). "
            f"to={req.to_number} chars={len(req.body_text)}"
        )
        return OutboundSendReceipt.now(status=SendStatus.DRY_RUN, detail=detail, provider_message_id=None)
