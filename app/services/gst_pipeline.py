"""
File: app/services/gst_pipeline.py
Path: app/services/gst_pipeline.py

Project: GST WhatsApp Relay

Purpose:
The one inbound -> outbound pipeline shared by webhook and polling modes.

    extract -> (none)      help text
            -> validate -> (invalid) format error
                        -> lookup -> (unavailable) service unavailable
                                  -> (unknown)     not found
                                  -> (found)       report, then alert if due

Design rules:
- handle() never raises; it runs after the HTTP ack or off the poll timer,
  so failures are only visible in logs
- Send failures are logged and the pipeline carries on (no retry)
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from app.gst.extractor import extract_gst_number
from app.gst.formatter import (
    HELP_TEXT,
    format_gst_report,
    format_gst_summary,
    format_urgent_alert,
    invalid_format_text,
    not_found_text,
    processing_text,
    service_unavailable_text,
)
from app.gst.lookup import GstLookupClient, GstServiceUnavailableError
from app.gst.models import InboundMessage
from app.gst.validator import is_valid_gst_format
from app.outbound.gateway import OutboundSendError, OutboundSendRequest, SendGateway

logger = logging.getLogger("gst_pipeline")


class GstPipeline:
    def __init__(
        self,
        *,
        lookup_client: GstLookupClient,
        gateway: SendGateway,
        rich_replies: bool = True,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._lookup = lookup_client
        self._gateway = gateway
        self._rich = rich_replies
        self._clock = clock

    # ------------------------------------------------------------------
    # Public entry
    # ------------------------------------------------------------------
    def handle(self, message: InboundMessage) -> None:
        try:
            self._route(message)
        except Exception:
            logger.exception("Pipeline failed for message from %s", message.sender_address)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _route(self, message: InboundMessage) -> None:
        sender = message.sender_address
        text = (message.raw_text or "").strip()
        logger.info("Message from %s: %s", sender, text)

        gst_number = extract_gst_number(text)
        if not gst_number:
            self._send(sender, HELP_TEXT)
            return

        logger.info("Processing GST number: %s", gst_number)
        if self._rich:
            self._send(sender, processing_text(gst_number))

        if not is_valid_gst_format(gst_number):
            self._send(sender, invalid_format_text(gst_number))
            return

        try:
            record = self._lookup.lookup(gst_number)
        except GstServiceUnavailableError:
            logger.exception("GST lookup unavailable for %s", gst_number)
            self._send(sender, service_unavailable_text(gst_number))
            return
        except Exception:
            logger.exception("GST lookup failed for %s", gst_number)
            self._send(sender, service_unavailable_text(gst_number))
            return

        if record is None:
            self._send(sender, not_found_text(gst_number))
            return

        try:
            report = (
                format_gst_report(gst_number, record)
                if self._rich
                else format_gst_summary(gst_number, record)
            )
            now = self._clock() if self._clock else None
            alert = format_urgent_alert(gst_number, record, now=now)
        except Exception:
            logger.exception("Could not format GST record for %s", gst_number)
            self._send(sender, service_unavailable_text(gst_number))
            return

        self._send(sender, report)
        if alert:
            self._send(sender, alert)

    def _send(self, to: str, text: str) -> bool:
        logger.info("Sending message to %s: %s...", to, text[:50])
        try:
            self._gateway.send_text(OutboundSendRequest(to_number=to, body_text=text))
            return True
        except OutboundSendError:
            logger.exception("Failed to send message to %s", to)
            return False
