"""
File: app/services/factory.py
Path: app/services/factory.py

Project: GST WhatsApp Relay

Purpose:
- Build the pipeline and its collaborators from BotSettings
- Hold process-wide singletons used as FastAPI dependencies

Design rules:
- No business logic here
- Only construction / wiring
"""

from __future__ import annotations

from fastapi import Depends

from app.config import LOOKUP_HTTP, BotSettings, load_bot_settings
from app.gst.lookup import GstLookupClient, HttpGstLookupClient, MockGstLookupClient
from app.outbound.factory import build_send_gateway, get_green_api_client
from app.services.dedup import ProcessedMessageSet
from app.services.gst_pipeline import GstPipeline
from app.services.notification_poller import NotificationPoller

_settings: BotSettings | None = None
_pipeline: GstPipeline | None = None


def get_settings() -> BotSettings:
    global _settings
    if _settings is None:
        _settings = load_bot_settings()
    return _settings


def build_lookup_client(settings: BotSettings) -> GstLookupClient:
    if settings.lookup_mode == LOOKUP_HTTP:
        return HttpGstLookupClient(
            base_url=settings.gst_api_base_url,
            api_key=settings.gst_api_key,
            timeout=settings.outbound_timeout_seconds,
        )
    return MockGstLookupClient(delay_seconds=settings.mock_delay_seconds)


def get_pipeline(settings: BotSettings = Depends(get_settings)) -> GstPipeline:
    global _pipeline
    if _pipeline is None:
        _pipeline = GstPipeline(
            lookup_client=build_lookup_client(settings),
            gateway=build_send_gateway(settings),
            rich_replies=settings.rich_replies,
        )
    return _pipeline


def build_poller(settings: BotSettings) -> NotificationPoller:
    return NotificationPoller(
        client=get_green_api_client(settings.outbound_timeout_seconds),
        pipeline=get_pipeline(settings),
        processed=ProcessedMessageSet(max_size=settings.processed_messages_max),
        interval_seconds=settings.poll_interval_seconds,
    )
