"""
File: app/outbound/factory.py
Path: app/outbound/factory.py

Project: GST WhatsApp Relay

Purpose:
- Provide a single place to construct outbound clients/gateways
- Reuse a single platform client instance (singleton-style)

Design rules:
- No business logic here
- Only construction / wiring
- Credentials are read when a client is first built, not at import
"""

from __future__ import annotations

from app.config import OUTBOUND_DRY_RUN, BotSettings
from app.outbound.dry_run import DryRunSendGateway
from app.outbound.gateway import SendGateway
from app.outbound.green_api import GreenApiClient, GreenApiSendGateway
from app.outbound.meta import MetaSendGateway, MetaWhatsAppClient
from app.outbound.settings import load_green_api_settings, load_meta_settings


# -------------------------------------------------
# Platform client singletons
# -------------------------------------------------
_meta_client: MetaWhatsAppClient | None = None
_green_api_client: GreenApiClient | None = None


def get_meta_client(timeout: float = 10) -> MetaWhatsAppClient:
    global _meta_client
    if _meta_client is None:
        settings = load_meta_settings()
        _meta_client = MetaWhatsAppClient(settings=settings, timeout=timeout)
    return _meta_client


def get_green_api_client(timeout: float = 10) -> GreenApiClient:
    global _green_api_client
    if _green_api_client is None:
        settings = load_green_api_settings()
        _green_api_client = GreenApiClient(settings=settings, timeout=timeout)
    return _green_api_client


# -------------------------------------------------
# Gateway selection
# -------------------------------------------------
def build_send_gateway(settings: BotSettings) -> SendGateway:
    """
    dry_run           -> DryRunSendGateway (never sends)
    live + polling    -> Green API
    live + webhook    -> Meta WhatsApp Cloud API
    """
    if settings.outbound_mode == OUTBOUND_DRY_RUN:
        return DryRunSendGateway()

    if settings.is_polling:
        return GreenApiSendGateway(get_green_api_client(settings.outbound_timeout_seconds))

    return MetaSendGateway(get_meta_client(settings.outbound_timeout_seconds))
