"""
app/outbound/settings.py
GST WhatsApp Relay
Outbound Settings

Purpose:
- Centralised messaging-platform configuration.
- Keep secrets out of code via environment variables.

Notes:
- Meta WhatsApp Cloud API (webhook mode):
  - WHATSAPP_TOKEN
  - PHONE_NUMBER_ID
  - META_WA_API_VERSION (defaults to v19.0 if not provided)
- Green API (polling mode):
  - GREEN_API_ID_INSTANCE
  - GREEN_API_TOKEN_INSTANCE
  - GREEN_API_URL (defaults to https://api.green-api.com)
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _require_env(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise RuntimeError(
            f"Missing required environment variable: {name}. "
            f"Set it in your .env / Render / shell before running."
        )
    return value


@dataclass(frozen=True)
class MetaWhatsAppSettings:
    api_version: str
    access_token: str
    phone_number_id: str

    @property
    def base_url(self) -> str:
        return f"https://graph.facebook.com/{self.api_version}"

    @property
    def messages_url(self) -> str:
        return f"{self.base_url}/{self.phone_number_id}/messages"


@dataclass(frozen=True)
class GreenApiSettings:
    api_url: str
    id_instance: str
    api_token_instance: str

    def method_url(self, method: str, *suffix: str) -> str:
        """
        Green API URLs look like:
        {api_url}/waInstance{id}/{method}/{token}[/{suffix}...]
        """
        parts = [
            self.api_url.rstrip("/"),
            f"waInstance{self.id_instance}",
            method,
            self.api_token_instance,
            *suffix,
        ]
        return "/".join(parts)


def load_meta_settings() -> MetaWhatsAppSettings:
    return MetaWhatsAppSettings(
        api_version=os.getenv("META_WA_API_VERSION", "v19.0").strip(),
        access_token=_require_env("WHATSAPP_TOKEN"),
        phone_number_id=_require_env("PHONE_NUMBER_ID"),
    )


def load_green_api_settings() -> GreenApiSettings:
    return GreenApiSettings(
        api_url=os.getenv("GREEN_API_URL", "https://api.green-api.com").strip(),
        id_instance=_require_env("GREEN_API_ID_INSTANCE"),
        api_token_instance=_require_env("GREEN_API_TOKEN_INSTANCE"),
    )
