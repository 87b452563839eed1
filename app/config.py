"""
app/config.py
Application configuration
Environment-driven (Render compatible)

Read once at start-up into an immutable BotSettings and handed to the
components that need it. Platform credentials live in app/outbound/settings.py
and are only required when the matching gateway is built.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

MODE_WEBHOOK = "webhook"
MODE_POLLING = "polling"

REPLY_RICH = "rich"
REPLY_MINIMAL = "minimal"

OUTBOUND_LIVE = "live"
OUTBOUND_DRY_RUN = "dry_run"

LOOKUP_MOCK = "mock"
LOOKUP_HTTP = "http"


def _choice(name: str, default: str, allowed: tuple[str, ...]) -> str:
    value = os.getenv(name, default).strip().lower() or default
    if value not in allowed:
        raise RuntimeError(f"{name} must be one of {', '.join(allowed)} (got {value!r})")
    return value


def _number(name: str, default: str, cast=float):
    raw = os.getenv(name, default).strip() or default
    try:
        return cast(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number (got {raw!r})") from None


@dataclass(frozen=True)
class BotSettings:
    mode: str = MODE_WEBHOOK
    reply_style: str = REPLY_RICH
    verify_token: str = ""
    port: int = 10000
    poll_interval_seconds: float = 5.0
    outbound_mode: str = OUTBOUND_LIVE
    outbound_timeout_seconds: float = 10.0
    lookup_mode: str = LOOKUP_MOCK
    gst_api_base_url: str = ""
    gst_api_key: str = ""
    mock_delay_seconds: float = 1.0
    processed_messages_max: Optional[int] = None
    log_level: str = "INFO"

    @property
    def is_polling(self) -> bool:
        return self.mode == MODE_POLLING

    @property
    def rich_replies(self) -> bool:
        return self.reply_style == REPLY_RICH


def load_bot_settings() -> BotSettings:
    max_processed = os.getenv("PROCESSED_MESSAGES_MAX", "").strip()

    return BotSettings(
        mode=_choice("BOT_MODE", MODE_WEBHOOK, (MODE_WEBHOOK, MODE_POLLING)),
        reply_style=_choice("REPLY_STYLE", REPLY_RICH, (REPLY_RICH, REPLY_MINIMAL)),
        verify_token=os.getenv("VERIFY_TOKEN", "").strip(),
        port=_number("PORT", "10000", int),
        poll_interval_seconds=_number("POLL_INTERVAL_SECONDS", "5"),
        outbound_mode=_choice("OUTBOUND_MODE", OUTBOUND_LIVE, (OUTBOUND_LIVE, OUTBOUND_DRY_RUN)),
        outbound_timeout_seconds=_number("OUTBOUND_TIMEOUT_SECONDS", "10"),
        lookup_mode=_choice("GST_LOOKUP_MODE", LOOKUP_MOCK, (LOOKUP_MOCK, LOOKUP_HTTP)),
        gst_api_base_url=os.getenv("GST_API_BASE_URL", "").strip(),
        gst_api_key=os.getenv("GST_API_KEY", "").strip(),
        mock_delay_seconds=_number("GST_MOCK_DELAY_SECONDS", "1.0"),
        processed_messages_max=(
            _number("PROCESSED_MESSAGES_MAX", max_processed, int) if max_processed else None
        ),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )
