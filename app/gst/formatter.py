"""
File: app/gst/formatter.py

Project: GST WhatsApp Relay

Purpose:
Every piece of text the bot sends lives here.
- Static replies (help, processing, invalid format, not found, unavailable)
- Full GST report (rich variant) and compact summary (minimal variant)
- Urgent alert when an unfiled return is due within ALERT_WINDOW_DAYS

Rules:
- Pure functions; the alert reads the clock only when `now` is not given
- Optional fields render as N/A
"""

from __future__ import annotations

import math
from datetime import date, datetime, time, timezone
from typing import Optional

from app.gst.models import StatusRecord

ALERT_WINDOW_DAYS = 7
EXAMPLE_GST = "29AADCB2230M1Z2"
NA = "N/A"


# =========================
# Static Text
# =========================

HELP_TEXT = (
    "📋 *Welcome to GST Verification Bot*\n\n"
    "Please send a valid GST number (15 characters).\n"
    f"Example: *{EXAMPLE_GST}*\n\n"
    "I will check the filing status and provide details."
)


def processing_text(gst_number: str) -> str:
    return f"🔍 Checking GST: {gst_number}\nPlease wait..."


def invalid_format_text(gst_number: str) -> str:
    return (
        "❌ *Invalid GST Format*\n\n"
        f"GST Number: {gst_number}\n"
        "Please send a valid 15-character GST number.\n"
        "Format: 2 digits + 10 chars + 3 digits\n"
        f"Example: {EXAMPLE_GST}"
    )


def not_found_text(gst_number: str) -> str:
    return (
        "❌ *GST Not Found*\n\n"
        f"GST Number: *{gst_number}*\n"
        "This GST number is not registered or not found in our database.\n\n"
        "Please verify the number and try again."
    )


def service_unavailable_text(gst_number: str) -> str:
    return (
        "⚠️ *Service Temporarily Unavailable*\n\n"
        f"We encountered an error while processing GST: {gst_number}\n"
        "Please try again in a few minutes."
    )


# =========================
# Helpers
# =========================

def _or_na(value) -> str:
    if value is None or value == "":
        return NA
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _badge(record: StatusRecord) -> str:
    return "✅ FILED" if record.is_filed else "❌ NOT FILED"


# =========================
# Reports
# =========================

def format_gst_report(gst_number: str, record: StatusRecord) -> str:
    score = f"{record.compliance_score}%" if record.compliance_score is not None else NA
    closing = (
        "✅ *All GST returns are filed up to date.*"
        if record.is_filed
        else "⚠️ *GST returns are pending. Please file immediately.*"
    )

    lines = [
        "📄 *GST Verification Results*",
        "",
        f"*GST Number:* {gst_number}",
        f"*Business Name:* {_or_na(record.business_name)}",
        f"*Legal Name:* {_or_na(record.legal_name)}",
        f"*State Code:* {_or_na(record.state_code)}",
        f"*Status:* {_badge(record)}",
        f"*Registration Status:* {_or_na(record.status)}",
        "",
        "📅 *Filing Details:*",
        f"• Registration Date: {_or_na(record.registration_date)}",
        f"• Last Filed: {_or_na(record.last_filed)}",
        f"• Due Date: {_or_na(record.due_date)}",
        f"• Business Type: {_or_na(record.business_type)}",
        f"• Compliance Score: {score}",
        "",
        "🏢 *Business Info:*",
        f"• Address: {_or_na(record.address)}",
        f"• Contact: {_or_na(record.contact)}",
        f"• Turnover: {_or_na(record.turnover)}",
        "",
        closing,
    ]
    return "\n".join(lines)


def format_gst_summary(gst_number: str, record: StatusRecord) -> str:
    """Compact reply for the minimal variant."""
    lines = [
        f"GST: {gst_number}",
        f"Business: {_or_na(record.business_name)}",
        f"Status: {_badge(record)}",
    ]
    if not record.is_filed:
        lines.append(f"Due Date: {_or_na(record.due_date)}")
    return "\n".join(lines)


# =========================
# Alert
# =========================

def days_until(due_date: date, now: Optional[datetime] = None) -> int:
    """
    Whole days from `now` to midnight UTC of `due_date`, rounded up.
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    due = datetime.combine(due_date, time.min, tzinfo=timezone.utc)
    return math.ceil((due - now).total_seconds() / 86400)


def format_urgent_alert(
    gst_number: str,
    record: StatusRecord,
    now: Optional[datetime] = None,
) -> Optional[str]:
    if record.is_filed or record.due_date is None:
        return None

    days_remaining = days_until(record.due_date, now)
    if days_remaining > ALERT_WINDOW_DAYS:
        return None

    return (
        "🚨 *URGENT ALERT*\n\n"
        f"GST: *{gst_number}*\n"
        "Status: *NOT FILED*\n"
        f"Due Date: *{record.due_date.isoformat()}*\n"
        f"Days Remaining: *{days_remaining}*\n\n"
        "Please file immediately to avoid penalties!"
    )
