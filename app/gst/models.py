"""
File: app/gst/models.py

Project: GST WhatsApp Relay

Purpose:
Plain data objects passed through the GST pipeline.
Nothing here is persisted; every object lives for one inbound message.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class InboundMessage:
    sender_address: str
    raw_text: str
    message_id: Optional[str] = None


def _parse_date(value: Any) -> Optional[date]:
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


@dataclass(frozen=True)
class StatusRecord:
    """
    Filing status for one GSTIN as reported by the lookup provider.
    """
    gst_number: str
    business_name: str
    status: str
    is_filed: bool
    legal_name: Optional[str] = None
    state_code: Optional[str] = None
    registration_date: Optional[date] = None
    business_type: Optional[str] = None
    last_filed: Optional[date] = None
    due_date: Optional[date] = None
    address: Optional[str] = None
    contact: Optional[str] = None
    turnover: Optional[str] = None
    compliance_score: Optional[int] = None

    @classmethod
    def from_api(cls, gst_number: str, data: Dict[str, Any]) -> "StatusRecord":
        """
        Build a record from the provider's camelCase JSON.
        """
        score = data.get("complianceScore")
        return cls(
            gst_number=data.get("gstNumber") or gst_number,
            business_name=data.get("businessName") or "N/A",
            status=data.get("status") or "Unknown",
            is_filed=bool(data.get("isFiled")),
            legal_name=_optional_str(data.get("legalName")),
            state_code=_optional_str(data.get("stateCode")),
            registration_date=_parse_date(data.get("registrationDate")),
            business_type=_optional_str(data.get("businessType")),
            last_filed=_parse_date(data.get("lastFiled")),
            due_date=_parse_date(data.get("dueDate")),
            address=_optional_str(data.get("address")),
            contact=_optional_str(data.get("contact")),
            turnover=_optional_str(data.get("turnover")),
            compliance_score=int(score) if score is not None else None,
        )
