"""
File: app/gst/lookup.py
Path: app/gst/lookup.py

Project: GST WhatsApp Relay

Purpose:
GST filing-status lookup behind a single interface.

Contract for every implementation:
- record found            -> StatusRecord
- provider says "unknown" -> None
- provider unreachable    -> GstServiceUnavailableError

Implementations:
- MockGstLookupClient: fixed delay, randomised filing flag and score
- HttpGstLookupClient: real provider over HTTP (GST_API_BASE_URL)
"""

from __future__ import annotations

import logging
import random
import time
from datetime import date, datetime, timezone
from typing import Callable, Optional, Protocol

import requests

from app.gst.models import StatusRecord

logger = logging.getLogger("gst_lookup")


class GstServiceUnavailableError(RuntimeError):
    pass


class GstLookupClient(Protocol):
    def lookup(self, gst_number: str) -> Optional[StatusRecord]:
        ...


# ------------------------------------------------------------------
# Mock provider
# ------------------------------------------------------------------
FILED_PROBABILITY = 0.7
GST_DUE_DAY = 20


def _shift_month(day: date, months: int, day_of_month: int) -> date:
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, day_of_month)


class MockGstLookupClient:
    """
    Stand-in provider. Always "succeeds" after a fixed delay.
    """

    def __init__(
        self,
        *,
        delay_seconds: float = 1.0,
        rng: Optional[random.Random] = None,
        today: Optional[Callable[[], date]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._delay_seconds = delay_seconds
        self._rng = rng or random.Random()
        self._today = today or (lambda: datetime.now(timezone.utc).date())
        self._sleep = sleep

    def lookup(self, gst_number: str) -> Optional[StatusRecord]:
        logger.info("Fetching GST details for: %s (mock)", gst_number)
        if self._delay_seconds > 0:
            self._sleep(self._delay_seconds)

        today = self._today()
        return StatusRecord(
            gst_number=gst_number,
            business_name="SAMPLE BUSINESS PRIVATE LIMITED",
            legal_name="Sample Business Pvt Ltd",
            state_code=gst_number[:2],
            registration_date=date(2022, 5, 15),
            business_type="Regular",
            status="Active",
            is_filed=self._rng.random() < FILED_PROBABILITY,
            last_filed=_shift_month(today, -1, GST_DUE_DAY),
            due_date=_shift_month(today, 1, GST_DUE_DAY),
            address="123 Business Street, Mumbai, Maharashtra 400001",
            contact="9876543210",
            turnover="₹5.2 Cr (2023-24)",
            compliance_score=self._rng.randint(70, 99),
        )


# ------------------------------------------------------------------
# HTTP provider
# ------------------------------------------------------------------
class HttpGstLookupClient:
    def __init__(
        self,
        *,
        base_url: str,
        api_key: str = "",
        session: Optional[requests.Session] = None,
        timeout: float = 10,
    ) -> None:
        if not base_url:
            raise RuntimeError("GST_API_BASE_URL is not set")
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._session = session or requests.Session()
        self._timeout = timeout

    def lookup(self, gst_number: str) -> Optional[StatusRecord]:
        url = f"{self._base_url}/gst/{gst_number}"
        headers = {"Accept": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        logger.info("Fetching GST details for: %s", gst_number)
        try:
            resp = self._session.get(url, headers=headers, timeout=self._timeout)
        except requests.RequestException as e:
            raise GstServiceUnavailableError(f"GST API not available: {e}") from e

        if resp.status_code == 404:
            return None

        if not 200 <= resp.status_code < 300:
            raise GstServiceUnavailableError(f"GST API returned HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise GstServiceUnavailableError("GST API returned invalid JSON") from e

        if not isinstance(data, dict):
            raise GstServiceUnavailableError("GST API returned an unexpected payload")

        if data.get("error"):
            logger.info("GST API reports %s unknown: %s", gst_number, data.get("error"))
            return None

        try:
            return StatusRecord.from_api(gst_number, data)
        except (TypeError, ValueError) as e:
            raise GstServiceUnavailableError(f"GST API record malformed: {e}") from e
