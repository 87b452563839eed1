from __future__ import annotations

from datetime import date
from typing import Optional

import pytest

from app.gst.lookup import GstServiceUnavailableError
from app.gst.models import StatusRecord
from app.outbound.gateway import (
    OutboundSendError,
    OutboundSendReceipt,
    OutboundSendRequest,
    SendStatus,
)

VALID_GST = "29AADCB2230M1Z2"


class FakeGateway:
    def __init__(self, fail: bool = False):
        self.sent: list[OutboundSendRequest] = []
        self.fail = fail

    def send_text(self, req: OutboundSendRequest) -> OutboundSendReceipt:
        self.sent.append(req)
        if self.fail:
            raise OutboundSendError("boom")
        return OutboundSendReceipt.now(status=SendStatus.SENT, detail="fake")

    @property
    def texts(self) -> list[str]:
        return [r.body_text for r in self.sent]


class FakeLookup:
    def __init__(self, record: Optional[StatusRecord] = None, unavailable: bool = False):
        self.record = record
        self.unavailable = unavailable
        self.calls: list[str] = []

    def lookup(self, gst_number: str) -> Optional[StatusRecord]:
        self.calls.append(gst_number)
        if self.unavailable:
            raise GstServiceUnavailableError("down")
        return self.record


def make_record(**overrides) -> StatusRecord:
    fields = dict(
        gst_number=VALID_GST,
        business_name="SAMPLE BUSINESS PRIVATE LIMITED",
        legal_name="Sample Business Pvt Ltd",
        state_code="29",
        registration_date=date(2022, 5, 15),
        business_type="Regular",
        status="Active",
        is_filed=True,
        last_filed=date(2024, 1, 25),
        due_date=date(2024, 2, 20),
        address="123 Business Street, Mumbai",
        contact="9876543210",
        turnover="₹5.2 Cr (2023-24)",
        compliance_score=88,
    )
    fields.update(overrides)
    return StatusRecord(**fields)


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def record() -> StatusRecord:
    return make_record()
