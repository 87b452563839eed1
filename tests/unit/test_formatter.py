from __future__ import annotations

from datetime import datetime, timedelta, timezone

from app.gst.formatter import (
    HELP_TEXT,
    days_until,
    format_gst_report,
    format_gst_summary,
    format_urgent_alert,
    invalid_format_text,
)
from app.gst.models import StatusRecord

from tests.conftest import VALID_GST, make_record


def _today():
    return datetime.now(timezone.utc).date()


def test_report_filed_contains_identifier_and_badge(record: StatusRecord) -> None:
    report = format_gst_report(VALID_GST, record)

    assert VALID_GST in report
    assert "✅ FILED" in report
    assert "SAMPLE BUSINESS PRIVATE LIMITED" in report
    assert "Registration Date: 2022-05-15" in report
    assert "Compliance Score: 88%" in report
    assert report.endswith("✅ *All GST returns are filed up to date.*")


def test_report_not_filed_badge_and_closing() -> None:
    report = format_gst_report(VALID_GST, make_record(is_filed=False))

    assert "❌ NOT FILED" in report
    assert "✅ FILED" not in report
    assert report.endswith("⚠️ *GST returns are pending. Please file immediately.*")


def test_report_optional_fields_render_na() -> None:
    record = StatusRecord(
        gst_number=VALID_GST,
        business_name="ACME",
        status="Active",
        is_filed=False,
    )
    report = format_gst_report(VALID_GST, record)

    for label in (
        "Legal Name:* N/A",
        "State Code:* N/A",
        "Last Filed: N/A",
        "Due Date: N/A",
        "Address: N/A",
        "Contact: N/A",
        "Turnover: N/A",
        "Compliance Score: N/A",
    ):
        assert label in report
    assert "N/A%" not in report


def test_summary_is_compact() -> None:
    summary = format_gst_summary(VALID_GST, make_record(is_filed=False))
    assert summary.splitlines()[0] == f"GST: {VALID_GST}"
    assert "Due Date: 2024-02-20" in summary

    filed = format_gst_summary(VALID_GST, make_record())
    assert "Due Date" not in filed


def test_alert_three_days_out() -> None:
    due = _today() + timedelta(days=3)
    alert = format_urgent_alert(VALID_GST, make_record(is_filed=False, due_date=due))

    assert alert is not None
    assert VALID_GST in alert
    assert due.isoformat() in alert
    assert "Days Remaining: *3*" in alert


def test_alert_ten_days_out_is_silent() -> None:
    due = _today() + timedelta(days=10)
    assert format_urgent_alert(VALID_GST, make_record(is_filed=False, due_date=due)) is None


def test_alert_seven_day_boundary() -> None:
    now = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
    seven = make_record(is_filed=False, due_date=(now + timedelta(days=7)).date())
    eight = make_record(is_filed=False, due_date=(now + timedelta(days=8)).date())

    assert format_urgent_alert(VALID_GST, seven, now=now) is not None
    assert format_urgent_alert(VALID_GST, eight, now=now) is None


def test_alert_skipped_when_filed_or_no_due_date() -> None:
    due = _today() + timedelta(days=1)
    assert format_urgent_alert(VALID_GST, make_record(is_filed=True, due_date=due)) is None
    assert format_urgent_alert(VALID_GST, make_record(is_filed=False, due_date=None)) is None


def test_alert_overdue_reports_negative_days() -> None:
    now = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)
    record = make_record(is_filed=False, due_date=datetime(2024, 2, 20).date())

    alert = format_urgent_alert(VALID_GST, record, now=now)
    assert alert is not None
    assert "Days Remaining: *-10*" in alert


def test_days_until_rounds_up() -> None:
    now = datetime(2024, 3, 1, 0, 0, 1, tzinfo=timezone.utc)
    assert days_until(datetime(2024, 3, 4).date(), now) == 3

    midnight = datetime(2024, 3, 1, tzinfo=timezone.utc)
    assert days_until(datetime(2024, 3, 4).date(), midnight) == 3

    naive = datetime(2024, 3, 1, 23, 0)
    assert days_until(datetime(2024, 3, 2).date(), naive) == 1


def test_static_texts() -> None:
    assert "29AADCB2230M1Z2" in HELP_TEXT
    assert "ABC" in invalid_format_text("ABC")
