from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from frontdesk.core.exceptions import ValidationError
from frontdesk.services.reporting import average_shift_duration
from frontdesk.services.seed import seed_demo


def test_today_summary_counts(open_shift, shifts, handovers, reporting, clock):
    done = open_shift("S1", opening=100)
    clock.advance(hours=4)
    shifts.end_shift(done.id, closing_cash_amount=100)
    open_shift("S2")
    open_shift("S3")
    handovers.create_handover("S2", "S3")

    summary = reporting.get_today_shifts_summary()

    assert summary == {"active_shifts": 2, "completed_shifts": 1, "pending_handovers": 1}


def test_today_summary_ignores_shifts_ended_yesterday(open_shift, shifts, reporting, clock):
    shift = open_shift("S1")
    clock.advance(hours=2)
    shifts.end_shift(shift.id, closing_cash_amount=500)
    clock.advance(days=1)

    assert reporting.get_today_shifts_summary()["completed_shifts"] == 0


def test_shift_report_summary(open_shift, shifts, reporting, clock):
    start = clock.now
    shift = open_shift("S1", opening=500)
    shifts.update_shift_stats(shift.id, total_revenue=1200)
    clock.advance(hours=7, minutes=30)
    shifts.end_shift(shift.id, closing_cash_amount=600)

    report = reporting.get_shift_report(start - timedelta(hours=1), start + timedelta(hours=1))

    summary = report["summary"]
    assert [s.id for s in report["shifts"]] == [shift.id]
    assert summary["total_shifts"] == 1
    assert summary["completed_shifts"] == 1
    assert summary["total_revenue"] == Decimal("1200")
    assert summary["total_discrepancy"] == Decimal("100")
    assert summary["average_shift_duration"] == 450
    assert summary["discrepancy_by_staff"] == {"S1": Decimal("100")}


def test_shift_report_average_skips_unfinished_shifts(open_shift, shifts, reporting, clock):
    start = clock.now
    first = open_shift("S1")
    open_shift("S2")
    clock.advance(hours=2)
    shifts.end_shift(first.id, closing_cash_amount=480)

    summary = reporting.get_shift_report(start, start + timedelta(hours=1))["summary"]

    assert summary["total_shifts"] == 2
    assert summary["completed_shifts"] == 1
    assert summary["average_shift_duration"] == 120
    assert summary["total_discrepancy"] == Decimal("-20")


def test_shift_report_empty_range(reporting, clock):
    report = reporting.get_shift_report(clock.now, clock.now + timedelta(days=1))

    assert report["shifts"] == []
    assert report["summary"]["average_shift_duration"] == 0
    assert report["summary"]["total_revenue"] == Decimal("0")


def test_shift_report_rejects_inverted_range(reporting, clock):
    with pytest.raises(ValidationError):
        reporting.get_shift_report(clock.now, clock.now - timedelta(days=1))


class _Worked:
    def __init__(self, start, end):
        self.actual_start = start
        self.actual_end = end


def test_average_shift_duration_rounds_to_whole_minutes():
    t0 = datetime(2026, 1, 1, 8, 0)
    shifts = [
        _Worked(t0, t0 + timedelta(minutes=60)),
        _Worked(t0, t0 + timedelta(minutes=91)),
        _Worked(t0, None),
    ]
    assert average_shift_duration(shifts) == 76
    assert average_shift_duration([_Worked(None, None)]) == 0


def test_seeded_demo_day_reports_cleanly(db, reporting):
    seed_demo(db)
    seed_demo(db)

    summary = reporting.get_today_shifts_summary()
    assert summary["active_shifts"] == 2
    assert summary["pending_handovers"] == 1
