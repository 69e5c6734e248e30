"""
Read-only aggregation over shifts and handovers for the front desk dashboard.
"""
from collections import defaultdict
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Dict, List, Optional, TypedDict

from sqlalchemy.orm import Session

from frontdesk.core.exceptions import ValidationError
from frontdesk.core.serialization_helpers import to_money
from frontdesk.core.timeutils import as_utc_naive, clinic_day_bounds, clinic_today, minutes_between, utcnow
from frontdesk.models.enums import ShiftStatus
from frontdesk.models.shift import Shift
from frontdesk.repositories import HandoverRepository, ShiftRepository


class TodaySummary(TypedDict):
    active_shifts: int
    completed_shifts: int
    pending_handovers: int


class ShiftReportSummary(TypedDict):
    total_shifts: int
    completed_shifts: int
    total_revenue: Decimal
    total_discrepancy: Decimal
    average_shift_duration: int
    discrepancy_by_staff: Dict[str, Decimal]


class ShiftReport(TypedDict):
    shifts: List[Shift]
    summary: ShiftReportSummary


def average_shift_duration(shifts: List[Shift]) -> int:
    """Mean worked minutes over shifts with both actual start and end, 0 if none."""
    worked = [
        minutes_between(s.actual_start, s.actual_end)
        for s in shifts
        if s.actual_start is not None and s.actual_end is not None
    ]
    if not worked:
        return 0
    mean = Decimal(str(sum(worked) / len(worked)))
    return int(mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class ReportingEngine:
    def __init__(self, db: Session, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.clock = clock
        self.shifts = ShiftRepository(db)
        self.handovers = HandoverRepository(db)

    def get_today_shifts_summary(self, now: Optional[datetime] = None) -> TodaySummary:
        now = as_utc_naive(now) if now else self.clock()
        start, end = clinic_day_bounds(clinic_today(now))
        return {
            "active_shifts": self.shifts.count_active(),
            "completed_shifts": self.shifts.count_completed_between(start, end),
            "pending_handovers": self.handovers.count_pending(),
        }

    def get_shift_report(self, start_date: datetime, end_date: datetime) -> ShiftReport:
        if start_date is None or end_date is None:
            raise ValidationError("start_date and end_date are required")
        start_date = as_utc_naive(start_date)
        end_date = as_utc_naive(end_date)
        if start_date > end_date:
            raise ValidationError("start_date must be <= end_date")

        shifts = self.shifts.scheduled_between(start_date, end_date)

        total_revenue = sum((to_money(s.total_revenue or 0) for s in shifts), Decimal("0.00"))
        total_discrepancy = sum((to_money(s.cash_discrepancy or 0) for s in shifts), Decimal("0.00"))
        by_staff: Dict[str, Decimal] = defaultdict(lambda: Decimal("0.00"))
        for s in shifts:
            if s.status == ShiftStatus.completed:
                by_staff[s.staff_id] += to_money(s.cash_discrepancy or 0)

        return {
            "shifts": shifts,
            "summary": {
                "total_shifts": len(shifts),
                "completed_shifts": sum(1 for s in shifts if s.status == ShiftStatus.completed),
                "total_revenue": total_revenue,
                "total_discrepancy": total_discrepancy,
                "average_shift_duration": average_shift_duration(shifts),
                "discrepancy_by_staff": dict(by_staff),
            },
        }
