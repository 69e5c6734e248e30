from decimal import Decimal
from typing import Dict, List

from pydantic import BaseModel

from frontdesk.schemas.shift import ShiftOut


class TodaySummaryOut(BaseModel):
    active_shifts: int
    completed_shifts: int
    pending_handovers: int


class ShiftReportSummary(BaseModel):
    total_shifts: int
    completed_shifts: int
    total_revenue: Decimal
    total_discrepancy: Decimal
    average_shift_duration: int
    discrepancy_by_staff: Dict[str, Decimal] = {}


class ShiftReportOut(BaseModel):
    shifts: List[ShiftOut]
    summary: ShiftReportSummary
