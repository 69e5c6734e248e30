from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, condecimal

from frontdesk.models.enums import ShiftStatus
from frontdesk.schemas.handover import HandoverOut
from frontdesk.schemas.ledger import CashTransactionOut


class ShiftCreate(BaseModel):
    staff_id: str
    scheduled_start: datetime
    scheduled_end: datetime
    shift_type: Optional[str] = None
    opening_cash_amount: Optional[condecimal(max_digits=10, decimal_places=2)] = None
    notes: Optional[str] = None


class ShiftStart(BaseModel):
    opening_cash_amount: condecimal(max_digits=10, decimal_places=2)
    notes: Optional[str] = None


class ShiftEnd(BaseModel):
    closing_cash_amount: condecimal(max_digits=10, decimal_places=2)
    cash_discrepancy_notes: Optional[str] = None
    notes: Optional[str] = None


class ShiftStatsUpdate(BaseModel):
    total_transactions: Optional[int] = None
    total_revenue: Optional[condecimal(max_digits=12, decimal_places=2)] = None
    total_appointments: Optional[int] = None


class ShiftOut(BaseModel):
    id: int
    staff_id: str
    scheduled_start: datetime
    scheduled_end: datetime
    actual_start: Optional[datetime]
    actual_end: Optional[datetime]
    opening_cash_amount: Optional[Decimal]
    closing_cash_amount: Optional[Decimal]
    expected_cash_amount: Optional[Decimal]
    cash_discrepancy: Optional[Decimal]
    cash_discrepancy_notes: Optional[str]
    total_transactions: int
    total_revenue: Decimal
    total_appointments: int
    shift_type: str
    status: ShiftStatus
    notes: Optional[str]

    class Config:
        from_attributes = True


class ActiveShiftOut(ShiftOut):
    recent_transactions: List[CashTransactionOut] = []


class ShiftDetailOut(ShiftOut):
    transactions: List[CashTransactionOut] = []
    handovers_from: List[HandoverOut] = []
    handovers_to: List[HandoverOut] = []
