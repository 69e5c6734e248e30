from datetime import datetime
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query

from frontdesk.core.deps import get_shift_manager
from frontdesk.models.enums import ShiftStatus
from frontdesk.schemas.ledger import CashTransactionOut
from frontdesk.schemas.shift import (
    ActiveShiftOut,
    ShiftCreate,
    ShiftDetailOut,
    ShiftEnd,
    ShiftOut,
    ShiftStart,
    ShiftStatsUpdate,
)
from frontdesk.services.shift_manager import ShiftManager

router = APIRouter()


@router.post("/", response_model=ShiftOut)
def create_shift(payload: ShiftCreate, manager: ShiftManager = Depends(get_shift_manager)):
    return manager.create_shift(
        staff_id=payload.staff_id,
        scheduled_start=payload.scheduled_start,
        scheduled_end=payload.scheduled_end,
        shift_type=payload.shift_type,
        opening_cash_amount=payload.opening_cash_amount,
        notes=payload.notes,
    )


@router.post("/{shift_id}/start", response_model=ShiftOut)
def start_shift(shift_id: int, payload: ShiftStart, manager: ShiftManager = Depends(get_shift_manager)):
    return manager.start_shift(shift_id, payload.opening_cash_amount, notes=payload.notes)


@router.post("/{shift_id}/end", response_model=ShiftOut)
def end_shift(shift_id: int, payload: ShiftEnd, manager: ShiftManager = Depends(get_shift_manager)):
    return manager.end_shift(
        shift_id,
        payload.closing_cash_amount,
        cash_discrepancy_notes=payload.cash_discrepancy_notes,
        notes=payload.notes,
    )


@router.get("/active", response_model=Union[List[ShiftOut], Optional[ActiveShiftOut]])
def get_active(
    staff_id: Optional[str] = Query(None),
    manager: ShiftManager = Depends(get_shift_manager),
):
    """All active shifts, or the single active shift of ``staff_id`` with its latest ledger entries."""
    if not staff_id:
        return [ShiftOut.model_validate(s) for s in manager.get_active_shifts()]
    shift = manager.get_active_shift(staff_id)
    if shift is None:
        return None
    recent = manager.get_recent_transactions(shift.id)
    return ActiveShiftOut(
        **ShiftOut.model_validate(shift).model_dump(),
        recent_transactions=[CashTransactionOut.model_validate(t) for t in recent],
    )


@router.get("/", response_model=List[ShiftOut])
def list_shifts(
    staff_id: Optional[str] = Query(None),
    status: Optional[ShiftStatus] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    manager: ShiftManager = Depends(get_shift_manager),
):
    return manager.get_shifts(
        staff_id=staff_id,
        status=status,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset,
    )


@router.get("/{shift_id}", response_model=ShiftDetailOut)
def get_shift(shift_id: int, manager: ShiftManager = Depends(get_shift_manager)):
    return manager.get_shift_by_id(shift_id)


@router.patch("/{shift_id}/stats", response_model=ShiftOut)
def update_stats(shift_id: int, payload: ShiftStatsUpdate, manager: ShiftManager = Depends(get_shift_manager)):
    return manager.update_shift_stats(
        shift_id,
        total_transactions=payload.total_transactions,
        total_revenue=payload.total_revenue,
        total_appointments=payload.total_appointments,
    )
