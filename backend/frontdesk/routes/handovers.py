from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from frontdesk.core.deps import get_handover_coordinator
from frontdesk.models.enums import HandoverStatus, HandoverType
from frontdesk.schemas.handover import (
    CashDrawerHandoverComplete,
    CashDrawerHandoverInitiate,
    HandoverAccept,
    HandoverCreate,
    HandoverOut,
    HandoverReject,
)
from frontdesk.services.handover_coordinator import HandoverCoordinator

router = APIRouter()


@router.post("/", response_model=HandoverOut)
def create_handover(payload: HandoverCreate, coordinator: HandoverCoordinator = Depends(get_handover_coordinator)):
    return coordinator.create_handover(
        from_staff_id=payload.from_staff_id,
        to_staff_id=payload.to_staff_id,
        from_shift_id=payload.from_shift_id,
        to_shift_id=payload.to_shift_id,
        handover_type=payload.handover_type,
        handover_notes=payload.handover_notes,
        pending_tasks=payload.pending_tasks,
        important_notes=payload.important_notes,
    )


@router.post("/cash-drawer", response_model=HandoverOut)
def initiate_cash_drawer_handover(
    payload: CashDrawerHandoverInitiate,
    coordinator: HandoverCoordinator = Depends(get_handover_coordinator),
):
    return coordinator.initiate_cash_drawer_handover(
        from_staff_id=payload.from_staff_id,
        to_staff_id=payload.to_staff_id,
        from_shift_id=payload.from_shift_id,
        cash_amount=payload.cash_amount,
        notes=payload.notes,
    )


@router.get("/pending", response_model=List[HandoverOut])
def get_pending_handovers(
    staff_id: str = Query(...),
    coordinator: HandoverCoordinator = Depends(get_handover_coordinator),
):
    return coordinator.get_pending_handovers(staff_id)


@router.get("/", response_model=List[HandoverOut])
def get_handover_history(
    staff_id: Optional[str] = Query(None),
    handover_type: Optional[HandoverType] = Query(None, alias="type"),
    status: Optional[HandoverStatus] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    limit: int = Query(50, ge=1, le=500),
    coordinator: HandoverCoordinator = Depends(get_handover_coordinator),
):
    return coordinator.get_handover_history(
        staff_id=staff_id,
        handover_type=handover_type,
        status=status,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
    )


@router.post("/{handover_id}/accept", response_model=HandoverOut)
def accept_handover(
    handover_id: int,
    payload: HandoverAccept,
    coordinator: HandoverCoordinator = Depends(get_handover_coordinator),
):
    return coordinator.accept_handover(handover_id, payload.acceptance_notes)


@router.post("/{handover_id}/complete", response_model=HandoverOut)
def complete_handover(handover_id: int, coordinator: HandoverCoordinator = Depends(get_handover_coordinator)):
    return coordinator.complete_handover(handover_id)


@router.post("/{handover_id}/reject", response_model=HandoverOut)
def reject_handover(
    handover_id: int,
    payload: HandoverReject,
    coordinator: HandoverCoordinator = Depends(get_handover_coordinator),
):
    return coordinator.reject_handover(handover_id, payload.reason)


@router.post("/{handover_id}/cash-drawer/complete", response_model=HandoverOut)
def complete_cash_drawer_handover(
    handover_id: int,
    payload: CashDrawerHandoverComplete,
    coordinator: HandoverCoordinator = Depends(get_handover_coordinator),
):
    return coordinator.complete_cash_drawer_handover(
        handover_id,
        to_shift_id=payload.to_shift_id,
        confirmed_cash_amount=payload.confirmed_cash_amount,
        acceptance_notes=payload.acceptance_notes,
    )
