"""
Transfer of front desk responsibility between staff members.

General handovers follow Pending -> Accepted -> Completed (or Pending ->
Rejected). Cash drawer handovers are initiated with a cash snapshot and
completed in one call that also seeds the receiving shift's ledger with the
confirmed amount.
"""
import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from frontdesk.core.config import settings
from frontdesk.core.exceptions import InvalidStateError, NotFoundError, ValidationError
from frontdesk.core.locks import handover_locks, ledger_locks
from frontdesk.core.serialization_helpers import to_money
from frontdesk.core.timeutils import as_utc_naive, utcnow
from frontdesk.core.transitions import (
    CASH_DRAWER_PATH,
    GENERAL_PATH,
    ensure_handover_transition,
)
from frontdesk.models.enums import HandoverStatus, HandoverType, ShiftStatus, TransactionType
from frontdesk.models.shift_handover import ShiftHandover
from frontdesk.repositories import HandoverRepository, ShiftRepository
from frontdesk.schemas.handover import (
    CashSnapshotNote,
    cash_snapshot_of,
    dump_important_notes,
    dump_pending_tasks,
)
from frontdesk.services.cash_ledger import CashLedger

logger = logging.getLogger(__name__)


class HandoverCoordinator:
    def __init__(
        self,
        db: Session,
        ledger: Optional[CashLedger] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.clock = clock
        self.ledger = ledger or CashLedger(db, clock=clock)
        self.handovers = HandoverRepository(db)
        self.shifts = ShiftRepository(db)

    def create_handover(
        self,
        from_staff_id: str,
        to_staff_id: str,
        from_shift_id: Optional[int] = None,
        to_shift_id: Optional[int] = None,
        handover_type: HandoverType = HandoverType.general,
        handover_notes: Optional[str] = None,
        pending_tasks=None,
        important_notes=None,
    ) -> ShiftHandover:
        handover = self._build_handover(
            from_staff_id=from_staff_id,
            to_staff_id=to_staff_id,
            from_shift_id=from_shift_id,
            to_shift_id=to_shift_id,
            handover_type=handover_type,
            handover_notes=handover_notes,
            pending_tasks=pending_tasks,
            important_notes=important_notes,
        )
        self.db.commit()
        self.db.refresh(handover)
        logger.info(
            "handover id=%s type=%s %s -> %s created",
            handover.id, HandoverType(handover.handover_type).value, from_staff_id, to_staff_id,
        )
        return handover

    def accept_handover(self, handover_id: int, acceptance_notes: Optional[str] = None) -> ShiftHandover:
        with handover_locks.hold(handover_id):
            handover = self._get_for_update(handover_id)
            ensure_handover_transition(handover_id, handover.status, HandoverStatus.accepted)
            handover.status = HandoverStatus.accepted
            handover.accepted_at = self.clock()
            handover.acceptance_notes = acceptance_notes
            self.db.commit()
        self.db.refresh(handover)
        logger.info("handover id=%s accepted by %s", handover.id, handover.to_staff_id)
        return handover

    def complete_handover(self, handover_id: int) -> ShiftHandover:
        with handover_locks.hold(handover_id):
            handover = self._get_for_update(handover_id)
            if HandoverType(handover.handover_type) == HandoverType.cash_drawer:
                raise InvalidStateError(
                    f"Handover {handover_id} moves a cash drawer; complete it through the cash drawer flow",
                    {"handover_id": handover_id, "handover_type": HandoverType.cash_drawer.value},
                )
            ensure_handover_transition(handover_id, handover.status, HandoverStatus.completed, GENERAL_PATH)
            handover.status = HandoverStatus.completed
            handover.completed_at = self.clock()
            self.db.commit()
        self.db.refresh(handover)
        logger.info("handover id=%s completed", handover.id)
        return handover

    def reject_handover(self, handover_id: int, reason: Optional[str] = None) -> ShiftHandover:
        with handover_locks.hold(handover_id):
            handover = self._get_for_update(handover_id)
            ensure_handover_transition(handover_id, handover.status, HandoverStatus.rejected)
            handover.status = HandoverStatus.rejected
            handover.acceptance_notes = reason
            self.db.commit()
        self.db.refresh(handover)
        logger.info("handover id=%s rejected: %s", handover.id, reason or "-")
        return handover

    def get_pending_handovers(self, staff_id: str) -> List[ShiftHandover]:
        return self.handovers.pending_for(staff_id)

    def get_handover_history(
        self,
        staff_id: Optional[str] = None,
        handover_type: Optional[HandoverType] = None,
        status: Optional[HandoverStatus] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[ShiftHandover]:
        if limit is None:
            limit = settings.handover_history_limit
        if limit < 1:
            raise ValidationError("limit must be positive")
        return self.handovers.history(
            staff_id=staff_id,
            handover_type=HandoverType(handover_type) if handover_type else None,
            status=HandoverStatus(status) if status else None,
            start_date=as_utc_naive(start_date),
            end_date=as_utc_naive(end_date),
            limit=limit,
        )

    def initiate_cash_drawer_handover(
        self,
        from_staff_id: str,
        to_staff_id: str,
        from_shift_id: int,
        cash_amount,
        notes: Optional[str] = None,
    ) -> ShiftHandover:
        if cash_amount is None:
            raise ValidationError("cash_amount is required")
        amount = to_money(cash_amount)
        if amount < 0:
            raise ValidationError("cash_amount must not be negative")
        if from_shift_id is None:
            raise ValidationError("from_shift_id is required for a cash drawer handover")

        snapshot = CashSnapshotNote(cash_amount=amount, timestamp=self.clock())
        return self.create_handover(
            from_staff_id=from_staff_id,
            to_staff_id=to_staff_id,
            from_shift_id=from_shift_id,
            handover_type=HandoverType.cash_drawer,
            handover_notes=notes,
            important_notes=[snapshot],
        )

    def complete_cash_drawer_handover(
        self,
        handover_id: int,
        to_shift_id: int,
        confirmed_cash_amount,
        acceptance_notes: Optional[str] = None,
    ) -> ShiftHandover:
        if confirmed_cash_amount is None:
            raise ValidationError("confirmed_cash_amount is required")
        confirmed = to_money(confirmed_cash_amount)
        if confirmed < 0:
            raise ValidationError("confirmed_cash_amount must not be negative")

        with handover_locks.hold(handover_id), ledger_locks.hold(to_shift_id):
            handover = self._get_for_update(handover_id)
            if HandoverType(handover.handover_type) != HandoverType.cash_drawer:
                raise InvalidStateError(
                    f"Handover {handover_id} is not a cash drawer handover",
                    {"handover_id": handover_id, "handover_type": HandoverType(handover.handover_type).value},
                )
            ensure_handover_transition(handover_id, handover.status, HandoverStatus.completed, CASH_DRAWER_PATH)

            to_shift = self.shifts.get_for_update(to_shift_id)
            if to_shift is None:
                raise NotFoundError("Shift", to_shift_id)
            if to_shift.staff_id != handover.to_staff_id:
                raise ValidationError(
                    f"Shift {to_shift_id} belongs to {to_shift.staff_id}, not receiver {handover.to_staff_id}",
                    {"shift_id": to_shift_id, "to_staff_id": handover.to_staff_id},
                )
            if to_shift.status != ShiftStatus.active:
                raise InvalidStateError(
                    f"Receiving shift {to_shift_id} is not active",
                    {"shift_id": to_shift_id, "status": ShiftStatus(to_shift.status).value},
                )

            now = self.clock()
            snapshot = cash_snapshot_of(handover.important_notes)
            notes = acceptance_notes
            if snapshot is not None and snapshot.cash_amount != confirmed:
                difference = confirmed - snapshot.cash_amount
                logger.warning(
                    "cash handover id=%s confirmed %s against snapshot %s",
                    handover.id, confirmed, snapshot.cash_amount,
                )
                notes = "; ".join(filter(None, [acceptance_notes, f"Difference from snapshot: {difference}"]))
            try:
                handover.status = HandoverStatus.completed
                handover.to_shift_id = to_shift_id
                handover.accepted_at = handover.accepted_at or now
                handover.completed_at = now
                if acceptance_notes is not None:
                    handover.acceptance_notes = acceptance_notes
                # The receiving drawer restarts at the confirmed amount
                self.ledger.append(
                    shift_id=to_shift_id,
                    staff_id=handover.to_staff_id,
                    type=TransactionType.handover,
                    amount=confirmed,
                    previous_balance=0,
                    new_balance=confirmed,
                    handover_id=handover.id,
                    description=f"Cash drawer handover from {handover.from_staff_id}",
                    notes=notes,
                )
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise
        self.db.refresh(handover)
        logger.info(
            "cash handover id=%s completed into shift=%s amount=%s",
            handover.id, to_shift_id, confirmed,
        )
        return handover

    def _build_handover(
        self,
        from_staff_id: str,
        to_staff_id: str,
        from_shift_id: Optional[int],
        to_shift_id: Optional[int],
        handover_type: HandoverType,
        handover_notes: Optional[str],
        pending_tasks,
        important_notes,
    ) -> ShiftHandover:
        if not from_staff_id or not to_staff_id:
            raise ValidationError("from_staff_id and to_staff_id are required")
        if from_staff_id == to_staff_id:
            raise ValidationError("A handover needs two different staff members", {"staff_id": from_staff_id})
        try:
            handover_type = HandoverType(handover_type)
        except ValueError:
            raise ValidationError(f"Unknown handover type {handover_type!r}")
        for shift_id in (from_shift_id, to_shift_id):
            if shift_id is not None and self.shifts.get(shift_id) is None:
                raise NotFoundError("Shift", shift_id)
        try:
            tasks = dump_pending_tasks(pending_tasks)
            notes = dump_important_notes(important_notes)
        except ValueError as exc:
            # pydantic's ValidationError subclasses ValueError
            raise ValidationError("Malformed pending_tasks or important_notes", {"errors": str(exc)})

        handover = ShiftHandover(
            from_staff_id=from_staff_id,
            to_staff_id=to_staff_id,
            from_shift_id=from_shift_id,
            to_shift_id=to_shift_id,
            handover_type=handover_type,
            handover_notes=handover_notes,
            pending_tasks=tasks,
            important_notes=notes,
            status=HandoverStatus.pending,
            handover_time=self.clock(),
        )
        return self.handovers.add(handover)

    def _get_for_update(self, handover_id: int) -> ShiftHandover:
        handover = self.handovers.get_for_update(handover_id)
        if handover is None:
            raise NotFoundError("ShiftHandover", handover_id)
        return handover
