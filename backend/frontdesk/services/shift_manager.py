"""
Front desk shift lifecycle: create, start, end, and lookups.

A shift is Active from creation until ``end_shift`` completes it. Starting a
shift seeds its cash ledger with an Opening entry; ending it appends a Closing
entry and records the discrepancy against the opening snapshot.
"""
import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from frontdesk.core.config import settings
from frontdesk.core.exceptions import InvalidStateError, NotFoundError, ValidationError
from frontdesk.core.locks import ledger_locks, staff_locks
from frontdesk.core.serialization_helpers import to_money
from frontdesk.core.timeutils import as_utc_naive, utcnow
from frontdesk.core.transitions import ensure_shift_transition
from frontdesk.models.cash_drawer_transaction import CashDrawerTransaction
from frontdesk.models.enums import ShiftStatus, TransactionType
from frontdesk.models.shift import Shift
from frontdesk.repositories import ShiftRepository
from frontdesk.services.cash_ledger import CashLedger

logger = logging.getLogger(__name__)


class ShiftManager:
    def __init__(
        self,
        db: Session,
        ledger: Optional[CashLedger] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.clock = clock
        self.ledger = ledger or CashLedger(db, clock=clock)
        self.shifts = ShiftRepository(db)

    def create_shift(
        self,
        staff_id: str,
        scheduled_start: datetime,
        scheduled_end: datetime,
        shift_type: Optional[str] = None,
        opening_cash_amount=None,
        notes: Optional[str] = None,
    ) -> Shift:
        if not staff_id:
            raise ValidationError("staff_id is required")
        if scheduled_start is None or scheduled_end is None:
            raise ValidationError("scheduled_start and scheduled_end are required")
        scheduled_start = as_utc_naive(scheduled_start)
        scheduled_end = as_utc_naive(scheduled_end)
        if scheduled_end < scheduled_start:
            raise ValidationError(
                "scheduled_end precedes scheduled_start",
                {"scheduled_start": scheduled_start.isoformat(), "scheduled_end": scheduled_end.isoformat()},
            )
        opening = None
        if opening_cash_amount is not None:
            opening = to_money(opening_cash_amount)
            if opening < 0:
                raise ValidationError("opening_cash_amount must not be negative")

        with staff_locks.hold(staff_id):
            existing = self.shifts.active_for_staff(staff_id)
            if existing:
                raise InvalidStateError(
                    f"Staff {staff_id} already has active shift {existing[0].id}",
                    {"staff_id": staff_id, "shift_id": existing[0].id},
                )
            shift = Shift(
                staff_id=staff_id,
                scheduled_start=scheduled_start,
                scheduled_end=scheduled_end,
                shift_type=shift_type or settings.default_shift_type,
                opening_cash_amount=opening,
                notes=notes,
                status=ShiftStatus.active,
                created_at=self.clock(),
            )
            try:
                self.shifts.add(shift)
                self.db.commit()
            except IntegrityError:
                # A concurrent writer won the unique (staff_id, Active) index
                self.db.rollback()
                raise InvalidStateError(
                    f"Staff {staff_id} already has an active shift",
                    {"staff_id": staff_id},
                )
        self.db.refresh(shift)
        logger.info("created shift id=%s staff=%s type=%s", shift.id, staff_id, shift.shift_type)
        return shift

    def start_shift(self, shift_id: int, opening_cash_amount, notes: Optional[str] = None) -> Shift:
        if opening_cash_amount is None:
            raise ValidationError("opening_cash_amount is required")
        opening = to_money(opening_cash_amount)
        if opening < 0:
            raise ValidationError("opening_cash_amount must not be negative")

        with ledger_locks.hold(shift_id):
            shift = self._get_for_update(shift_id)
            if shift.status != ShiftStatus.active:
                raise InvalidStateError(
                    f"Shift {shift_id} is {ShiftStatus(shift.status).value} and cannot be started",
                    {"shift_id": shift_id, "status": ShiftStatus(shift.status).value},
                )
            if shift.actual_start is not None:
                raise InvalidStateError(
                    f"Shift {shift_id} was already started at {shift.actual_start.isoformat()}",
                    {"shift_id": shift_id},
                )
            try:
                self.ledger.append(
                    shift_id=shift.id,
                    staff_id=shift.staff_id,
                    type=TransactionType.opening,
                    amount=opening,
                    previous_balance=0,
                    new_balance=opening,
                    description="Opening cash drawer balance",
                )
                shift.actual_start = self.clock()
                shift.opening_cash_amount = opening
                if notes is not None:
                    shift.notes = notes
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise
        self.db.refresh(shift)
        logger.info("started shift id=%s opening=%s", shift.id, opening)
        return shift

    def end_shift(
        self,
        shift_id: int,
        closing_cash_amount,
        cash_discrepancy_notes: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Shift:
        if closing_cash_amount is None:
            raise ValidationError("closing_cash_amount is required")
        closing = to_money(closing_cash_amount)
        if closing < 0:
            raise ValidationError("closing_cash_amount must not be negative")

        with ledger_locks.hold(shift_id):
            shift = self._get_for_update(shift_id)
            ensure_shift_transition(shift_id, shift.status, ShiftStatus.completed)

            # Expected cash is the opening snapshot, not the running ledger balance
            expected = to_money(shift.opening_cash_amount or 0)
            discrepancy = closing - expected
            try:
                # Closing goes in while the shift is still Active
                self.ledger.append(
                    shift_id=shift.id,
                    staff_id=shift.staff_id,
                    type=TransactionType.closing,
                    amount=closing,
                    previous_balance=self.ledger.get_current_balance(shift.id),
                    new_balance=closing,
                    description="Closing cash drawer balance",
                    notes=f"Discrepancy: {discrepancy}" if discrepancy != 0 else None,
                )
                shift.actual_end = self.clock()
                shift.closing_cash_amount = closing
                shift.expected_cash_amount = expected
                shift.cash_discrepancy = discrepancy
                shift.cash_discrepancy_notes = cash_discrepancy_notes
                if notes is not None:
                    shift.notes = notes
                shift.status = ShiftStatus.completed
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise
        self.db.refresh(shift)
        if discrepancy != 0:
            logger.warning("shift id=%s closed with discrepancy %s", shift.id, discrepancy)
        else:
            logger.info("ended shift id=%s closing=%s", shift.id, closing)
        return shift

    def get_active_shift(self, staff_id: str) -> Optional[Shift]:
        shifts = self.shifts.active_for_staff(staff_id)
        if not shifts:
            return None
        if len(shifts) > 1:
            logger.warning(
                "staff=%s has %d active shifts (%s); using most recent id=%s",
                staff_id, len(shifts), [s.id for s in shifts], shifts[0].id,
            )
        return shifts[0]

    def get_recent_transactions(self, shift_id: int, limit: Optional[int] = None) -> List[CashDrawerTransaction]:
        if limit is None:
            limit = settings.active_shift_recent_transactions
        return self.ledger.transactions.for_shift(shift_id, limit=limit)

    def get_active_shifts(self) -> List[Shift]:
        return self.shifts.active()

    def get_shifts(
        self,
        staff_id: Optional[str] = None,
        status: Optional[ShiftStatus] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Shift]:
        if limit is None:
            limit = settings.shift_page_size
        if limit < 1 or offset < 0:
            raise ValidationError("limit must be positive and offset non-negative")
        return self.shifts.search(
            staff_id=staff_id,
            status=ShiftStatus(status) if status else None,
            start_date=as_utc_naive(start_date),
            end_date=as_utc_naive(end_date),
            limit=limit,
            offset=offset,
        )

    def get_shift_by_id(self, shift_id: int) -> Shift:
        shift = self.shifts.get(shift_id)
        if shift is None:
            raise NotFoundError("Shift", shift_id)
        return shift

    def update_shift_stats(
        self,
        shift_id: int,
        total_transactions: Optional[int] = None,
        total_revenue=None,
        total_appointments: Optional[int] = None,
    ) -> Shift:
        # Overwrite, not increment: callers send the full aggregate values
        if total_transactions is not None and total_transactions < 0:
            raise ValidationError("total_transactions must not be negative")
        if total_appointments is not None and total_appointments < 0:
            raise ValidationError("total_appointments must not be negative")
        revenue = to_money(total_revenue) if total_revenue is not None else None

        shift = self.get_shift_by_id(shift_id)
        if total_transactions is not None:
            shift.total_transactions = total_transactions
        if revenue is not None:
            shift.total_revenue = revenue
        if total_appointments is not None:
            shift.total_appointments = total_appointments
        self.db.commit()
        self.db.refresh(shift)
        return shift

    def _get_for_update(self, shift_id: int) -> Shift:
        shift = self.shifts.get_for_update(shift_id)
        if shift is None:
            raise NotFoundError("Shift", shift_id)
        return shift

