"""
Append-only cash drawer ledger.

Every balance-affecting event of a shift is one immutable row carrying the
balance before and after it. Appends for a shift are serialized (row lock on
the shift plus an in-process per-shift lock) so "read last balance, validate,
append" is one unit and two writers cannot both chain from the same balance.

Seed entries start a drawer from zero: Opening only on an empty ledger (written
by starting the shift), Handover only when a cash drawer handover completes
into the shift. Every other entry must chain from the newest entry of the shift.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from frontdesk.core.exceptions import (
    BalanceMismatchError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from frontdesk.core.locks import ledger_locks
from frontdesk.core.serialization_helpers import to_money
from frontdesk.core.timeutils import utcnow
from frontdesk.models.cash_drawer_transaction import CashDrawerTransaction
from frontdesk.models.enums import (
    INFLOW_TRANSACTION_TYPES,
    HandoverStatus,
    HandoverType,
    OUTFLOW_TRANSACTION_TYPES,
    SEED_TRANSACTION_TYPES,
    ShiftStatus,
    TransactionType,
)
from frontdesk.repositories import CashTransactionRepository, HandoverRepository, ShiftRepository

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")
HANDOVER_REFERENCE_TYPE = "ShiftHandover"


def parse_transaction_type(value) -> TransactionType:
    try:
        return TransactionType(value)
    except ValueError:
        raise ValidationError(f"Unknown transaction type {value!r}", {"type": value})


def expected_new_balance(tx_type: TransactionType, amount: Decimal, previous_balance: Decimal) -> Decimal:
    """Balance a well-formed entry of ``tx_type`` must end at."""
    if tx_type in SEED_TRANSACTION_TYPES:
        return amount
    if tx_type in INFLOW_TRANSACTION_TYPES:
        return previous_balance + amount
    if tx_type in OUTFLOW_TRANSACTION_TYPES:
        return previous_balance - amount
    if tx_type == TransactionType.adjustment:
        return previous_balance + amount
    # Closing records the counted cash
    return amount


class CashLedger:
    def __init__(self, db: Session, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.clock = clock
        self.shifts = ShiftRepository(db)
        self.transactions = CashTransactionRepository(db)
        self.handovers = HandoverRepository(db)

    def create_transaction(
        self,
        shift_id: int,
        staff_id: str,
        type: TransactionType,
        amount,
        previous_balance,
        new_balance,
        cash_amount=None,
        card_amount=None,
        other_amount=None,
        reference_id: Optional[str] = None,
        reference_type: Optional[str] = None,
        description: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> CashDrawerTransaction:
        tx_type = parse_transaction_type(type)
        if tx_type in SEED_TRANSACTION_TYPES:
            raise ValidationError(
                f"{tx_type.value} entries are written by starting a shift or completing a cash drawer handover",
                {"type": tx_type.value},
            )
        try:
            with ledger_locks.hold(shift_id):
                tx = self.append(
                    shift_id=shift_id,
                    staff_id=staff_id,
                    type=type,
                    amount=amount,
                    previous_balance=previous_balance,
                    new_balance=new_balance,
                    cash_amount=cash_amount,
                    card_amount=card_amount,
                    other_amount=other_amount,
                    reference_id=reference_id,
                    reference_type=reference_type,
                    description=description,
                    notes=notes,
                )
                self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(tx)
        return tx

    def append(
        self,
        shift_id: int,
        staff_id: str,
        type: TransactionType,
        amount,
        previous_balance,
        new_balance,
        cash_amount=None,
        card_amount=None,
        other_amount=None,
        reference_id: Optional[str] = None,
        reference_type: Optional[str] = None,
        description: Optional[str] = None,
        notes: Optional[str] = None,
        handover_id: Optional[int] = None,
    ) -> CashDrawerTransaction:
        """
        Validate and add one entry without committing.

        Used directly by the shift and handover services so the ledger entry
        and the status change land in the same database transaction.
        """
        tx_type = parse_transaction_type(type)
        if tx_type == TransactionType.handover:
            if handover_id is None:
                raise ValidationError("Handover entries need the handover that moved the drawer")
            reference_id = str(handover_id)
            reference_type = HANDOVER_REFERENCE_TYPE
        if not staff_id:
            raise ValidationError("staff_id is required")

        amount = self._required_amount("amount", amount, allow_negative=tx_type == TransactionType.adjustment)
        previous_balance = self._required_amount("previous_balance", previous_balance, allow_negative=True)
        new_balance = self._required_amount("new_balance", new_balance, allow_negative=True)
        splits = {
            "cash_amount": self._optional_amount("cash_amount", cash_amount),
            "card_amount": self._optional_amount("card_amount", card_amount),
            "other_amount": self._optional_amount("other_amount", other_amount),
        }

        with ledger_locks.hold(shift_id):
            shift = self.shifts.get_for_update(shift_id)
            if shift is None:
                raise NotFoundError("Shift", shift_id)
            if shift.status != ShiftStatus.active:
                raise InvalidStateError(
                    f"Shift {shift_id} is {ShiftStatus(shift.status).value}; its ledger is closed",
                    {"shift_id": shift_id, "status": ShiftStatus(shift.status).value},
                )

            if tx_type == TransactionType.opening and self.transactions.latest_for_shift(shift_id) is not None:
                raise InvalidStateError(
                    f"Shift {shift_id} already has ledger entries; an Opening only starts an empty drawer",
                    {"shift_id": shift_id},
                )
            if tx_type in SEED_TRANSACTION_TYPES:
                if previous_balance != ZERO:
                    raise ValidationError(
                        f"{tx_type.value} entries start from a zero balance",
                        {"previous_balance": str(previous_balance)},
                    )
            else:
                current = self._current_balance(shift_id)
                if previous_balance != current:
                    logger.info(
                        "rejected %s on shift=%s: previous_balance=%s current=%s",
                        tx_type.value, shift_id, previous_balance, current,
                    )
                    raise BalanceMismatchError(shift_id, current, previous_balance)

            expected = to_money(expected_new_balance(tx_type, amount, previous_balance))
            if new_balance != expected:
                raise ValidationError(
                    f"new_balance {new_balance} does not follow from {tx_type.value} of {amount} "
                    f"on {previous_balance}",
                    {"expected": str(expected), "received": str(new_balance)},
                )

            tx = CashDrawerTransaction(
                shift_id=shift_id,
                staff_id=staff_id,
                type=tx_type,
                amount=amount,
                previous_balance=previous_balance,
                new_balance=new_balance,
                reference_id=reference_id,
                reference_type=reference_type,
                description=description,
                notes=notes,
                created_at=self.clock(),
                **splits,
            )
            self.transactions.add(tx)

        logger.info(
            "ledger append shift=%s type=%s amount=%s balance %s -> %s",
            shift_id, tx_type.value, amount, previous_balance, new_balance,
        )
        return tx

    def get_current_balance(self, shift_id: int) -> Decimal:
        return self._current_balance(shift_id)

    def get_cash_transactions(self, shift_id: int) -> List[CashDrawerTransaction]:
        return self.transactions.for_shift(shift_id)

    def verify_transaction(self, transaction_id: int, verified_by: str) -> CashDrawerTransaction:
        if not verified_by:
            raise ValidationError("verified_by is required")
        tx = self.transactions.get(transaction_id)
        if tx is None:
            raise NotFoundError("CashDrawerTransaction", transaction_id)
        if tx.verified_at is not None:
            raise InvalidStateError(
                f"Transaction {transaction_id} was already verified by {tx.verified_by}",
                {"transaction_id": transaction_id, "verified_by": tx.verified_by},
            )
        tx.verified_by = verified_by
        tx.verified_at = self.clock()
        self.db.commit()
        self.db.refresh(tx)
        return tx

    def get_chain_breaks(self, shift_id: int) -> List[CashDrawerTransaction]:
        """
        Entries that break the running balance.

        The first entry starts from zero. After it, a restart from zero is only
        valid as the Handover entry of a cash drawer handover completed into
        this shift; every other entry chains from its predecessor.
        """
        breaks = []
        previous: Optional[CashDrawerTransaction] = None
        for tx in self.transactions.chronological(shift_id):
            if previous is None:
                ok = to_money(tx.previous_balance) == ZERO
            elif TransactionType(tx.type) == TransactionType.handover:
                ok = to_money(tx.previous_balance) == ZERO and self._is_completed_handover_into(tx, shift_id)
            elif TransactionType(tx.type) == TransactionType.opening:
                ok = False
            else:
                ok = to_money(tx.previous_balance) == to_money(previous.new_balance)
            if not ok:
                breaks.append(tx)
            previous = tx
        return breaks

    def _is_completed_handover_into(self, tx: CashDrawerTransaction, shift_id: int) -> bool:
        if tx.reference_type != HANDOVER_REFERENCE_TYPE or not (tx.reference_id or "").isdigit():
            return False
        handover = self.handovers.get(int(tx.reference_id))
        return (
            handover is not None
            and handover.to_shift_id == shift_id
            and handover.status == HandoverStatus.completed
            and handover.handover_type == HandoverType.cash_drawer
        )

    def _current_balance(self, shift_id: int) -> Decimal:
        latest = self.transactions.latest_for_shift(shift_id)
        if latest is None:
            return ZERO
        return to_money(latest.new_balance)

    @staticmethod
    def _required_amount(name: str, value, allow_negative: bool = False) -> Decimal:
        if value is None:
            raise ValidationError(f"{name} is required", {"field": name})
        amount = to_money(value)
        if amount < 0 and not allow_negative:
            raise ValidationError(f"{name} must not be negative", {"field": name, "value": str(amount)})
        return amount

    @staticmethod
    def _optional_amount(name: str, value) -> Optional[Decimal]:
        if value is None:
            return None
        amount = to_money(value)
        if amount < 0:
            raise ValidationError(f"{name} must not be negative", {"field": name, "value": str(amount)})
        return amount
