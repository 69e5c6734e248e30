from datetime import timedelta

from sqlalchemy.orm import Session

from frontdesk.core.timeutils import utcnow
from frontdesk.models.shift import Shift
from frontdesk.services.handover_coordinator import HandoverCoordinator
from frontdesk.services.shift_manager import ShiftManager


def seed_demo(db: Session):
    """Two front desk staff mid-day: a morning shift handing its drawer to the afternoon."""
    if db.query(Shift).first():
        return
    now = utcnow()
    shifts = ShiftManager(db)
    handovers = HandoverCoordinator(db, ledger=shifts.ledger)

    morning = shifts.create_shift("reception-1", now - timedelta(hours=4), now + timedelta(hours=4), shift_type="Morning")
    shifts.start_shift(morning.id, opening_cash_amount=300)
    balance = shifts.ledger.get_current_balance(morning.id)
    shifts.ledger.create_transaction(
        shift_id=morning.id,
        staff_id="reception-1",
        type="Sale",
        amount=120,
        previous_balance=balance,
        new_balance=balance + 120,
        cash_amount=120,
        reference_id="INV-1001",
        reference_type="Invoice",
        description="Consultation fee",
    )
    shifts.update_shift_stats(morning.id, total_transactions=1, total_revenue=120, total_appointments=3)

    afternoon = shifts.create_shift("reception-2", now, now + timedelta(hours=8), shift_type="Afternoon")
    handover = handovers.initiate_cash_drawer_handover(
        "reception-1", "reception-2", morning.id, cash_amount=420, notes="Drawer counted at noon",
    )
    handovers.create_handover(
        "reception-1",
        "reception-2",
        from_shift_id=morning.id,
        to_shift_id=afternoon.id,
        pending_tasks=[{"task": "Call lab about pending results", "priority": "high"}],
        important_notes=[{"kind": "note", "note": "Card terminal 2 offline", "level": "warning"}],
    )
    handovers.complete_cash_drawer_handover(handover.id, afternoon.id, confirmed_cash_amount=420)
