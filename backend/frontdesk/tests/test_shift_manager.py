import logging
from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy import event
from sqlalchemy.exc import IntegrityError

from frontdesk.core.exceptions import InvalidStateError, NotFoundError, ValidationError
from frontdesk.models.enums import ShiftStatus, TransactionType
from frontdesk.models.shift import Shift


def test_create_shift_is_active(shifts, clock):
    shift = shifts.create_shift(
        staff_id="S1",
        scheduled_start=clock.now,
        scheduled_end=clock.now + timedelta(hours=8),
    )

    assert shift.status == ShiftStatus.active
    assert shift.shift_type == "Regular"
    assert shift.actual_start is None
    assert shift.total_transactions == 0


def test_create_shift_rejects_inverted_schedule(shifts, clock):
    with pytest.raises(ValidationError):
        shifts.create_shift("S1", clock.now, clock.now - timedelta(hours=1))


def test_second_active_shift_for_same_staff_is_rejected(shifts, clock):
    shifts.create_shift("S1", clock.now, clock.now + timedelta(hours=8))

    with pytest.raises(InvalidStateError):
        shifts.create_shift("S1", clock.now, clock.now + timedelta(hours=4))

    assert len(shifts.get_shifts(staff_id="S1", status=ShiftStatus.active)) == 1


def test_unique_index_backs_up_the_single_active_rule(db, clock):
    db.add(Shift(staff_id="S1", scheduled_start=clock.now, scheduled_end=clock.now, status=ShiftStatus.active))
    db.commit()
    db.add(Shift(staff_id="S1", scheduled_start=clock.now, scheduled_end=clock.now, status=ShiftStatus.active))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_new_shift_allowed_after_previous_completed(open_shift, shifts, clock):
    first = open_shift("S1", opening=100)
    clock.advance(hours=8)
    shifts.end_shift(first.id, closing_cash_amount=100)

    second = shifts.create_shift("S1", clock.now, clock.now + timedelta(hours=8))
    assert second.status == ShiftStatus.active


def test_start_shift_records_opening(shifts, ledger, clock):
    shift = shifts.create_shift("S1", clock.now, clock.now + timedelta(hours=8))
    clock.advance(minutes=7)

    started = shifts.start_shift(shift.id, opening_cash_amount=500, notes="float counted")

    assert started.actual_start == clock.now
    assert started.opening_cash_amount == Decimal("500")
    assert started.notes == "float counted"
    assert ledger.get_current_balance(shift.id) == Decimal("500")


def test_start_shift_twice_is_rejected(open_shift, shifts, ledger):
    shift = open_shift(opening=500)

    with pytest.raises(InvalidStateError):
        shifts.start_shift(shift.id, opening_cash_amount=700)

    assert len(ledger.get_cash_transactions(shift.id)) == 1


def test_start_shift_validates_amount(shifts, clock):
    shift = shifts.create_shift("S1", clock.now, clock.now)
    with pytest.raises(ValidationError):
        shifts.start_shift(shift.id, opening_cash_amount=-5)
    with pytest.raises(NotFoundError):
        shifts.start_shift(404, opening_cash_amount=5)


def test_end_shift_discrepancy_uses_opening_snapshot(open_shift, shifts, ledger, clock):
    shift = open_shift(opening=500)
    clock.advance(minutes=30)
    ledger.create_transaction(shift.id, "S1", TransactionType.sale, 120, 500, 620)
    clock.advance(hours=8)

    ended = shifts.end_shift(shift.id, closing_cash_amount=600, cash_discrepancy_notes="coins short")

    assert ended.status == ShiftStatus.completed
    assert ended.expected_cash_amount == Decimal("500")
    assert ended.cash_discrepancy == Decimal("100")
    assert ended.closing_cash_amount == Decimal("600")
    assert ended.actual_end == clock.now
    assert ended.cash_discrepancy_notes == "coins short"

    closing = ledger.get_cash_transactions(shift.id)[0]
    assert closing.type == TransactionType.closing
    assert closing.previous_balance == Decimal("620")
    assert closing.new_balance == Decimal("600")
    assert closing.notes == "Discrepancy: 100.00"


def test_end_shift_twice_is_rejected(open_shift, shifts, clock):
    shift = open_shift(opening=500)
    clock.advance(hours=1)
    shifts.end_shift(shift.id, closing_cash_amount=500)

    with pytest.raises(InvalidStateError):
        shifts.end_shift(shift.id, closing_cash_amount=500)


def test_end_missing_shift(shifts):
    with pytest.raises(NotFoundError):
        shifts.end_shift(999, closing_cash_amount=0)


def test_get_active_shift(open_shift, shifts):
    assert shifts.get_active_shift("S1") is None
    shift = open_shift("S1")
    open_shift("S2")

    assert shifts.get_active_shift("S1").id == shift.id
    assert {s.staff_id for s in shifts.get_active_shifts()} == {"S1", "S2"}


def test_unstarted_active_shifts_sort_after_started_ones(db, shifts, open_shift, clock):
    waiting = shifts.create_shift("S9", clock.now, clock.now)
    clock.advance(minutes=5)
    started = open_shift("S1")
    statements = []

    def capture(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(db.get_bind(), "before_cursor_execute", capture)
    try:
        assert [s.id for s in shifts.get_active_shifts()] == [started.id, waiting.id]
        assert shifts.get_active_shift("S9").id == waiting.id
    finally:
        event.remove(db.get_bind(), "before_cursor_execute", capture)
    # Same order on backends that sort NULLs first by default
    assert all("actual_start DESC NULLS LAST" in s for s in statements if "ORDER BY" in s)
    assert statements


def test_get_active_shift_picks_most_recent_when_inconsistent(db, shifts, clock, caplog, monkeypatch):
    older = Shift(staff_id="S9", scheduled_start=clock.now, scheduled_end=clock.now,
                  actual_start=clock.now, status=ShiftStatus.active)
    newer = Shift(staff_id="S9", scheduled_start=clock.now, scheduled_end=clock.now,
                  actual_start=clock.now + timedelta(hours=1), status=ShiftStatus.active)
    # Legacy rows written before the unique index existed
    monkeypatch.setattr(shifts.shifts, "active_for_staff", lambda staff_id: [newer, older])

    with caplog.at_level(logging.WARNING, logger="frontdesk.services.shift_manager"):
        assert shifts.get_active_shift("S9") is newer
    assert "2 active shifts" in caplog.text


def test_get_shifts_filters_and_pages(shifts, clock):
    base = clock.now
    for day in range(5):
        staff = "S1" if day % 2 == 0 else "S2"
        shift = shifts.create_shift(staff, base + timedelta(days=day), base + timedelta(days=day, hours=8))
        shifts.end_shift(shift.id, closing_cash_amount=0)

    all_shifts = shifts.get_shifts()
    assert [s.scheduled_start for s in all_shifts] == sorted(
        (s.scheduled_start for s in all_shifts), reverse=True
    )
    assert {s.staff_id for s in shifts.get_shifts(staff_id="S1")} == {"S1"}
    assert len(shifts.get_shifts(staff_id="S1")) == 3
    assert len(shifts.get_shifts(limit=2)) == 2
    assert shifts.get_shifts(limit=2, offset=4)[0].scheduled_start == base
    window = shifts.get_shifts(start_date=base + timedelta(days=1), end_date=base + timedelta(days=2))
    assert len(window) == 2
    assert shifts.get_shifts(status=ShiftStatus.active) == []


def test_get_shift_by_id(open_shift, shifts):
    shift = open_shift()
    assert shifts.get_shift_by_id(shift.id).id == shift.id
    with pytest.raises(NotFoundError):
        shifts.get_shift_by_id(shift.id + 100)


def test_update_shift_stats_overwrites(open_shift, shifts):
    shift = open_shift()
    shifts.update_shift_stats(shift.id, total_transactions=4, total_revenue="350.50", total_appointments=3)

    updated = shifts.update_shift_stats(shift.id, total_transactions=2)

    assert updated.total_transactions == 2
    assert updated.total_revenue == Decimal("350.50")
    assert updated.total_appointments == 3
    with pytest.raises(ValidationError):
        shifts.update_shift_stats(shift.id, total_appointments=-1)
