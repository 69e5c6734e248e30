import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENV", "test")

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from frontdesk.core.database import get_db
from frontdesk.main import app
from frontdesk.models import Base
from frontdesk.services.cash_ledger import CashLedger
from frontdesk.services.handover_coordinator import HandoverCoordinator
from frontdesk.services.reporting import ReportingEngine
from frontdesk.services.shift_manager import ShiftManager


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = Session()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 2, 9, 0, 0))


@pytest.fixture
def ledger(db, clock):
    return CashLedger(db, clock=clock)


@pytest.fixture
def shifts(db, ledger, clock):
    return ShiftManager(db, ledger=ledger, clock=clock)


@pytest.fixture
def handovers(db, ledger, clock):
    return HandoverCoordinator(db, ledger=ledger, clock=clock)


@pytest.fixture
def reporting(db, clock):
    return ReportingEngine(db, clock=clock)


@pytest.fixture
def open_shift(shifts, clock):
    """Create and start a shift for ``staff_id`` with ``opening`` in the drawer."""
    def _open(staff_id="S1", opening=500, hours=8):
        shift = shifts.create_shift(
            staff_id=staff_id,
            scheduled_start=clock.now,
            scheduled_end=clock.now + timedelta(hours=hours),
        )
        return shifts.start_shift(shift.id, opening_cash_amount=opening)
    return _open


@pytest.fixture
def client(db):
    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
