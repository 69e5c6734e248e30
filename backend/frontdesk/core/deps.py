from fastapi import Depends
from sqlalchemy.orm import Session

from frontdesk.core.database import get_db
from frontdesk.services.cash_ledger import CashLedger
from frontdesk.services.handover_coordinator import HandoverCoordinator
from frontdesk.services.reporting import ReportingEngine
from frontdesk.services.shift_manager import ShiftManager


def get_cash_ledger(db: Session = Depends(get_db)) -> CashLedger:
    return CashLedger(db)


def get_shift_manager(ledger: CashLedger = Depends(get_cash_ledger)) -> ShiftManager:
    return ShiftManager(ledger.db, ledger=ledger)


def get_handover_coordinator(ledger: CashLedger = Depends(get_cash_ledger)) -> HandoverCoordinator:
    return HandoverCoordinator(ledger.db, ledger=ledger)


def get_reporting_engine(db: Session = Depends(get_db)) -> ReportingEngine:
    return ReportingEngine(db)
