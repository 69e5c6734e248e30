from .shifts import ShiftRepository
from .cash_transactions import CashTransactionRepository
from .handovers import HandoverRepository

__all__ = ["ShiftRepository", "CashTransactionRepository", "HandoverRepository"]
