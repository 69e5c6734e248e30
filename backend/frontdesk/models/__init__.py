from .base import Base
from .enums import ShiftStatus, HandoverStatus, HandoverType, TransactionType
from .shift import Shift
from .cash_drawer_transaction import CashDrawerTransaction
from .shift_handover import ShiftHandover

__all__ = [
    "Base",
    "ShiftStatus",
    "HandoverStatus",
    "HandoverType",
    "TransactionType",
    "Shift",
    "CashDrawerTransaction",
    "ShiftHandover",
]
