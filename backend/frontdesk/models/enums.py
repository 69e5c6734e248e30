from enum import Enum


class ShiftStatus(str, Enum):
    active = "Active"
    completed = "Completed"


class HandoverStatus(str, Enum):
    pending = "Pending"
    accepted = "Accepted"
    completed = "Completed"
    rejected = "Rejected"


class HandoverType(str, Enum):
    general = "General"
    cash_drawer = "CashDrawer"
    emergency = "Emergency"


class TransactionType(str, Enum):
    opening = "Opening"
    closing = "Closing"
    handover = "Handover"
    sale = "Sale"
    refund = "Refund"
    adjustment = "Adjustment"
    deposit = "Deposit"
    withdrawal = "Withdrawal"


# Entries that (re)seed a drawer: previous balance is always 0
SEED_TRANSACTION_TYPES = {TransactionType.opening, TransactionType.handover}
# Entries that add / remove their amount from the running balance
INFLOW_TRANSACTION_TYPES = {TransactionType.sale, TransactionType.deposit}
OUTFLOW_TRANSACTION_TYPES = {TransactionType.refund, TransactionType.withdrawal}


def enum_column_values(enum_cls):
    return [member.value for member in enum_cls]
