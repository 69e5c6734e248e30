from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, condecimal

from frontdesk.models.enums import TransactionType


class CashTransactionCreate(BaseModel):
    shift_id: int
    staff_id: str
    type: TransactionType
    amount: condecimal(max_digits=10, decimal_places=2)
    previous_balance: condecimal(max_digits=10, decimal_places=2)
    new_balance: condecimal(max_digits=10, decimal_places=2)
    cash_amount: Optional[condecimal(max_digits=10, decimal_places=2)] = None
    card_amount: Optional[condecimal(max_digits=10, decimal_places=2)] = None
    other_amount: Optional[condecimal(max_digits=10, decimal_places=2)] = None
    reference_id: Optional[str] = None
    reference_type: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None


class CashTransactionVerify(BaseModel):
    verified_by: str


class CashTransactionOut(BaseModel):
    id: int
    shift_id: int
    staff_id: str
    type: TransactionType
    amount: Decimal
    previous_balance: Decimal
    new_balance: Decimal
    cash_amount: Optional[Decimal]
    card_amount: Optional[Decimal]
    other_amount: Optional[Decimal]
    reference_id: Optional[str]
    reference_type: Optional[str]
    description: Optional[str]
    notes: Optional[str]
    verified_by: Optional[str]
    verified_at: Optional[datetime]
    created_at: datetime

    class Config:
        from_attributes = True


class CashBalanceOut(BaseModel):
    shift_id: int
    balance: Decimal
