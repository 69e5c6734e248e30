from typing import List

from fastapi import APIRouter, Depends

from frontdesk.core.deps import get_cash_ledger
from frontdesk.schemas.ledger import (
    CashBalanceOut,
    CashTransactionCreate,
    CashTransactionOut,
    CashTransactionVerify,
)
from frontdesk.services.cash_ledger import CashLedger

router = APIRouter()


@router.post("/transactions", response_model=CashTransactionOut)
def create_cash_transaction(payload: CashTransactionCreate, ledger: CashLedger = Depends(get_cash_ledger)):
    return ledger.create_transaction(**payload.model_dump())


@router.get("/shifts/{shift_id}/transactions", response_model=List[CashTransactionOut])
def get_cash_transactions(shift_id: int, ledger: CashLedger = Depends(get_cash_ledger)):
    return ledger.get_cash_transactions(shift_id)


@router.get("/shifts/{shift_id}/balance", response_model=CashBalanceOut)
def get_current_cash_balance(shift_id: int, ledger: CashLedger = Depends(get_cash_ledger)):
    return {"shift_id": shift_id, "balance": ledger.get_current_balance(shift_id)}


@router.post("/transactions/{transaction_id}/verify", response_model=CashTransactionOut)
def verify_cash_transaction(
    transaction_id: int,
    payload: CashTransactionVerify,
    ledger: CashLedger = Depends(get_cash_ledger),
):
    return ledger.verify_transaction(transaction_id, payload.verified_by)
