from typing import List, Optional

from frontdesk.models.cash_drawer_transaction import CashDrawerTransaction
from frontdesk.repositories.base import Repository


class CashTransactionRepository(Repository[CashDrawerTransaction]):
    model = CashDrawerTransaction

    def latest_for_shift(self, shift_id: int) -> Optional[CashDrawerTransaction]:
        return (
            self.db.query(CashDrawerTransaction)
            .filter(CashDrawerTransaction.shift_id == shift_id)
            .order_by(CashDrawerTransaction.created_at.desc(), CashDrawerTransaction.id.desc())
            .first()
        )

    def for_shift(self, shift_id: int, limit: Optional[int] = None) -> List[CashDrawerTransaction]:
        query = (
            self.db.query(CashDrawerTransaction)
            .filter(CashDrawerTransaction.shift_id == shift_id)
            .order_by(CashDrawerTransaction.created_at.desc(), CashDrawerTransaction.id.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def chronological(self, shift_id: int) -> List[CashDrawerTransaction]:
        return (
            self.db.query(CashDrawerTransaction)
            .filter(CashDrawerTransaction.shift_id == shift_id)
            .order_by(CashDrawerTransaction.created_at.asc(), CashDrawerTransaction.id.asc())
            .all()
        )
