from frontdesk.core.timeutils import utcnow
from sqlalchemy import Column, Integer, String, Text, DateTime, Numeric, Enum, ForeignKey, Index
from sqlalchemy.orm import relationship

from frontdesk.models.base import Base
from frontdesk.models.enums import TransactionType, enum_column_values


class CashDrawerTransaction(Base):
    __tablename__ = "cash_drawer_transactions"
    __table_args__ = (
        Index("ix_cash_drawer_transactions_shift_created", "shift_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    shift_id = Column(Integer, ForeignKey("shifts.id", ondelete="RESTRICT"), nullable=False, index=True)
    # May differ from the shift owner when the drawer was received in a handover
    staff_id = Column(String(64), nullable=False, index=True)

    type = Column(
        Enum(TransactionType, name="cash_transaction_type", native_enum=False, length=20,
             values_callable=enum_column_values),
        nullable=False,
    )
    amount = Column(Numeric(10, 2), nullable=False)
    previous_balance = Column(Numeric(10, 2), nullable=False)
    new_balance = Column(Numeric(10, 2), nullable=False)

    cash_amount = Column(Numeric(10, 2), nullable=True)
    card_amount = Column(Numeric(10, 2), nullable=True)
    other_amount = Column(Numeric(10, 2), nullable=True)

    # Link to the billing event that caused the movement
    reference_id = Column(String(64), nullable=True, index=True)
    reference_type = Column(String(50), nullable=True)

    description = Column(String(500), nullable=True)
    notes = Column(Text, nullable=True)

    verified_by = Column(String(64), nullable=True)
    verified_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)

    shift = relationship("Shift", back_populates="transactions")
