from frontdesk.core.timeutils import utcnow
from sqlalchemy import Column, Integer, String, Text, DateTime, Numeric, Enum, Index, text
from sqlalchemy.orm import relationship

from frontdesk.models.base import Base
from frontdesk.models.enums import ShiftStatus, enum_column_values


class Shift(Base):
    __tablename__ = "shifts"
    __table_args__ = (
        # At most one Active shift per staff member
        Index(
            "uq_shifts_one_active_per_staff",
            "staff_id",
            unique=True,
            sqlite_where=text("status = 'Active'"),
            postgresql_where=text("status = 'Active'"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    staff_id = Column(String(64), nullable=False, index=True)

    scheduled_start = Column(DateTime, nullable=False, index=True)
    scheduled_end = Column(DateTime, nullable=False)
    actual_start = Column(DateTime, nullable=True)
    actual_end = Column(DateTime, nullable=True)

    opening_cash_amount = Column(Numeric(10, 2), nullable=True)
    closing_cash_amount = Column(Numeric(10, 2), nullable=True)
    expected_cash_amount = Column(Numeric(10, 2), nullable=True)
    cash_discrepancy = Column(Numeric(10, 2), nullable=True)
    cash_discrepancy_notes = Column(Text, nullable=True)

    # Denormalized aggregates, overwritten by billing callers
    total_transactions = Column(Integer, nullable=False, default=0)
    total_revenue = Column(Numeric(12, 2), nullable=False, default=0)
    total_appointments = Column(Integer, nullable=False, default=0)

    shift_type = Column(String(50), nullable=False, default="Regular")
    status = Column(
        Enum(ShiftStatus, name="shift_status", native_enum=False, length=20,
             values_callable=enum_column_values),
        nullable=False,
        default=ShiftStatus.active,
        index=True,
    )
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    transactions = relationship(
        "CashDrawerTransaction",
        back_populates="shift",
        order_by="desc(CashDrawerTransaction.created_at), desc(CashDrawerTransaction.id)",
    )
    handovers_from = relationship(
        "ShiftHandover", foreign_keys="ShiftHandover.from_shift_id", back_populates="from_shift"
    )
    handovers_to = relationship(
        "ShiftHandover", foreign_keys="ShiftHandover.to_shift_id", back_populates="to_shift"
    )
