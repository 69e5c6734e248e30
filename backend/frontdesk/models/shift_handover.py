from frontdesk.core.timeutils import utcnow
from sqlalchemy import Column, Integer, String, Text, DateTime, Enum, ForeignKey, JSON
from sqlalchemy.orm import relationship

from frontdesk.models.base import Base
from frontdesk.models.enums import HandoverStatus, HandoverType, enum_column_values


class ShiftHandover(Base):
    __tablename__ = "shift_handovers"

    id = Column(Integer, primary_key=True, index=True)
    from_staff_id = Column(String(64), nullable=False, index=True)
    to_staff_id = Column(String(64), nullable=False, index=True)
    from_shift_id = Column(Integer, ForeignKey("shifts.id", ondelete="SET NULL"), nullable=True, index=True)
    # The receiving shift may not exist yet when the handover is created
    to_shift_id = Column(Integer, ForeignKey("shifts.id", ondelete="SET NULL"), nullable=True, index=True)

    handover_type = Column(
        Enum(HandoverType, name="handover_type", native_enum=False, length=20,
             values_callable=enum_column_values),
        nullable=False,
        default=HandoverType.general,
    )
    handover_notes = Column(Text, nullable=True)
    pending_tasks = Column(JSON, nullable=False, default=list)
    important_notes = Column(JSON, nullable=False, default=list)

    status = Column(
        Enum(HandoverStatus, name="handover_status", native_enum=False, length=20,
             values_callable=enum_column_values),
        nullable=False,
        default=HandoverStatus.pending,
        index=True,
    )
    handover_time = Column(DateTime, nullable=False, default=utcnow, index=True)
    accepted_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    acceptance_notes = Column(Text, nullable=True)

    from_shift = relationship("Shift", foreign_keys=[from_shift_id], back_populates="handovers_from")
    to_shift = relationship("Shift", foreign_keys=[to_shift_id], back_populates="handovers_to")
