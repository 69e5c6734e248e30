from datetime import datetime
from typing import List, Optional

from sqlalchemy import or_

from frontdesk.models.enums import HandoverStatus, HandoverType
from frontdesk.models.shift_handover import ShiftHandover
from frontdesk.repositories.base import Repository


class HandoverRepository(Repository[ShiftHandover]):
    model = ShiftHandover

    def pending_for(self, staff_id: str) -> List[ShiftHandover]:
        return (
            self.db.query(ShiftHandover)
            .filter(
                ShiftHandover.to_staff_id == staff_id,
                ShiftHandover.status == HandoverStatus.pending,
            )
            .order_by(ShiftHandover.handover_time.desc(), ShiftHandover.id.desc())
            .all()
        )

    def history(
        self,
        staff_id: Optional[str] = None,
        handover_type: Optional[HandoverType] = None,
        status: Optional[HandoverStatus] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: int = 50,
    ) -> List[ShiftHandover]:
        query = self.db.query(ShiftHandover)
        if staff_id:
            query = query.filter(
                or_(ShiftHandover.from_staff_id == staff_id, ShiftHandover.to_staff_id == staff_id)
            )
        if handover_type:
            query = query.filter(ShiftHandover.handover_type == handover_type)
        if status:
            query = query.filter(ShiftHandover.status == status)
        if start_date:
            query = query.filter(ShiftHandover.handover_time >= start_date)
        if end_date:
            query = query.filter(ShiftHandover.handover_time <= end_date)
        return (
            query.order_by(ShiftHandover.handover_time.desc(), ShiftHandover.id.desc())
            .limit(limit)
            .all()
        )

    def count_pending(self) -> int:
        return self.db.query(ShiftHandover).filter(ShiftHandover.status == HandoverStatus.pending).count()
