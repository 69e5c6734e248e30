from datetime import datetime
from typing import List, Optional

from frontdesk.models.enums import ShiftStatus
from frontdesk.models.shift import Shift
from frontdesk.repositories.base import Repository


class ShiftRepository(Repository[Shift]):
    model = Shift

    def active_for_staff(self, staff_id: str) -> List[Shift]:
        return (
            self.db.query(Shift)
            .filter(Shift.staff_id == staff_id, Shift.status == ShiftStatus.active)
            .order_by(Shift.actual_start.desc().nulls_last(), Shift.scheduled_start.desc(), Shift.id.desc())
            .all()
        )

    def active(self) -> List[Shift]:
        return (
            self.db.query(Shift)
            .filter(Shift.status == ShiftStatus.active)
            .order_by(Shift.actual_start.desc().nulls_last(), Shift.id.desc())
            .all()
        )

    def search(
        self,
        staff_id: Optional[str] = None,
        status: Optional[ShiftStatus] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Shift]:
        query = self.db.query(Shift)
        if staff_id:
            query = query.filter(Shift.staff_id == staff_id)
        if status:
            query = query.filter(Shift.status == status)
        if start_date:
            query = query.filter(Shift.scheduled_start >= start_date)
        if end_date:
            query = query.filter(Shift.scheduled_start <= end_date)
        return (
            query.order_by(Shift.scheduled_start.desc(), Shift.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    def scheduled_between(self, start_date: datetime, end_date: datetime) -> List[Shift]:
        return (
            self.db.query(Shift)
            .filter(Shift.scheduled_start >= start_date, Shift.scheduled_start <= end_date)
            .order_by(Shift.scheduled_start.asc(), Shift.id.asc())
            .all()
        )

    def count_active(self) -> int:
        return self.db.query(Shift).filter(Shift.status == ShiftStatus.active).count()

    def count_completed_between(self, start: datetime, end: datetime) -> int:
        return (
            self.db.query(Shift)
            .filter(
                Shift.status == ShiftStatus.completed,
                Shift.actual_end >= start,
                Shift.actual_end < end,
            )
            .count()
        )
