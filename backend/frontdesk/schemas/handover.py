"""
Structured content carried by a handover.

``pending_tasks`` and ``important_notes`` are stored as JSON lists; every
element is tagged with ``kind`` so readers get a concrete model back instead of
a loose dict.
"""
from datetime import datetime
from decimal import Decimal
from typing import Annotated, List, Literal, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, Field, TypeAdapter, condecimal

from frontdesk.models.enums import HandoverStatus, HandoverType


def _new_id() -> str:
    return uuid4().hex


class PendingTask(BaseModel):
    kind: Literal["task"] = "task"
    id: str = Field(default_factory=_new_id)
    task: str = Field(min_length=1)
    priority: Literal["low", "medium", "high"] = "medium"
    completed: bool = False


class TextNote(BaseModel):
    kind: Literal["note"] = "note"
    id: str = Field(default_factory=_new_id)
    note: str = Field(min_length=1)
    level: Literal["info", "warning", "urgent"] = "info"


class CashSnapshotNote(BaseModel):
    """Cash counted by the sender when a drawer handover is initiated."""
    kind: Literal["cash_snapshot"] = "cash_snapshot"
    cash_amount: condecimal(max_digits=10, decimal_places=2, ge=0)
    timestamp: datetime


ImportantNote = Annotated[Union[TextNote, CashSnapshotNote], Field(discriminator="kind")]

pending_tasks_adapter = TypeAdapter(List[PendingTask])
important_notes_adapter = TypeAdapter(List[ImportantNote])


def dump_pending_tasks(tasks) -> list:
    return pending_tasks_adapter.dump_python(pending_tasks_adapter.validate_python(tasks or []), mode="json")


def dump_important_notes(notes) -> list:
    return important_notes_adapter.dump_python(important_notes_adapter.validate_python(notes or []), mode="json")


def load_pending_tasks(raw) -> List[PendingTask]:
    return pending_tasks_adapter.validate_python(raw or [])


def load_important_notes(raw) -> List[Union[TextNote, CashSnapshotNote]]:
    return important_notes_adapter.validate_python(raw or [])


def cash_snapshot_of(raw) -> Optional[CashSnapshotNote]:
    for note in load_important_notes(raw):
        if isinstance(note, CashSnapshotNote):
            return note
    return None


class HandoverCreate(BaseModel):
    from_staff_id: str
    to_staff_id: str
    from_shift_id: Optional[int] = None
    to_shift_id: Optional[int] = None
    handover_type: HandoverType = HandoverType.general
    handover_notes: Optional[str] = None
    pending_tasks: List[PendingTask] = []
    important_notes: List[ImportantNote] = []


class HandoverAccept(BaseModel):
    acceptance_notes: Optional[str] = None


class HandoverReject(BaseModel):
    reason: Optional[str] = None


class CashDrawerHandoverInitiate(BaseModel):
    from_staff_id: str
    to_staff_id: str
    from_shift_id: int
    cash_amount: condecimal(max_digits=10, decimal_places=2)
    notes: Optional[str] = None


class CashDrawerHandoverComplete(BaseModel):
    to_shift_id: int
    confirmed_cash_amount: condecimal(max_digits=10, decimal_places=2)
    acceptance_notes: Optional[str] = None


class HandoverOut(BaseModel):
    id: int
    from_staff_id: str
    to_staff_id: str
    from_shift_id: Optional[int]
    to_shift_id: Optional[int]
    handover_type: HandoverType
    handover_notes: Optional[str]
    pending_tasks: List[PendingTask]
    important_notes: List[ImportantNote]
    status: HandoverStatus
    handover_time: datetime
    accepted_at: Optional[datetime]
    completed_at: Optional[datetime]
    acceptance_notes: Optional[str]

    class Config:
        from_attributes = True
