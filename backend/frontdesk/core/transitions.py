"""
Status transition tables for shifts and handovers.

A handover can be completed through two paths: the general protocol
(Pending -> Accepted -> Completed) and the cash drawer path, which may skip
the Accepted step because it seeds the receiving shift's ledger in the same
operation.
"""
from typing import Dict, FrozenSet, Tuple

from frontdesk.core.exceptions import InvalidStateError
from frontdesk.models.enums import HandoverStatus, ShiftStatus

GENERAL_PATH = "general"
CASH_DRAWER_PATH = "cash_drawer"

SHIFT_TRANSITIONS: Dict[ShiftStatus, FrozenSet[ShiftStatus]] = {
    ShiftStatus.active: frozenset({ShiftStatus.completed}),
    ShiftStatus.completed: frozenset(),
}

HANDOVER_TRANSITIONS: Dict[str, Dict[HandoverStatus, FrozenSet[HandoverStatus]]] = {
    GENERAL_PATH: {
        HandoverStatus.pending: frozenset({HandoverStatus.accepted, HandoverStatus.rejected}),
        HandoverStatus.accepted: frozenset({HandoverStatus.completed}),
        HandoverStatus.completed: frozenset(),
        HandoverStatus.rejected: frozenset(),
    },
    CASH_DRAWER_PATH: {
        HandoverStatus.pending: frozenset({HandoverStatus.completed}),
        HandoverStatus.accepted: frozenset({HandoverStatus.completed}),
        HandoverStatus.completed: frozenset(),
        HandoverStatus.rejected: frozenset(),
    },
}

TERMINAL_HANDOVER_STATUSES: Tuple[HandoverStatus, ...] = (
    HandoverStatus.completed,
    HandoverStatus.rejected,
)


def can_transition_shift(current, target) -> bool:
    return ShiftStatus(target) in SHIFT_TRANSITIONS[ShiftStatus(current)]


def can_transition_handover(current, target, path: str = GENERAL_PATH) -> bool:
    return HandoverStatus(target) in HANDOVER_TRANSITIONS[path][HandoverStatus(current)]


def ensure_shift_transition(shift_id, current, target) -> None:
    if not can_transition_shift(current, target):
        raise InvalidStateError(
            f"Shift {shift_id} cannot move from {ShiftStatus(current).value} to {ShiftStatus(target).value}",
            {"shift_id": shift_id, "status": ShiftStatus(current).value, "target": ShiftStatus(target).value},
        )


def ensure_handover_transition(handover_id, current, target, path: str = GENERAL_PATH) -> None:
    if not can_transition_handover(current, target, path):
        raise InvalidStateError(
            f"Handover {handover_id} cannot move from {HandoverStatus(current).value} "
            f"to {HandoverStatus(target).value}",
            {
                "handover_id": handover_id,
                "status": HandoverStatus(current).value,
                "target": HandoverStatus(target).value,
                "path": path,
            },
        )
