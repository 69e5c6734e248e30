"""
Typed errors raised by the front desk services.

The HTTP layer maps each class to a status code through ``code``; services
raise them synchronously and never retry.

    FrontDeskError
    +-- NotFoundError          referenced shift / handover / transaction missing
    +-- InvalidStateError      operation not allowed from the current status
    +-- ValidationError        missing or out-of-range input
        +-- BalanceMismatchError   ledger previous_balance does not chain
"""
from typing import Any, Dict, Optional


class FrontDeskError(Exception):
    code = "frontdesk_error"
    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class NotFoundError(FrontDeskError):
    code = "not_found"
    status_code = 404

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(
            f"{entity} {entity_id} not found",
            {"entity": entity, "id": entity_id},
        )
        self.entity = entity
        self.entity_id = entity_id


class InvalidStateError(FrontDeskError):
    code = "invalid_state"
    status_code = 409


class ValidationError(FrontDeskError):
    code = "validation_error"
    status_code = 422


class BalanceMismatchError(ValidationError):
    code = "balance_mismatch"

    def __init__(self, shift_id: int, expected, received):
        super().__init__(
            f"previous_balance {received} does not match current balance {expected} of shift {shift_id}",
            {"shift_id": shift_id, "expected": str(expected), "received": str(received)},
        )
        self.shift_id = shift_id
        self.expected = expected
        self.received = received
