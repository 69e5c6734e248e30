"""
Money helpers.
No business rules live here, only coercion and rounding.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation

from frontdesk.core.exceptions import ValidationError

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """Coerce ints, floats, strings and Decimals to a 2-place Decimal."""
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            # str() keeps floats like 0.1 from dragging binary noise along
            amount = Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise ValidationError(f"Invalid amount {value!r}", {"value": str(value)})
    if not amount.is_finite():
        raise ValidationError(f"Invalid amount {value!r}", {"value": str(value)})
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)

