from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from ..core.constants import AMOUNT_MAX_FRACTION_DIGITS, AMOUNT_MAX_INTEGER_DIGITS
from ..core.exceptions import ValidationError

_CENT = Decimal(1).scaleb(-AMOUNT_MAX_FRACTION_DIGITS)


def require_string(value, field_name: str) -> None:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")


def require_non_empty(value: str, field_name: str) -> str:
    require_string(value, field_name)
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_max_length(value: Optional[str], field_name: str, max_len: int) -> Optional[str]:
    """Strip ``value``; blank becomes ``None``."""
    require_string(value, field_name)
    v = (value or "").strip()
    if len(v) > max_len:
        raise ValidationError(f"{field_name} must not exceed {max_len} characters")
    return v or None


def require_positive_int(value, field_name: str) -> int:
    try:
        v = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if v <= 0:
        raise ValidationError(f"{field_name} must be a positive integer")
    return v


def require_valid_amount(value) -> Decimal:
    """Parse a monetary amount: > 0, at most 8 integer and 2 fractional digits.

    Floats go through ``str`` so ``12.3`` stays ``12.30`` instead of a binary
    expansion.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError("Amount is required")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError("Amount must be a number")
    if not amount.is_finite():
        raise ValidationError("Amount must be a number")

    if amount <= 0:
        raise ValidationError("Amount must be greater than zero")

    _, digits, exponent = amount.normalize().as_tuple()
    fraction_digits = max(0, -exponent)
    integer_digits = max(0, len(digits) + exponent)
    if fraction_digits > AMOUNT_MAX_FRACTION_DIGITS or integer_digits > AMOUNT_MAX_INTEGER_DIGITS:
        raise ValidationError(
            f"Amount must have at most {AMOUNT_MAX_INTEGER_DIGITS} integer digits "
            f"and {AMOUNT_MAX_FRACTION_DIGITS} decimal places"
        )
    return amount.quantize(_CENT)


def require_not_in_future(value: date, today: date, field_name: str = "Expense date") -> date:
    if value is None:
        raise ValidationError(f"{field_name} is required")
    if value > today:
        raise ValidationError(f"{field_name} cannot be in the future")
    return value
