"""Base models and value coercion shared across the hierarchy."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from live_grouping.exceptions import ValidationError


@dataclass
class LocalFile:
    """A file picked in the admin UI that has not been uploaded yet."""

    filename: str
    content: bytes
    content_type: str | None = None


@dataclass
class PaymentInfo:
    """Payment metadata attached to a booking."""

    amount: Decimal
    currency: str = "INR"
    user_name: str = ""
    payment_id: str | None = None


def is_blank(value: Any) -> bool:
    """Return True for the values a form submits for an empty field."""
    return value is None or (isinstance(value, str) and not value.strip())


def to_decimal(value: Any) -> Decimal | None:
    """Coerce a form value to Decimal, mapping blanks to None.

    Raises
    ------
    ValidationError
        If the value is not a finite number.
    """
    if is_blank(value):
        return None
    if isinstance(value, bool):
        raise ValidationError(f"Expected a number, got {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValidationError(f"Expected a number, got {value!r}") from exc
    if not result.is_finite():
        raise ValidationError(f"Expected a finite number, got {value!r}")
    return result


def to_int(value: Any) -> int | None:
    """Coerce a form value to int, mapping blanks to None."""
    if is_blank(value):
        return None
    if isinstance(value, bool):
        raise ValidationError(f"Expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    number = to_decimal(value)
    if number is None or number != number.to_integral_value():
        raise ValidationError(f"Expected an integer, got {value!r}")
    return int(number)
