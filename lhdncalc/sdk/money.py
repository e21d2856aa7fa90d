"""Ringgit amount parsing and rounding.

All monetary values are held as Decimal with sen (2 decimal place)
precision. Amounts arrive loosely typed from the CLI, YAML files and JSON
records, so everything passes through parse_amount() before it reaches
the tax engine. Bad input is rejected, never coerced to zero.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

SEN = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")

# Largest accepted amount. Totals built from amounts this size stay inside
# the 28-digit default decimal context.
MAX_AMOUNT = Decimal("1000000000000000")


class InvalidInputError(ValueError):
    """Raised when an amount or input record fails validation."""
    pass


def to_decimal(value: Any, field: str = "amount") -> Decimal:
    """Convert a number or numeric string to a finite Decimal.

    Floats are converted through their repr so that 0.1 becomes
    Decimal("0.1") rather than its binary expansion. Strings may carry
    thousands separators and an "RM" prefix.

    Raises:
        InvalidInputError: If the value is not numeric, is a bool, or is
            NaN/infinite, or larger than MAX_AMOUNT.
    """
    if isinstance(value, bool):
        raise InvalidInputError(f"{field} must be a number, got bool: {value!r}")

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(repr(value))
    elif isinstance(value, str):
        text = value.strip().replace(",", "")
        if text[:2].upper() == "RM":
            text = text[2:].strip()
        if not text:
            raise InvalidInputError(f"{field} is empty")
        try:
            result = Decimal(text)
        except InvalidOperation:
            raise InvalidInputError(f"{field} is not a number: {value!r}")
    else:
        raise InvalidInputError(f"{field} must be a number, got {type(value).__name__}: {value!r}")

    if not result.is_finite():
        raise InvalidInputError(f"{field} must be finite: {value!r}")
    if abs(result) > MAX_AMOUNT:
        raise InvalidInputError(f"{field} exceeds the maximum of {format_rm(MAX_AMOUNT)}: {value!r}")

    return result


def parse_amount(value: Any, field: str = "amount", allow_zero: bool = True) -> Decimal:
    """Parse a ringgit amount, rejecting negatives and sub-sen precision.

    Args:
        value: Raw amount (str, int, float or Decimal)
        field: Field name used in error messages
        allow_zero: If False, zero is rejected as well as negatives

    Returns:
        Amount as a Decimal quantized to sen

    Raises:
        InvalidInputError: If the amount is invalid
    """
    amount = to_decimal(value, field)

    if amount < 0:
        raise InvalidInputError(f"{field} must not be negative: {value!r}")
    if not allow_zero and amount == 0:
        raise InvalidInputError(f"{field} must be greater than zero")
    if amount != amount.quantize(SEN, rounding=ROUND_HALF_UP):
        raise InvalidInputError(f"{field} has more precision than sen: {value!r}")

    return amount.quantize(SEN)


def round_sen(amount: Decimal) -> Decimal:
    """Round to the nearest sen (0.005 rounds up)."""
    try:
        return amount.quantize(SEN, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise InvalidInputError(f"amount is too large to round to sen: {amount}")


def percent(part: Decimal, whole: Decimal) -> Decimal:
    """Return part / whole * 100 to 2 dp, or 0 when whole is not positive."""
    if whole <= 0:
        return ZERO.quantize(SEN)
    return (part / whole * HUNDRED).quantize(SEN, rounding=ROUND_HALF_UP)


def format_rm(amount: Decimal) -> str:
    """Format an amount for display, e.g. RM 12,345.60."""
    return f"RM {amount:,.2f}"


def money_str(amount: Optional[Decimal]) -> Optional[str]:
    """Serialize an amount as a fixed 2 dp string (None passes through)."""
    if amount is None:
        return None
    return str(round_sen(amount))
