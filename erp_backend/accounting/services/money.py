# accounting/services/money.py

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from accounting.services.exceptions import AccountingValidationError

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def money(value) -> Decimal:
    """Coerce to Decimal and round half-up to the minor currency unit."""
    if value is None or value == "":
        return ZERO

    if isinstance(value, Decimal):
        amt = value
    else:
        try:
            amt = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError) as exc:
            raise AccountingValidationError(f"Invalid money value: {value!r}") from exc

    if not amt.is_finite():
        raise AccountingValidationError(f"Invalid money value: {value!r}")

    return amt.quantize(TWOPLACES, rounding=ROUND_HALF_UP)
