"""Display formatting helpers."""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

MINOR_UNIT = Decimal("0.01")


def fmt_price(value) -> str:
    """
    Round an amount to the currency's minor unit for display, e.g.
    Decimal('1333.335') -> '1333.34'. Stored prices keep full precision;
    this is only applied when rendering.
    On a value that is not a number, returns the original as text.
    """
    if value is None:
        return ""
    try:
        return str(Decimal(str(value)).quantize(MINOR_UNIT, rounding=ROUND_HALF_UP))
    except (InvalidOperation, ValueError):
        return str(value)
