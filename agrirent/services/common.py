"""Shared service helpers: store access, date parsing and the pricing/overlap rules."""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from agrirent.models.store import Store
from agrirent.utils.constants import DATE_FMT


def _store() -> Store:
    """Get the singleton store instance (tests monkeypatch this)."""
    return Store.instance()


# -------- date & math helpers --------
def parse_date(x) -> date:
    """
    Coerce a date-like value to a naive date. Accepts date/datetime objects
    or 'YYYY-MM-DD' strings; a trailing 'T...' time part is ignored.
    Raises ValueError on bad input.
    """
    if isinstance(x, datetime):
        return x.date()
    if isinstance(x, date):
        return x
    if isinstance(x, str):
        base = x.split("T", 1)[0].strip()
        return datetime.strptime(base, DATE_FMT).date()
    raise ValueError(f"Unsupported date: {x!r}")


def is_valid_range(start, end) -> bool:
    """True iff both values parse to calendar dates and end >= start. Never raises."""
    try:
        d1 = parse_date(start)
        d2 = parse_date(end)
    except (TypeError, ValueError):
        return False
    return d2 >= d1


def rental_days(start: date, end: date) -> int:
    """Inclusive day count: a same-day booking is one day."""
    return max(1, (end - start).days + 1)


def total_price(daily_rate, start, end) -> Decimal:
    """
    Price of renting at `daily_rate` over the inclusive range [start, end].
    Full precision is kept; rounding happens at display time (fmt_price).
    Returns 0 when the dates do not parse.
    """
    try:
        d1 = parse_date(start)
        d2 = parse_date(end)
    except (TypeError, ValueError):
        return Decimal("0")
    rate = to_decimal_safe(daily_rate) or Decimal("0")
    return max(Decimal("0"), rate * rental_days(d1, d2))


def overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """
    Check overlap between closed ranges [a_start, a_end] and [b_start, b_end].
    Both ends are rented days, so ranges sharing a single day overlap.
    Overlap rule: a_start <= b_end and a_end >= b_start
    """
    return a_start <= b_end and a_end >= b_start


def to_decimal_safe(value) -> Optional[Decimal]:
    """Safely convert to Decimal; return None if invalid."""
    if value is None or isinstance(value, bool):
        return None
    try:
        d = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not d.is_finite():
        return None
    return d


def _lc(s):
    """Safe lowercase for case-insensitive compare."""
    return (s or "").lower()
