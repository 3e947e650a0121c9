from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from agrirent.models.tool import _now_iso
from agrirent.utils.constants import ACTIVE_BOOKING_STATES, BookingStatus
from agrirent.utils.filters import fmt_price


@dataclass
class Booking:
    """
    A reservation of one tool for an inclusive [start_date, end_date] range.
    Dates and total_price are fixed at creation; only status moves.
    """
    booking_id: str
    tool_id: str
    renter_id: str
    start_date: date
    end_date: date
    total_price: Decimal
    status: str = BookingStatus.PENDING
    created_at: str = field(default_factory=_now_iso)

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_BOOKING_STATES

    def to_dict(self) -> dict:
        return {
            "id": self.booking_id,
            "tool_id": self.tool_id,
            "renter_id": self.renter_id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "total_price": self.total_price,
            "total_price_display": fmt_price(self.total_price),
            "status": self.status,
            "created_at": self.created_at,
        }
