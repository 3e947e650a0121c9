"""Booking-related service layer: create, conflict check, status changes, listings."""

from typing import Optional

from loguru import logger

from agrirent.exceptions import (
    BookingNotFoundError,
    ForbiddenError,
    InvalidRangeError,
    ValidationError,
)
from agrirent.models.booking import Booking
from agrirent.models.store import Store
from agrirent.services import common
from agrirent.services.common import is_valid_range, overlap, parse_date, total_price
from agrirent.utils.constants import ACTIVE_BOOKING_STATES, ALLOWED_TRANSITIONS, BookingStatus


class BookingService:
    """
    Create bookings without overlaps, move them through their lifecycle,
    and list them for renters and tool owners.
    Every operation takes the acting user explicitly.
    """

    @staticmethod
    def _get_store(store: Optional[Store] = None) -> Store:
        return store if store is not None else common._store()

    @staticmethod
    def has_conflict(tool_id: str, start, end, store: Optional[Store] = None) -> bool:
        """
        True if any pending/confirmed booking of the tool overlaps [start, end].
        Cancelled and completed bookings never block.
        """
        if not is_valid_range(start, end):
            raise InvalidRangeError()
        st = BookingService._get_store(store)
        d1 = parse_date(start)
        d2 = parse_date(end)
        return any(
            overlap(d1, d2, b.start_date, b.end_date)
            for b in st.list_bookings(tool_id, ACTIVE_BOOKING_STATES)
        )

    @staticmethod
    def create_booking(tool_id: str, renter_id: str, start, end, store: Optional[Store] = None) -> Booking:
        """
        Book a tool for the inclusive range [start, end] in `pending` status.

        Raises InvalidRangeError, ToolNotFoundError, ToolUnavailableError or
        ConflictingDatesError. The conflict check and the insert run as one
        step inside the store lock, so two racing requests cannot both win.
        """
        st = BookingService._get_store(store)

        # --- parse & validate range ---
        if not is_valid_range(start, end):
            raise InvalidRangeError("Invalid dates: use YYYY-MM-DD with end on or after start")
        d1 = parse_date(start)
        d2 = parse_date(end)

        # --- availability + conflict check + pricing + insert (atomic) ---
        booking = st.insert_booking_if_free(
            tool_id,
            renter_id,
            d1,
            d2,
            price_fn=lambda t: total_price(t.daily_rate, d1, d2),
        )
        logger.info(
            "Booking {} created: tool={} renter={} {}..{} total={}",
            booking.booking_id, booking.tool_id, renter_id, d1, d2, booking.total_price,
        )
        return booking

    @staticmethod
    def _authorize(booking: Booking, actor_id: str, st: Store):
        """Only the renter or the owner of the booked tool may see or change a booking."""
        tool = st.get_tool(booking.tool_id)
        owner_id = tool.owner_id if tool else None
        if actor_id not in (booking.renter_id, owner_id):
            raise ForbiddenError()

    @staticmethod
    def get_booking(booking_id: str, actor_id: str, store: Optional[Store] = None) -> Booking:
        st = BookingService._get_store(store)
        booking = st.get_booking(booking_id)
        if booking is None:
            raise BookingNotFoundError()
        BookingService._authorize(booking, actor_id, st)
        return booking

    @staticmethod
    def update_status(booking_id: str, actor_id: str, new_status: str, store: Optional[Store] = None) -> Booking:
        """
        Move a booking to `new_status`.
        - Only the renter or the tool owner may do this
        - Transitions are forward-only:
            pending -> confirmed | cancelled
            confirmed -> completed | cancelled
          completed and cancelled are terminal
        """
        if new_status not in BookingStatus.ALL:
            raise ValidationError(f"Unknown status '{new_status}'")

        st = BookingService._get_store(store)
        # Renter and tool owner never change, so authorizing on this read is safe
        booking = BookingService.get_booking(booking_id, actor_id, store=st)

        # Status is re-read and checked inside the store lock
        previous, updated = st.transition_booking_status(booking.booking_id, new_status, ALLOWED_TRANSITIONS)
        logger.info(
            "Booking {} status {} -> {} by {}",
            booking.booking_id, previous, new_status, actor_id,
        )
        return updated

    @staticmethod
    def bookings_for_user(user_id: str, status: Optional[str] = None, store: Optional[Store] = None) -> list[dict]:
        """
        Bookings where the user is the renter or owns the tool, newest first,
        each with a short summary of the tool attached.
        """
        if status is not None and status not in BookingStatus.ALL:
            raise ValidationError(f"Unknown status '{status}'")

        st = BookingService._get_store(store)
        out = []
        for b in st.list_bookings():
            tool = st.get_tool(b.tool_id)
            if tool is None:
                continue
            if user_id not in (b.renter_id, tool.owner_id):
                continue
            if status is not None and b.status != status:
                continue
            item = b.to_dict()
            item["tool"] = tool.summary()
            out.append(item)
        out.sort(key=lambda x: x.get("created_at") or "", reverse=True)
        return out
