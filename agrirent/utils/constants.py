# agrirent/utils/constants.py

"""
Global constants for booking statuses and date handling.
These constants are imported by both models and services.
"""

# Date format (used for booking start/end)
DATE_FMT = "%Y-%m-%d"


class BookingStatus:
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    ALL = (PENDING, CONFIRMED, COMPLETED, CANCELLED)


# Bookings in these states hold their date range
ACTIVE_BOOKING_STATES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})

# Forward-only lifecycle; completed and cancelled are terminal
ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}

# Statuses that count towards owner earnings
EARNING_STATES = frozenset({BookingStatus.CONFIRMED, BookingStatus.COMPLETED})
