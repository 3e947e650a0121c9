"""
Custom exception classes for the AgriRent tool rental service.

Services raise these; the app factory turns them into JSON error
responses carrying the matching HTTP status instead of generic 500 errors.
"""


class RentalError(Exception):
    """Base class for every error the service reports to a client."""

    status_code = 400
    default_message = "Error: request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:  # pragma: no cover
        return self.message


class ValidationError(RentalError):
    """Raised when a request body or query parameter is malformed."""

    default_message = "Error: invalid request"


class InvalidRangeError(RentalError):
    """Raised when a date cannot be parsed or end date is before start date."""

    default_message = "Error: invalid date range"


class ToolUnavailableError(RentalError):
    """Raised when the owner has marked a tool as unavailable."""

    default_message = "Tool not available"


class InvalidTransitionError(RentalError):
    """Raised when a booking status change is not allowed from its current status."""

    default_message = "Error: status change not allowed"


class UnauthorizedError(RentalError):
    status_code = 401
    default_message = "Unauthorized"


class ForbiddenError(RentalError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(RentalError):
    status_code = 404
    default_message = "Error: not found"


class ToolNotFoundError(NotFoundError):
    """Raised when a tool ID cannot be found in the store."""

    default_message = "Error: tool not found"


class BookingNotFoundError(NotFoundError):
    """Raised when a booking ID cannot be found in the store."""

    default_message = "Error: booking not found"


class UserNotFoundError(NotFoundError):
    default_message = "Error: user not found"


class ConflictingDatesError(RentalError):
    """Raised when the requested dates overlap an active booking of the same tool."""

    status_code = 409
    default_message = "Dates conflict with an existing booking"


class StoreError(RentalError):
    """Raised when the store cannot persist its data."""

    status_code = 500
    default_message = "Error: storage failure"
