"""Domain errors surfaced to API callers."""


class BookingError(Exception):
    """Base error for failures reported back to the caller."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(BookingError):
    """Raised when a referenced entity does not exist."""

    status_code = 404


class UnauthorizedError(BookingError):
    """Raised when the caller could not be authenticated."""

    status_code = 401


class ForbiddenError(BookingError):
    """Raised when the caller lacks permission for a record."""

    status_code = 403


class InvalidArgumentError(BookingError):
    """Raised for malformed input such as an out-of-range score."""

    status_code = 400


class InvalidStateError(BookingError):
    """Raised when an operation is not valid for the record's current state."""

    status_code = 400


class ConflictError(BookingError):
    """Raised when a booking overlaps an existing one."""

    status_code = 400
