class BookingError(Exception):
    """Base for errors that map onto an HTTP response."""

    status_code = 500

    def __init__(self, message: str, errors: list[dict] | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class ValidationError(BookingError):
    status_code = 400

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(f"Validation error: {message} at \"{field}\"", [{"field": field, "message": message}])


class NotFoundError(BookingError):
    status_code = 404


class ConflictError(BookingError):
    status_code = 409


class AuthorizationError(BookingError):
    status_code = 403


class AuthenticationRequired(AuthorizationError):
    status_code = 401


class NotificationError(Exception):
    """Delivery of a confirmation failed. Logged, never shown to the booker."""
