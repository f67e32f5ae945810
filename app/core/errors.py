"""Error taxonomy for event and booking writes.

Every failure surfaced to a caller is one of these kinds. Each carries a
stable ``code`` and a user-safe ``message``; the HTTP layer maps codes to
status codes in ``app.main``.
"""
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Error codes exposed to API clients."""

    REQUIRED_FIELD = "REQUIRED_FIELD"
    INVALID_DATE = "INVALID_DATE"
    INVALID_TIME = "INVALID_TIME"
    INVALID_EMAIL = "INVALID_EMAIL"
    NOT_UNIQUE = "NOT_UNIQUE"
    DANGLING_REFERENCE = "DANGLING_REFERENCE"
    DEPENDENCY_UNAVAILABLE = "DEPENDENCY_UNAVAILABLE"
    CONNECTION_FAILED = "CONNECTION_FAILED"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"


class EventHubError(Exception):
    """Base error with code and user-safe message."""

    code: ErrorCode

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(EventHubError):
    """Raised before persistence when a candidate record is rejected."""


class RequiredFieldError(ValidationError):
    code = ErrorCode.REQUIRED_FIELD

    def __init__(self, field: str, message: str = "") -> None:
        super().__init__(message or f"{field} is required")
        self.field = field


class InvalidDateError(ValidationError):
    code = ErrorCode.INVALID_DATE

    def __init__(self, value: Any) -> None:
        super().__init__("Invalid date format for Event.date")
        self.value = value


class InvalidTimeError(ValidationError):
    code = ErrorCode.INVALID_TIME

    def __init__(self, value: Any) -> None:
        super().__init__("Invalid time format for Event.time")
        self.value = value


class InvalidEmailError(ValidationError):
    code = ErrorCode.INVALID_EMAIL

    def __init__(self, value: Any) -> None:
        super().__init__("Email must be a valid email address")
        self.value = value


class DanglingReferenceError(ValidationError):
    code = ErrorCode.DANGLING_REFERENCE

    def __init__(self, event_id: Any) -> None:
        super().__init__("Referenced event does not exist")
        self.event_id = event_id


class UniquenessError(EventHubError):
    """Raised when a write collides with a unique index (Event.slug)."""

    code = ErrorCode.NOT_UNIQUE

    def __init__(self, field: str, value: Any) -> None:
        super().__init__(f"An event with this {field} already exists")
        self.field = field
        self.value = value


class DependencyUnavailableError(EventHubError):
    """Raised when the storage collaborator cannot be reached."""

    code = ErrorCode.DEPENDENCY_UNAVAILABLE

    def __init__(self, operation: str) -> None:
        super().__init__(f"Storage unavailable during {operation}")
        self.operation = operation


class DatabaseConnectionError(EventHubError, ConnectionError):
    """Raised when a database connection cannot be established."""

    code = ErrorCode.CONNECTION_FAILED

    def __init__(self, message: str = "Could not connect to the database") -> None:
        super().__init__(message)


class EventNotFoundError(EventHubError):
    code = ErrorCode.EVENT_NOT_FOUND

    def __init__(self, slug: str) -> None:
        super().__init__("Event not found")
        self.slug = slug


class BookingNotFoundError(EventHubError):
    code = ErrorCode.BOOKING_NOT_FOUND

    def __init__(self, booking_id: Any) -> None:
        super().__init__("Booking not found")
        self.booking_id = booking_id
