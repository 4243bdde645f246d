# eventhub/core/exceptions.py
"""
Domain errors raised by the service layer.

Each error knows the HTTP status and the machine-readable code the API
envelope reports. The handlers in eventhub.main turn them into
{"success": false, "message": ..., "code": ...} responses.
"""
from typing import Any, Optional


class BookingPlatformError(Exception):
    status_code = 400
    code = "error"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationFailed(BookingPlatformError):
    code = "validation_failed"


class NotFound(BookingPlatformError):
    status_code = 404
    code = "not_found"


class Conflict(BookingPlatformError):
    code = "conflict"


class InvalidServices(Conflict):
    """Some requested services are missing, inactive or owned by someone else."""
    code = "invalid_services"

    def __init__(self, requested: int, matched: int):
        super().__init__(
            "One or more services not found or not available",
            details={"requested": requested, "matched": matched},
        )
        self.requested = requested
        self.matched = matched


class Locked(BookingPlatformError):
    code = "locked"


class Unavailable(BookingPlatformError):
    code = "unavailable"


class InvalidTransition(BookingPlatformError):
    code = "invalid_transition"

    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot change booking status from {current} to {requested}")
        self.current = current
        self.requested = requested


class ServerError(BookingPlatformError):
    status_code = 500
    code = "server_error"
