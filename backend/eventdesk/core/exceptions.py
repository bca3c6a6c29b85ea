"""
Domain error taxonomy.

Services raise these instead of HTTPException so the same rules hold when
they are called outside a request (seeding, tests, scripts). The API layer
maps each class to its status code and the standard response envelope.
"""

from typing import Optional

from fastapi import status


class AppError(Exception):
    """Base class for errors that are safe to show to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Request failed"

    def __init__(self, message: Optional[str] = None, errors: Optional[dict[str, str]] = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed or missing input; the client must fix it and resend."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class AuthError(AppError):
    """Bad credentials or an invalid, expired or revoked token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You are not authorized to access this resource"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ConflictError(AppError):
    """Duplicate record, or a dependent record blocks the operation."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Request conflicts with the current state"


class CapacityExceededError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Event has reached its registration capacity"


class PastEventError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Registration is closed for past events"
