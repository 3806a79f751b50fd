"""Custom exception types for domain and API layers."""
from fastapi import status


class AppError(Exception):
    """Base app exception. Rendered as ``{"success": false, "message": ...}``."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Missing or malformed input."""

    default_message = "Invalid request"


class Conflict(AppError):
    """Resource already exists."""

    default_message = "Already exists"


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class Forbidden(AppError):
    """Authenticated caller lacks the admin role."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Unauthorized"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


# Login failures are answered with 200 so clients only branch on ``success``.
class InvalidCredentials(AppError):
    status_code = status.HTTP_200_OK
    default_message = "Invalid login"


class NotApproved(AppError):
    status_code = status.HTTP_200_OK
    default_message = "Account not approved yet"
