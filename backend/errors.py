"""
Error taxonomy shared by every service.

Each error carries the HTTP status it maps to and the message that is safe to
show to the caller. The gateway turns them into {"error": ...} responses.
"""

from typing import Optional


class AppError(Exception):
    status_code = 500
    public_message: Optional[str] = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_public(self) -> str:
        return self.public_message or self.message


class ValidationError(AppError):
    """Malformed or missing input."""
    status_code = 400


class AuthError(AppError):
    """Missing, malformed, expired or tampered credential."""
    status_code = 401


class ForbiddenError(AppError):
    """Authenticated, but the role does not allow the operation."""
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    """A unique key already exists (e.g. re-registration)."""
    status_code = 409


class InternalError(AppError):
    """
    Store or filesystem failure.

    The message keeps the internal detail for the logs; callers only ever see
    the generic public message.
    """
    status_code = 500
    public_message = "internal server error"
