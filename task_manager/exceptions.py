"""Domain errors and their HTTP status codes."""

from fastapi import status


class TaskManagerError(Exception):
    """Base class for errors that map to a client-facing response."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(TaskManagerError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Missing required fields"


class DuplicateEmail(TaskManagerError):
    """A user with this email already exists."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Email already in use"


class InvalidCredentials(TaskManagerError):
    """Login email/password pair did not match."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class Unauthenticated(TaskManagerError):
    """No bearer token was supplied."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Access denied. No token provided."


class InvalidToken(TaskManagerError):
    """Token is malformed, expired, or points at a user that no longer exists."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid token"


class NotFound(TaskManagerError):
    """Resource absent or not owned by the caller."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Task not found"


class TokenError(Exception):
    """Token verification failure."""


class TokenMalformed(TokenError):
    """Token could not be parsed or its signature does not match."""


class TokenExpired(TokenError):
    """Token signature is valid but its expiry has passed."""
