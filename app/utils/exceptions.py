"""
Application error kinds

Services raise these; app.main turns every AppError into a JSON body of the
form {"detail": message} with the error's status code.
"""
from contextlib import contextmanager
from typing import Optional

from fastapi import status


class AppError(Exception):
    """Base exception for application"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ==================== VALIDATION ====================

class ValidationFailed(AppError):
    """Malformed or out-of-range input, rejected before any side effect"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


# ==================== CONFLICT ====================

class ConflictError(AppError):
    """Uniqueness violation; ``field`` names the colliding column when known"""
    status_code = status.HTTP_409_CONFLICT
    default_message = "A user with these details already exists."

    FIELD_MESSAGES = {
        "email": "Email address already exists. Please use a different email.",
        "username": "Username already exists. Please choose a different username.",
    }

    def __init__(self, message: Optional[str] = None, field: Optional[str] = None):
        self.field = field
        super().__init__(message or self.FIELD_MESSAGES.get(field))


class DuplicateEntryError(ConflictError):
    default_message = "Movie is already in watchlist"


# ==================== NOT FOUND ====================

class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class MovieNotFoundError(NotFoundError):
    default_message = "Movie not found"


class UserNotFoundError(NotFoundError):
    default_message = "User not found"


# ==================== UNAUTHORIZED ====================

class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class AuthenticationRequiredError(UnauthorizedError):
    default_message = "Access token required"


class InvalidAuthFormatError(UnauthorizedError):
    default_message = "Invalid authorization format. Use Bearer <token>"


class InvalidCredentialsError(UnauthorizedError):
    default_message = "Invalid credentials"


class InvalidTokenError(UnauthorizedError):
    default_message = "Invalid token"


class TokenExpiredError(UnauthorizedError):
    default_message = "Token expired"


# ==================== UPSTREAM (TMDB) ====================

class UpstreamError(AppError):
    """
    Generic failure of the external movie database.

    ``upstream_status`` keeps the status code TMDB answered with (None for
    network errors and timeouts).
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Movie service error"

    def __init__(self, message: Optional[str] = None, upstream_status: Optional[int] = None):
        self.upstream_status = upstream_status
        super().__init__(message)


class UpstreamAuthError(UpstreamError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Movie service temporarily unavailable"


class UpstreamRateLimitError(UpstreamError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Rate limit exceeded. Please try again later."


class UpstreamNotFoundError(UpstreamError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


@contextmanager
def reword_upstream_errors(message: str):
    """
    Replace the text of generic upstream failures with a route-specific message.

    Rate-limit, auth and not-found failures keep their own status and message.
    """
    try:
        yield
    except (UpstreamAuthError, UpstreamRateLimitError, UpstreamNotFoundError):
        raise
    except UpstreamError as exc:
        raise UpstreamError(message, upstream_status=exc.upstream_status) from exc
