"""Application error types.

Every error raised by a service carries the HTTP status it maps to; the
exception handlers in ``studyhub.main`` turn it into the failure envelope.
"""
from typing import Any, Optional


class AppError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        errors: Any = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.errors = errors


class BadRequestError(AppError):
    """A required field is missing or malformed."""

    status_code = 400


class AuthError(AppError):
    """Missing, invalid or expired bearer token."""

    status_code = 401


class NotFoundError(AppError):
    """Entity absent, or not owned by the caller."""

    status_code = 404


class ProviderError(AppError):
    """
    The external text-generation call failed.

    Absorbed by the assistant service into a fallback reply; never
    rendered as an HTTP error.
    """

    status_code = 502
