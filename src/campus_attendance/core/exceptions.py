from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400

    def __init__(self, message: str, *, redirect_to: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.redirect_to = redirect_to


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class EmailNotVerifiedError(AuthorizationError):
    """Raised when an unverified account tries to log in."""


class NotFoundError(DomainError):
    status_code = 404


class ConflictError(DomainError):
    """Raised when a unique field is already taken."""

    status_code = 409
