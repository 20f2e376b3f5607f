from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    status_code = 400


class AuthenticationError(DomainError):
    """Raised when a password or credentials are invalid."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when the caller may not act on a resource."""

    status_code = 403


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""

    status_code = 404


class DuplicateError(DomainError):
    """Raised when a unique record already exists.

    `existing` is the JSON-ready payload of the stored record, when the
    caller should be shown what it collided with.
    """

    status_code = 409

    def __init__(self, message: str, existing: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.existing = existing
