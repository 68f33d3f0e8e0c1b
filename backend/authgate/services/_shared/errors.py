"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never depend on Flask or
HTTP. They are the stable contract between repositories, token primitives
and application services.

The translation to HTTP responses (RFC 7807) is handled by
``authgate/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    :param exc: The exception raised by SQLAlchemy during flush/commit.
    :param constraint_name: Constraint to match (e.g. ``uq_devices_user_id_name``).
    :returns: ``True`` if the driver message mentions the constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from repositories or domain logic.
    """


# --------------------------------------------------------------------------- #
# Entity errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "Credentials").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


class ValidationFailedError(ServiceError):
    """Raised when input passes schema checks but violates a business rule."""


# --------------------------------------------------------------------------- #
# Authentication errors
# --------------------------------------------------------------------------- #


class AuthenticationError(ServiceError):
    """Raised when credentials cannot be verified."""

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class InactiveAccountError(AuthenticationError):
    """Raised when the credentials are valid but the account is not activated."""

    def __init__(self, message: str = "Account is not activated") -> None:
        super().__init__(message)


class InvalidSecurityCodeError(ServiceError):
    """Raised when an activation or password reset code is wrong, used or expired."""

    def __init__(self, message: str = "Security code is invalid or has expired") -> None:
        super().__init__(message)


class TooManyRequestsError(ServiceError):
    """Raised when a per-account quota (e.g. security codes per day) is exhausted."""


# --------------------------------------------------------------------------- #
# Token errors
# --------------------------------------------------------------------------- #


class TokenError(ServiceError):
    """Base class for signed token failures."""


class InvalidTokenError(TokenError):
    """
    Raised when a token cannot be decoded.

    Signature mismatch and structural corruption are deliberately folded into
    this single type; the message never tells them apart.
    """

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)


class InvalidTTLError(TokenError, ValueError):
    """Raised when a token lifetime is malformed, zero or negative."""


class EntropyUnavailableError(TokenError):
    """Raised when the operating system random source cannot be read."""

    def __init__(self, message: str = "Secure random source unavailable") -> None:
        super().__init__(message)
