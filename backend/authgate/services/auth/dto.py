# authgate/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass

from authgate.models.credentials import AuthProvider

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for local registration.

    :param name: Display name.
    :type name: str
    :param email: Email used to sign in.
    :type email: str
    :param password: Raw password (at least 8 characters, no spaces).
    :type password: str
    """

    name: str
    email: str
    password: str


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for password login.

    :param email: User email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class SocialProfileIn:
    """
    Profile already verified by a social provider.

    :param provider: ``google`` or ``facebook``.
    :type provider: AuthProvider
    :param email: Email the provider vouched for.
    :type email: str
    :param name: Display name reported by the provider.
    :type name: str
    """

    provider: AuthProvider
    email: str
    name: str


@dataclass(frozen=True, slots=True)
class SecurityCodeIn:
    """
    An activation or password reset code together with its account reference.

    :param credentials_id: Credentials the code was issued for.
    :type credentials_id: int
    :param code: Code as received by the user.
    :type code: str
    """

    credentials_id: int
    code: str


@dataclass(frozen=True, slots=True)
class PasswordResetIn:
    """Input DTO for completing a password reset."""

    credentials_id: int
    code: str
    password: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    First token pair of a freshly registered device.

    :param access_token: Encoded access token.
    :param refresh_token: Encoded refresh token.
    :param device_id: Registry id of the device.
    """

    access_token: str
    refresh_token: str
    device_id: int


@dataclass(frozen=True, slots=True)
class UserOut:
    """Public view of a user."""

    id: int
    name: str
    email: str | None
    activated: bool
