"""Immutable snapshot of the token lifecycle configuration."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from authgate.services.tokens.duration import parse_duration


class AccessRenewalPolicy(str, enum.Enum):
    """When a presented access token is replaced during renewal."""

    ALWAYS = "always"
    ON_DEMAND = "on_demand"


@dataclass(frozen=True, slots=True)
class TokenSettings:
    """
    Token lifecycle parameters.

    :param access_ttl: Lifetime of access tokens.
    :type access_ttl: timedelta
    :param refresh_ttl: Lifetime of refresh tokens.
    :type refresh_ttl: timedelta
    :param renewal_window_days: Refresh tokens expiring within this many days are rotated.
    :type renewal_window_days: int
    :param nonce_bytes: Random bytes embedded in every refresh token.
    :type nonce_bytes: int
    :param access_policy: Access re-mint policy.
    :type access_policy: AccessRenewalPolicy
    """

    access_ttl: timedelta = timedelta(days=1)
    refresh_ttl: timedelta = timedelta(days=30)
    renewal_window_days: int = 5
    nonce_bytes: int = 64
    access_policy: AccessRenewalPolicy = AccessRenewalPolicy.ALWAYS

    def __post_init__(self) -> None:
        if self.renewal_window_days < 0:
            raise ValueError("renewal_window_days must not be negative")
        if self.nonce_bytes < 1:
            raise ValueError("nonce_bytes must be positive")

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> TokenSettings:
        """Build settings from a Flask config (or any mapping of the same keys)."""
        return cls(
            access_ttl=parse_duration(config.get("ACCESS_TOKEN_TTL", "1d")),
            refresh_ttl=parse_duration(config.get("REFRESH_TOKEN_TTL", "30d")),
            renewal_window_days=int(config.get("RENEWAL_WINDOW_DAYS", 5)),
            nonce_bytes=int(config.get("REFRESH_TOKEN_NONCE_LENGTH", 64)),
            access_policy=AccessRenewalPolicy(
                str(config.get("ACCESS_RENEWAL_POLICY", "always")).strip().lower()
            ),
        )
