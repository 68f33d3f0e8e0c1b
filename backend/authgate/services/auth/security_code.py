"""Single-use codes for account activation and password reset."""

from __future__ import annotations

import secrets
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from authgate.services._shared.errors import EntropyUnavailableError
from authgate.services.tokens.duration import parse_duration

# 9 random bytes render as 12 URL-safe characters
SECURITY_CODE_BYTES = 9

CodeSource = Callable[[int], str]


def generate_security_code(source: CodeSource = secrets.token_urlsafe) -> str:
    """
    Return a new random code.

    :raises EntropyUnavailableError: If the random source fails.
    """
    try:
        return source(SECURITY_CODE_BYTES)
    except (OSError, NotImplementedError) as exc:
        raise EntropyUnavailableError() from exc


@dataclass(frozen=True, slots=True)
class SecurityCodePolicy:
    """
    How security codes are issued.

    :param ttl: Lifetime of an issued code.
    :param daily_limit: Codes one account may request per 24 hours.
    :param require_activation: New local accounts start inactive and receive
        an activation code.
    """

    ttl: timedelta = timedelta(days=7)
    daily_limit: int = 3
    require_activation: bool = False

    def __post_init__(self) -> None:
        if self.daily_limit < 1:
            raise ValueError("daily_limit must be positive")

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> SecurityCodePolicy:
        return cls(
            ttl=parse_duration(config.get("SECURITY_CODE_TTL", "7d")),
            daily_limit=int(config.get("SECURITY_CODE_DAILY_LIMIT", 3)),
            require_activation=bool(config.get("ACCOUNT_ACTIVATION_REQUIRED", False)),
        )
