# authgate/services/renewal/dto.py
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any


class RenewalError(enum.Enum):
    """Why a presented token pair was rejected."""

    INVALID_TOKEN = "invalid_token"
    REFRESH_EXPIRED = "refresh_expired"
    DEVICE_NOT_REGISTERED = "device_not_registered"
    ENTROPY_UNAVAILABLE = "entropy_unavailable"

    @property
    def forces_relogin(self) -> bool:
        """Whether the client must drop its tokens and sign in again."""
        return self in (RenewalError.REFRESH_EXPIRED, RenewalError.DEVICE_NOT_REGISTERED)


class DecisionKind(enum.Enum):
    REJECT = "reject"
    PASS_THROUGH = "pass_through"
    ROTATE = "rotate"


# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPair:
    """
    Tokens presented by (or returned to) a client.

    :param access_token: Encoded access token, if any.
    :type access_token: str | None
    :param refresh_token: Encoded refresh token, if any.
    :type refresh_token: str | None
    """

    access_token: str | None = None
    refresh_token: str | None = None

    @classmethod
    def from_headers(cls, access: str | None, refresh: str | None) -> TokenPair:
        """Build a pair treating blank header values as absent."""
        return cls(
            access_token=(access or "").strip() or None,
            refresh_token=(refresh or "").strip() or None,
        )

    @property
    def is_empty(self) -> bool:
        return self.access_token is None and self.refresh_token is None


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RenewalDecision:
    """
    Outcome of evaluating a presented token pair.

    :param kind: Reject, pass through unchanged, or rotate.
    :param pair: Tokens the client should hold afterwards (unset on reject).
    :param error: Rejection reason (only on reject).
    :param claims: Payload of the access token that is current after the
        decision, for downstream handlers; empty on reject.
    :param device_id: Device the pair is bound to, when known.
    """

    kind: DecisionKind
    pair: TokenPair = field(default_factory=TokenPair)
    error: RenewalError | None = None
    claims: dict[str, Any] = field(default_factory=dict)
    device_id: int | None = None

    @classmethod
    def reject(cls, error: RenewalError, *, device_id: int | None = None) -> RenewalDecision:
        return cls(kind=DecisionKind.REJECT, error=error, device_id=device_id)

    @classmethod
    def pass_through(
        cls, pair: TokenPair, *, claims: dict[str, Any], device_id: int | None
    ) -> RenewalDecision:
        return cls(kind=DecisionKind.PASS_THROUGH, pair=pair, claims=claims, device_id=device_id)

    @classmethod
    def rotate(
        cls, pair: TokenPair, *, claims: dict[str, Any], device_id: int | None
    ) -> RenewalDecision:
        return cls(kind=DecisionKind.ROTATE, pair=pair, claims=claims, device_id=device_id)

    @property
    def accepted(self) -> bool:
        return self.kind is not DecisionKind.REJECT

    @property
    def rotated(self) -> bool:
        return self.kind is DecisionKind.ROTATE

    @property
    def force_relogin(self) -> bool:
        return self.error is not None and self.error.forces_relogin
