from __future__ import annotations

import base64
import json
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Literal, Protocol

from authgate.services._shared.errors import InvalidTokenError
from authgate.services.tokens.duration import parse_duration

TokenType = Literal["access", "refresh"]


@dataclass(frozen=True, slots=True)
class DecodedToken:
    """
    Verified content of a signed token.

    :ivar payload: Issuer-chosen claims, unchanged since signing.
    :ivar expires_at: Absolute expiry (UTC). Expired tokens still decode.
    :ivar token_type: ``"access"`` or ``"refresh"``.
    """

    payload: dict[str, Any]
    expires_at: datetime
    token_type: str


class TokenCodec(Protocol):
    """Port for minting and verifying signed, time-boxed tokens."""

    def mint(
        self,
        payload: dict[str, Any],
        ttl: str | int | timedelta,
        *,
        token_type: TokenType = "access",
    ) -> str:
        """Sign ``payload`` with an expiry ``ttl`` from now.

        :raises InvalidTTLError: If ``ttl`` is malformed, zero or negative.
        """

    def decode(self, token: str) -> DecodedToken:
        """Verify the signature and return the content, even when expired.

        :raises InvalidTokenError: On any structural or signature failure.
        """


class StubTokenCodec(TokenCodec):
    """
    Unsigned, deterministic codec used in unit tests.

    Tokens are base64-encoded JSON; a token is "tampered" as soon as a
    character changes, which makes it undecodable just like a real signature
    mismatch.
    """

    def __init__(self) -> None:
        self.minted: list[dict[str, Any]] = []

    def mint(
        self,
        payload: dict[str, Any],
        ttl: str | int | timedelta,
        *,
        token_type: TokenType = "access",
    ) -> str:
        exp = datetime.now(UTC) + parse_duration(ttl)
        body = {
            "data": dict(payload),
            "exp": exp.timestamp(),
            "type": token_type,
            "seq": len(self.minted),
        }
        self.minted.append(body)
        raw = json.dumps(body, sort_keys=True).encode()
        return base64.urlsafe_b64encode(raw).decode()

    def decode(self, token: str) -> DecodedToken:
        try:
            body = json.loads(base64.urlsafe_b64decode(token.encode()))
            return DecodedToken(
                payload=dict(body["data"]),
                expires_at=datetime.fromtimestamp(float(body["exp"]), tz=UTC),
                token_type=str(body["type"]),
            )
        except (ValueError, TypeError, KeyError) as exc:
            raise InvalidTokenError() from exc
