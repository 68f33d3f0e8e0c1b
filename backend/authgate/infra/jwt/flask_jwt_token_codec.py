# authgate/infra/jwt/flask_jwt_token_codec.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, cast

from flask_jwt_extended import create_access_token, create_refresh_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from authgate.services._shared.errors import InvalidTokenError
from authgate.services._shared.ports import DecodedToken, TokenCodec, TokenType
from authgate.services.tokens.duration import parse_duration

# Claim holding the issuer payload
DATA_CLAIM = "data"


@dataclass(slots=True)
class FlaskJWTTokenCodec(TokenCodec):
    """
    Adapter for Flask-JWT-Extended (HS256 via PyJWT).

    The payload travels in the ``data`` claim and the user id in ``sub``;
    Flask-JWT-Extended adds ``type``, ``jti``, ``iat``, ``nbf`` and ``exp``.

    .. note::
       Requires an active Flask app context with ``JWT_SECRET_KEY`` set.
    """

    def mint(
        self,
        payload: dict[str, Any],
        ttl: str | int | timedelta,
        *,
        token_type: TokenType = "access",
    ) -> str:
        expires = parse_duration(ttl)
        create = create_refresh_token if token_type == "refresh" else create_access_token
        return cast(
            str,
            create(
                identity=str(payload.get("user_id", "")),
                additional_claims={DATA_CLAIM: dict(payload)},
                expires_delta=expires,
            ),
        )

    def decode(self, token: str) -> DecodedToken:
        # Signature, structure and claim problems all collapse into one error
        if not isinstance(token, str) or not token:
            raise InvalidTokenError()
        try:
            claims = cast(dict[str, Any], decode_token(token, allow_expired=True))
        except (JWTExtendedException, PyJWTError) as exc:
            raise InvalidTokenError() from exc

        data = claims.get(DATA_CLAIM)
        exp = claims.get("exp")
        if not isinstance(data, dict) or not isinstance(exp, int | float):
            raise InvalidTokenError()
        return DecodedToken(
            payload=data,
            expires_at=datetime.fromtimestamp(exp, tz=UTC),
            token_type=str(claims.get("type", "access")),
        )
