"""CORS configuration helper for API resources."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

_TOKEN_HEADER_KEYS = (
    "ACCESS_TOKEN_HEADER",
    "REFRESH_TOKEN_HEADER",
    "REFRESH_EXPIRED_HEADER",
)
_DEVICE_HEADER_KEYS = ("DEVICE_NAME_HEADER", "DEVICE_SIGNATURE_HEADER")


def _configured_headers(app: Flask, keys: tuple[str, ...]) -> list[str]:
    return [str(app.config[key]) for key in keys if app.config.get(key)]


def init_app(app: Flask) -> None:
    """Configure CORS so browser clients can exchange tokens through headers.

    Token headers are both accepted on requests and exposed on responses;
    device identity headers are only accepted. When ``CORS_ORIGINS`` is blank
    or ``"*"`` any origin is allowed but credential support is disabled.
    """
    raw_origins = app.config.get("CORS_ORIGINS", "")
    origins = [o.strip() for o in raw_origins.split(",") if o.strip()]
    wildcard = len(origins) == 0 or origins == ["*"]

    token_headers = _configured_headers(app, _TOKEN_HEADER_KEYS)
    device_headers = _configured_headers(app, _DEVICE_HEADER_KEYS)

    CORS(
        app,
        resources={r"/api/*": {"origins": "*" if wildcard else origins}},
        supports_credentials=not wildcard,
        allow_headers=["Content-Type", "X-Request-ID", *token_headers, *device_headers],
        expose_headers=["X-Request-ID", *token_headers],
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
