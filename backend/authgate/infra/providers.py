"""Build service objects from the active Flask configuration.

Adapters are selected from ``current_app.config`` so handlers and CLI
commands can share one wiring path. All helpers require an application
context.
"""

from __future__ import annotations

from flask import current_app

from authgate.core.extensions import get_redis
from authgate.infra.jwt.flask_jwt_token_codec import FlaskJWTTokenCodec
from authgate.infra.mail.logging_code_delivery import LoggingCodeDelivery
from authgate.infra.redis.redis_device_registry import RedisDeviceRegistry
from authgate.infra.sql.sqlalchemy_account_store import SQLAlchemyAccountStore
from authgate.infra.sql.sqlalchemy_device_registry import SQLAlchemyDeviceRegistry
from authgate.services._shared.base import ServiceContext
from authgate.services._shared.ports import AccountStore, CodeDelivery, DeviceRegistry, TokenCodec
from authgate.services.auth.security_code import SecurityCodePolicy
from authgate.services.auth.service import AuthService
from authgate.services.renewal.service import TokenRenewalService
from authgate.services.tokens.issuer import TokenIssuer
from authgate.services.tokens.settings import TokenSettings

REGISTRY_BACKENDS = ("sql", "redis")


def token_settings() -> TokenSettings:
    return TokenSettings.from_mapping(current_app.config)


def token_codec() -> TokenCodec:
    return FlaskJWTTokenCodec()


def device_registry() -> DeviceRegistry:
    """Return the registry named by ``DEVICE_REGISTRY_BACKEND``.

    Raises
    ------
    RuntimeError
        If the backend name is unknown, or ``redis`` is requested without a
        configured Redis client.
    """
    backend = str(current_app.config.get("DEVICE_REGISTRY_BACKEND", "sql")).strip().lower()
    if backend == "redis":
        return RedisDeviceRegistry(get_redis())
    if backend == "sql":
        return SQLAlchemyDeviceRegistry()
    raise RuntimeError(
        f"Unknown DEVICE_REGISTRY_BACKEND {backend!r}; expected one of {REGISTRY_BACKENDS}"
    )


def account_store() -> AccountStore:
    return SQLAlchemyAccountStore()


def token_issuer(codec: TokenCodec | None = None) -> TokenIssuer:
    return TokenIssuer(codec or token_codec(), token_settings())


def renewal_service(ctx: ServiceContext | None = None) -> TokenRenewalService:
    codec = token_codec()
    settings = token_settings()
    return TokenRenewalService(
        codec=codec,
        registry=device_registry(),
        accounts=account_store(),
        settings=settings,
        issuer=TokenIssuer(codec, settings),
        ctx=ctx,
    )


def security_code_policy() -> SecurityCodePolicy:
    return SecurityCodePolicy.from_mapping(current_app.config)


def code_delivery() -> CodeDelivery:
    """Return the adapter installed as ``app.extensions["code_delivery"]``, else log only."""
    return current_app.extensions.get("code_delivery") or LoggingCodeDelivery()


def auth_service(ctx: ServiceContext | None = None) -> AuthService:
    return AuthService(
        issuer=token_issuer(),
        registry=device_registry(),
        codes=security_code_policy(),
        delivery=code_delivery(),
        ctx=ctx,
    )


__all__ = [
    "account_store",
    "auth_service",
    "code_delivery",
    "device_registry",
    "renewal_service",
    "security_code_policy",
    "token_codec",
    "token_issuer",
    "token_settings",
]
