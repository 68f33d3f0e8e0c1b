"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

# Public selector env var
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

# Load .env when present (no-op otherwise)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``.

    Raises
    ------
    ValueError
        If the variable is set but is not an integer.
    """
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val.strip())


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret used for session signing.
    JWT_SECRET_KEY: str | None
        Signing secret for access and refresh tokens, read from
        ``SIGNING_SECRET``. Production refuses to start without it.
    ACCESS_TOKEN_TTL / REFRESH_TOKEN_TTL: str
        Token lifetimes as duration strings (``"1d"``, ``"30d"``, ``"16m"``)
        or bare seconds.
    REFRESH_TOKEN_NONCE_LENGTH: int
        Number of random bytes embedded (hex encoded) in every refresh token.
    RENEWAL_WINDOW_DAYS: int
        A refresh token expiring within this many days is rotated.
    ACCESS_RENEWAL_POLICY: str
        ``"always"`` re-mints the access token on every successful check;
        ``"on_demand"`` only when it is unusable or the refresh token rotated.
    DEVICE_REGISTRY_BACKEND: str
        ``"sql"`` (default) or ``"redis"`` (requires ``REDIS_URL``).
    ACCOUNT_ACTIVATION_REQUIRED: bool
        New local accounts start inactive until their activation code is used.
    SECURITY_CODE_TTL / SECURITY_CODE_DAILY_LIMIT
        Lifetime of activation and reset codes, and how many one account may
        request per 24 hours.
    *_HEADER: str
        HTTP header names used to exchange tokens and device identity.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"

    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY: str | None = os.getenv("SIGNING_SECRET", "CHANGE_ME_SIGNING_SECRET")
    JWT_ALGORITHM = "HS256"

    # Token lifecycle
    ACCESS_TOKEN_TTL = os.getenv("ACCESS_TOKEN_TTL", "1d")
    REFRESH_TOKEN_TTL = os.getenv("REFRESH_TOKEN_TTL", "30d")
    REFRESH_TOKEN_NONCE_LENGTH = env_int("REFRESH_TOKEN_NONCE_LENGTH", 64)
    RENEWAL_WINDOW_DAYS = env_int("RENEWAL_WINDOW_DAYS", 5)
    ACCESS_RENEWAL_POLICY = os.getenv("ACCESS_RENEWAL_POLICY", "always")

    # Header names
    ACCESS_TOKEN_HEADER = os.getenv("ACCESS_TOKEN_HEADER", "access-token")
    REFRESH_TOKEN_HEADER = os.getenv("REFRESH_TOKEN_HEADER", "refresh-token")
    REFRESH_EXPIRED_HEADER = os.getenv("REFRESH_EXPIRED_HEADER", "refresh-token-expired")
    DEVICE_NAME_HEADER = os.getenv("DEVICE_NAME_HEADER", "device-name")
    DEVICE_SIGNATURE_HEADER = os.getenv("DEVICE_SIGNATURE_HEADER", "device-signature")

    # Activation and password reset codes
    ACCOUNT_ACTIVATION_REQUIRED = env_bool("ACCOUNT_ACTIVATION_REQUIRED", False)
    SECURITY_CODE_TTL = os.getenv("SECURITY_CODE_TTL", "7d")
    SECURITY_CODE_DAILY_LIMIT = env_int("SECURITY_CODE_DAILY_LIMIT", 3)

    # Device registry storage
    DEVICE_REGISTRY_BACKEND = os.getenv("DEVICE_REGISTRY_BACKEND", "sql")
    REDIS_URL = os.getenv("REDIS_URL")

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Rate limiting (Flask-Limiter)
    RATELIMIT_ENABLED = env_bool("RATELIMIT_ENABLED", True)
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    AUTH_LOGIN_RATE_LIMIT = os.getenv("AUTH_LOGIN_RATE_LIMIT", "5 per minute")

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables rate limiting.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Pins a signing secret so tokens are reproducible across the run.
    """

    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = "testing-signing-secret"
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = True
    RATELIMIT_ENABLED = False
    REDIS_URL = None
    DEVICE_REGISTRY_BACKEND = "sql"


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    The signing secret has no default here: :func:`authgate.factory.create_app`
    aborts when ``SIGNING_SECRET`` is missing.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False
    JWT_SECRET_KEY = os.getenv("SIGNING_SECRET")


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
