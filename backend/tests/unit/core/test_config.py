"""Configuration selection and application factory guards."""

from __future__ import annotations

import pytest
from authgate.core.config import (
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    env_bool,
    env_int,
    get_config,
)
from authgate.factory import create_app


@pytest.mark.parametrize(
    ("value", "expected"),
    [("testing", TestingConfig), ("production", ProductionConfig), ("nope", DevelopmentConfig)],
)
def test_get_config_follows_app_env(monkeypatch, value, expected):
    monkeypatch.setenv("APP_ENV", value)
    assert get_config() is expected


def test_env_helpers(monkeypatch):
    monkeypatch.setenv("SOME_FLAG", "Yes")
    monkeypatch.setenv("SOME_INT", " 12 ")
    assert env_bool("SOME_FLAG") is True
    assert env_bool("MISSING_FLAG", True) is True
    assert env_int("SOME_INT", 3) == 12
    assert env_int("MISSING_INT", 3) == 3


def test_testing_defaults_match_token_lifecycle():
    assert TestingConfig.ACCESS_TOKEN_TTL == "1d"
    assert TestingConfig.REFRESH_TOKEN_TTL == "30d"
    assert TestingConfig.RENEWAL_WINDOW_DAYS == 5
    assert TestingConfig.REFRESH_TOKEN_NONCE_LENGTH == 64
    assert TestingConfig.ACCESS_TOKEN_HEADER == "access-token"
    assert TestingConfig.REFRESH_EXPIRED_HEADER == "refresh-token-expired"


def test_factory_refuses_to_start_without_signing_secret():
    class NoSecret(ProductionConfig):
        JWT_SECRET_KEY = None
        SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"

    with pytest.raises(RuntimeError, match="SIGNING_SECRET"):
        create_app(NoSecret)
