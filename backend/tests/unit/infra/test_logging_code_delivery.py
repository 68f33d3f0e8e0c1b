"""Tests for the log-only security code delivery adapter."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from authgate.infra import providers
from authgate.infra.mail.logging_code_delivery import LoggingCodeDelivery
from authgate.services._shared.ports import CodePurpose, InMemoryCodeDelivery, SecurityCodeTicket


def _ticket() -> SecurityCodeTicket:
    return SecurityCodeTicket(
        purpose=CodePurpose.PASSWORD_RESET,
        credentials_id=7,
        email="ada@example.com",
        name="Ada",
        code="s3cr3t-c0de",
        expires_at=datetime(2030, 1, 8, tzinfo=UTC),
    )


def test_issuance_is_logged_without_the_code(caplog):
    caplog.set_level(logging.INFO, logger="authgate.infra.mail.logging_code_delivery")
    LoggingCodeDelivery().deliver(_ticket())

    (record,) = [r for r in caplog.records if r.getMessage() == "security_code.issued"]
    assert record.reason == "password_reset"
    assert record.credentials_id == 7
    assert "s3cr3t-c0de" not in caplog.text
    assert "s3cr3t-c0de" not in repr(record.__dict__)


def test_provider_prefers_installed_adapter(app):
    assert isinstance(providers.code_delivery(), LoggingCodeDelivery)
    installed = InMemoryCodeDelivery()
    app.extensions["code_delivery"] = installed
    try:
        assert providers.code_delivery() is installed
    finally:
        app.extensions.pop("code_delivery", None)
