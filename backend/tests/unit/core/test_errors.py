"""Problem+JSON rendering of API and service errors."""

from __future__ import annotations

from authgate.core.errors import SessionExpired
from authgate.services._shared.base import BaseService
from authgate.services._shared.errors import (
    AuthenticationError,
    ConflictError,
    EntropyUnavailableError,
    InactiveAccountError,
    InvalidTokenError,
    NotFoundError,
    ValidationFailedError,
)


def test_translate_exceptions_maps_status_codes():
    translate = BaseService().translate_exceptions
    assert translate(NotFoundError("User", 1)).status_code == 404
    assert translate(ConflictError("Credentials", "taken")).status_code == 409
    assert translate(InactiveAccountError()).status_code == 403
    assert translate(AuthenticationError()).status_code == 401
    assert translate(InvalidTokenError()).status_code == 401
    assert translate(EntropyUnavailableError()).status_code == 503
    assert translate(ValidationFailedError("bad")).status_code == 422


def test_inactive_account_keeps_its_own_code():
    assert BaseService().translate_exceptions(InactiveAccountError()).code == "inactive_account"


def test_session_expired_sets_relogin_header_only_when_forced():
    forced = SessionExpired("gone", code="refresh_expired", relogin_header="refresh-token-expired")
    soft = SessionExpired(
        "bad", code="invalid_token", relogin_header="refresh-token-expired", force_relogin=False
    )
    assert forced.status_code == 401
    assert forced.headers == {"refresh-token-expired": "true"}
    assert not soft.headers
