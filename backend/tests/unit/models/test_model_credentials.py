"""Tests for the security code slot on Credentials."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from authgate.models.credentials import AuthProvider, Credentials
from tests.factories.credentials import CredentialsFactory

T0 = datetime(2030, 1, 1, 12, 0, tzinfo=UTC)
WEEK = timedelta(days=7)


def _creds() -> Credentials:
    return Credentials(email="a@example.com", provider=AuthProvider.LOCAL)


class TestSecurityCode:
    def test_only_the_digest_is_stored(self):
        c = _creds()
        c.set_security_code("abc123", now=T0, ttl=WEEK)
        assert c.security_code_hash != "abc123"
        assert len(c.security_code_hash) == 64
        assert c.security_code_expires_at == T0 + WEEK

    def test_matches_until_expiry(self):
        c = _creds()
        c.set_security_code("abc123", now=T0, ttl=WEEK)
        assert c.security_code_matches("abc123", now=T0 + WEEK) is True
        assert c.security_code_matches(" abc123 ", now=T0) is True
        assert c.security_code_matches("abc124", now=T0) is False
        assert c.security_code_matches("abc123", now=T0 + WEEK + timedelta(seconds=1)) is False

    def test_naive_stored_expiry_is_read_as_utc(self):
        c = _creds()
        c.set_security_code("abc123", now=T0, ttl=WEEK)
        c.security_code_expires_at = (T0 + WEEK).replace(tzinfo=None)
        assert c.security_code_matches("abc123", now=T0) is True

    def test_empty_or_missing_code_never_matches(self):
        c = _creds()
        assert c.security_code_matches("anything", now=T0) is False
        c.set_security_code("abc123", now=T0, ttl=WEEK)
        assert c.security_code_matches("", now=T0) is False

    def test_newer_code_replaces_older(self):
        c = _creds()
        c.set_security_code("first", now=T0, ttl=WEEK)
        c.set_security_code("second", now=T0, ttl=WEEK)
        assert c.security_code_matches("first", now=T0) is False
        assert c.security_code_matches("second", now=T0) is True

    def test_quota_counts_within_a_day(self):
        c = _creds()
        for i in range(3):
            assert c.security_code_quota_reached(now=T0, limit=3) is False
            c.set_security_code(f"code{i}", now=T0 + timedelta(hours=i), ttl=WEEK)
        assert c.security_code_quota_reached(now=T0 + timedelta(hours=23), limit=3) is True
        assert c.security_code_quota_reached(now=T0 + timedelta(hours=24), limit=3) is False

    def test_window_restarts_after_a_day(self):
        c = _creds()
        c.set_security_code("a", now=T0, ttl=WEEK)
        c.set_security_code("b", now=T0 + timedelta(days=1), ttl=WEEK)
        assert c.security_code_requests == 1
        assert c.security_code_window_start == T0 + timedelta(days=1)

    def test_clear(self, session):
        c = CredentialsFactory()
        c.set_security_code("abc123", now=T0, ttl=WEEK)
        session.flush()
        c.clear_security_code()
        session.flush()
        assert c.security_code_hash is None
        assert c.security_code_expires_at is None
        assert c.security_code_requests == 0
        assert c.security_code_matches("abc123", now=T0) is False
