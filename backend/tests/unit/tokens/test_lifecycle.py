from datetime import UTC, datetime, timedelta

import pytest
from authgate.services.tokens.lifecycle import has_expired, should_renew
from freezegun import freeze_time

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


class TestHasExpired:
    def test_past_expiry_has_expired(self):
        assert has_expired(NOW - timedelta(seconds=1), now=NOW) is True

    def test_future_expiry_has_not_expired(self):
        assert has_expired(NOW + timedelta(seconds=1), now=NOW) is False

    def test_expiry_equal_to_now_is_not_yet_expired(self):
        assert has_expired(NOW, now=NOW) is False

    def test_defaults_to_current_clock(self):
        with freeze_time(NOW):
            assert has_expired(NOW - timedelta(minutes=1)) is True
            assert has_expired(NOW + timedelta(minutes=1)) is False


class TestShouldRenew:
    def test_expired_token_is_never_renewed(self):
        assert should_renew(NOW - timedelta(days=1), 5, now=NOW) is False

    def test_outside_window_is_not_renewed(self):
        assert should_renew(NOW + timedelta(days=10), 5, now=NOW) is False

    def test_inside_window_is_renewed(self):
        assert should_renew(NOW + timedelta(days=4), 5, now=NOW) is True

    def test_exactly_at_window_edge_is_not_renewed(self):
        assert should_renew(NOW + timedelta(days=5), 5, now=NOW) is False

    @pytest.mark.parametrize("elapsed_days", [26, 29])
    def test_thirty_day_token_enters_window_after_twenty_five_days(self, elapsed_days):
        expires_at = NOW + timedelta(days=30)
        later = NOW + timedelta(days=elapsed_days)
        assert should_renew(expires_at, 5, now=later) is True

    def test_zero_window_never_renews(self):
        assert should_renew(NOW + timedelta(seconds=1), 0, now=NOW) is False
