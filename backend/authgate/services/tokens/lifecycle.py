"""Time predicates over a token's absolute expiry."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta


def _now(now: datetime | None) -> datetime:
    return now if now is not None else datetime.now(UTC)


def has_expired(expires_at: datetime, *, now: datetime | None = None) -> bool:
    """Return ``True`` once ``now`` is strictly past ``expires_at``."""
    return _now(now) > expires_at


def should_renew(
    expires_at: datetime,
    window_days: int | float,
    *,
    now: datetime | None = None,
) -> bool:
    """
    Return ``True`` when a still-valid token expires within the renewal window.

    Expired tokens never qualify; they must be replaced by signing in again.

    :param expires_at: Absolute expiry of the token (timezone aware).
    :param window_days: Width of the window before expiry, in days.
    :param now: Reference instant, the current UTC time by default.
    """
    current = _now(now)
    if current > expires_at:
        return False
    return current + timedelta(days=window_days) > expires_at
