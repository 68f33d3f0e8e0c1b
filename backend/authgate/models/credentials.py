"""Sign-in credentials attached to a user."""

from __future__ import annotations

import enum
import hashlib
import hmac
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates
from werkzeug.security import check_password_hash, generate_password_hash

from authgate.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .user import User

# Codes issued per credentials are counted over this window
SECURITY_CODE_WINDOW = timedelta(hours=24)


def _digest(code: str) -> str:
    return hashlib.sha256(code.strip().encode("utf-8")).hexdigest()


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


class AuthProvider(str, enum.Enum):
    """Origin of a credentials row."""

    LOCAL = "local"
    GOOGLE = "google"
    FACEBOOK = "facebook"


class Credentials(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    One way for a user to prove identity.

    Local credentials carry a password hash; social credentials only record
    the email the provider vouched for.

    Fields
    ------
    user_id : int
        Owning user.
    email : str
        Stored normalized (lowercase, trimmed). Unique per provider.
    password_hash : str | None
        Werkzeug hash, ``None`` for social providers.
    provider : AuthProvider
        ``local``, ``google`` or ``facebook``.
    security_code_hash : str | None
        SHA-256 of the pending activation or password reset code.
    security_code_expires_at : datetime | None
        Instant after which the pending code is refused.
    security_code_window_start, security_code_requests
        Codes issued within the current 24 hour window.
    """

    __tablename__ = "user_credentials"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    password_hash: Mapped[str | None] = mapped_column(String(254), nullable=True)
    provider: Mapped[AuthProvider] = mapped_column(
        Enum(AuthProvider, name="auth_provider", native_enum=False, length=16),
        nullable=False,
        default=AuthProvider.LOCAL,
    )
    security_code_hash: Mapped[str | None] = mapped_column(String(64), nullable=True)
    security_code_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    security_code_window_start: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    security_code_requests: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )

    user: Mapped[User] = relationship(back_populates="credentials")

    __table_args__ = (
        UniqueConstraint("email", "provider", name="uq_user_credentials_email_provider"),
        Index("ix_user_credentials_email", "email"),
        Index("ix_user_credentials_user_id", "user_id"),
    )

    @property
    def is_local(self) -> bool:
        return self.provider == AuthProvider.LOCAL

    # -------------------- Password API --------------------
    @property
    def password(self) -> Any:  # pragma: no cover - explicit write-only contract
        """
        Disallow reading passwords.

        :raises AttributeError: Always, to ensure password is write-only.
        """
        raise AttributeError("Password is write-only.")

    @password.setter
    def password(self, raw: str) -> None:
        """
        Hash and set the password.

        :param raw: Plain text password to hash.
        :type raw: str
        """
        if not isinstance(raw, str) or not raw:
            raise ValueError("Password must be a non-empty string.")
        self.password_hash = generate_password_hash(raw)

    def verify_password(self, raw: str) -> bool:
        """
        Verify a password against the stored hash.

        Social credentials have no hash and never verify.

        :param raw: Plain text password candidate.
        :returns: ``True`` if it matches; otherwise ``False``.
        """
        if not self.password_hash:
            return False
        return bool(check_password_hash(self.password_hash, raw))

    # -------------------- Security code API --------------------
    def set_security_code(self, code: str, *, now: datetime, ttl: timedelta) -> None:
        """
        Store the digest of a freshly generated code and count the issuance.

        A window older than 24 hours restarts the count.
        """
        started = self.security_code_window_start
        if started is None or now - _as_utc(started) >= SECURITY_CODE_WINDOW:
            self.security_code_window_start = now
            self.security_code_requests = 0
        self.security_code_hash = _digest(code)
        self.security_code_expires_at = now + ttl
        self.security_code_requests = (self.security_code_requests or 0) + 1

    def security_code_quota_reached(self, *, now: datetime, limit: int) -> bool:
        """``True`` while ``limit`` codes were already issued in the current window."""
        started = self.security_code_window_start
        if started is None or now - _as_utc(started) >= SECURITY_CODE_WINDOW:
            return False
        return (self.security_code_requests or 0) >= limit

    def security_code_matches(self, code: str, *, now: datetime) -> bool:
        """Check ``code`` against the pending one; expired or missing codes never match."""
        if not code or not self.security_code_hash or self.security_code_expires_at is None:
            return False
        if now > _as_utc(self.security_code_expires_at):
            return False
        return hmac.compare_digest(self.security_code_hash, _digest(code))

    def clear_security_code(self) -> None:
        self.security_code_hash = None
        self.security_code_expires_at = None
        self.security_code_window_start = None
        self.security_code_requests = 0

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :returns: Normalized email (lowercased/trimmed).
        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        # Minimal sanity check; full validation happens at API layer.
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v
