"""Registered client device holding the last issued token pair."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from authgate.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .user import User

DEFAULT_DEVICE_NAME = "unnamed"


class Device(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    One client installation bound to a user.

    A user has at most one device per ``name``; logging in again from a
    same-named device replaces the row, which revokes every token minted for
    the previous one. Deleting the row revokes its tokens as well.

    Fields
    ------
    user_id : int
        Owning user.
    credentials_id : int | None
        Credentials used at login, nulled if they are removed.
    name : str
        Client supplied device name (``DEFAULT_DEVICE_NAME`` when blank).
    signature : str
        Opaque client fingerprint.
    access_token / refresh_token : str | None
        Last issued tokens.
    """

    __tablename__ = "devices"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    credentials_id: Mapped[int | None] = mapped_column(
        ForeignKey("user_credentials.id", ondelete="SET NULL"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    signature: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    access_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    refresh_token: Mapped[str | None] = mapped_column(Text, nullable=True)

    user: Mapped[User] = relationship(back_populates="devices")

    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_devices_user_id_name"),
        Index("ix_devices_user_id", "user_id"),
        # Ids of deleted devices must never be handed out again
        {"sqlite_autoincrement": True},
    )

    @validates("name")
    def _normalize_name(self, key: str, value: str | None) -> str:
        v = (value or "").strip()
        return v or DEFAULT_DEVICE_NAME

    @validates("signature")
    def _normalize_signature(self, key: str, value: str | None) -> str:
        return (value or "").strip()
