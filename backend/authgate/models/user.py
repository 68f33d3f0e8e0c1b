"""User identity model."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, String, true
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from authgate.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .credentials import Credentials
    from .device import Device


class User(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    A person able to sign in through one or more credentials.

    Fields
    ------
    name : str
        Display name copied into access tokens.
    activated : bool
        Inactive accounts cannot sign in and their devices stop renewing.
    credentials : list[Credentials]
        Local and social sign-in methods (deleted with the user).
    devices : list[Device]
        Registered client installations (deleted with the user).
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    activated: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )

    credentials: Mapped[list[Credentials]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
    )
    devices: Mapped[list[Device]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @validates("name")
    def _normalize_name(self, key: str, value: str) -> str:
        """
        Trim the display name.

        :raises ValueError: If the name is missing or only whitespace.
        """
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Name is required.")
        return value.strip()
