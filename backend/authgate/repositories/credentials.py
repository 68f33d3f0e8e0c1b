"""Credentials repository for lookups used during sign-in."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from authgate.models.credentials import AuthProvider, Credentials
from authgate.repositories.base import BaseRepository


def _normalize(email: str) -> str:
    return email.strip().lower()


class CredentialsRepository(BaseRepository[Credentials]):
    """Persistence-only repository for :class:`Credentials`.

    It never issues tokens; it only finds and stores sign-in methods.
    """

    model = Credentials

    def get_by_email(
        self, email: str, provider: AuthProvider | None = None
    ) -> Credentials | None:
        """Fetch credentials by email, optionally restricted to one provider.

        Without ``provider`` local credentials are preferred so a password
        login still reports "social account" when only those exist.

        :param email: Email address to normalise and search.
        :param provider: Restrict the lookup to a single provider.
        :returns: Matching credentials or ``None``.
        """
        stmt = select(Credentials).where(Credentials.email == _normalize(email))
        if provider is not None:
            stmt = stmt.where(Credentials.provider == provider)
        rows = list(self.session.execute(stmt.order_by(Credentials.id)).scalars())
        if not rows:
            return None
        local = [row for row in rows if row.provider == AuthProvider.LOCAL]
        return cast(Credentials, (local or rows)[0])

    def exists_by_email(self, email: str) -> bool:
        """Return ``True`` when any credentials use ``email``."""
        stmt = select(Credentials.id).where(Credentials.email == _normalize(email))
        return bool(self.session.execute(stmt).first())

    def primary_for_user(self, user_id: int) -> Credentials | None:
        """Return the oldest credentials of a user (local first)."""
        stmt = (
            select(Credentials)
            .where(Credentials.user_id == user_id)
            .order_by(Credentials.id)
        )
        rows = list(self.session.execute(stmt).scalars())
        local = [row for row in rows if row.provider == AuthProvider.LOCAL]
        return (local or rows or [None])[0]
