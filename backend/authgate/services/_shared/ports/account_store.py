from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class AccountView:
    """
    Identity facts copied into access tokens.

    :ivar user_id: User identifier.
    :ivar display_name: Name shown to the user.
    :ivar email: Email of the credentials bound to the device, if any.
    :ivar activated: Inactive accounts cannot renew.
    """

    user_id: int
    display_name: str
    email: str | None
    activated: bool = True


class AccountStore(Protocol):
    """Read-only port onto user/credential persistence."""

    def find_account(self, user_id: int, credentials_id: int | None = None) -> AccountView | None:
        """
        Return the account, using ``credentials_id`` to pick the email.

        Falls back to the user's primary credentials when ``credentials_id``
        is ``None`` or no longer exists. ``None`` when the user is gone.
        """


class InMemoryAccountStore(AccountStore):
    """Dictionary-backed account store for unit tests."""

    def __init__(self, accounts: dict[int, AccountView] | None = None) -> None:
        self._accounts = dict(accounts or {})

    def put(self, account: AccountView) -> None:
        self._accounts[account.user_id] = account

    def remove(self, user_id: int) -> None:
        self._accounts.pop(user_id, None)

    def find_account(self, user_id: int, credentials_id: int | None = None) -> AccountView | None:
        return self._accounts.get(user_id)
