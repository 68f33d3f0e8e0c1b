# authgate/infra/sql/sqlalchemy_account_store.py
from __future__ import annotations

from collections.abc import Callable

from authgate.services._shared.ports import AccountStore, AccountView
from authgate.uow.sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork


class SQLAlchemyAccountStore(AccountStore):
    """Account lookups over the ``users`` and ``user_credentials`` tables."""

    def __init__(
        self,
        uow_factory: Callable[[], SQLAlchemyReadOnlyUnitOfWork] = SQLAlchemyReadOnlyUnitOfWork,
    ) -> None:
        self._uow = uow_factory

    def find_account(self, user_id: int, credentials_id: int | None = None) -> AccountView | None:
        with self._uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                return None
            creds = uow.credentials.get(credentials_id) if credentials_id is not None else None
            if creds is None or creds.user_id != user.id:
                creds = uow.credentials.primary_for_user(user.id)
            return AccountView(
                user_id=user.id,
                display_name=user.name,
                email=creds.email if creds is not None else None,
                activated=bool(user.activated),
            )
