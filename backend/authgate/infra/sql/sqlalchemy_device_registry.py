# authgate/infra/sql/sqlalchemy_device_registry.py
from __future__ import annotations

import logging
from collections.abc import Callable

from authgate.models.device import Device
from authgate.services._shared.ports import DeviceRegistry, DeviceView
from authgate.uow.sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

log = logging.getLogger(__name__)


def to_view(device: Device) -> DeviceView:
    """Snapshot an ORM row so callers never hold a session-bound object."""
    return DeviceView(
        device_id=device.id,
        user_id=device.user_id,
        credentials_id=device.credentials_id,
        name=device.name,
        signature=device.signature,
        access_token=device.access_token,
        refresh_token=device.refresh_token,
        created_at=device.created_at,
        updated_at=device.updated_at,
    )


class SQLAlchemyDeviceRegistry(DeviceRegistry):
    """
    Device registry stored in the ``devices`` table.

    Every call runs in its own Unit of Work, so each write is committed
    before the method returns.

    :param uow_factory: Builds the read-write Unit of Work (overridable in tests).
    """

    def __init__(
        self,
        uow_factory: Callable[[], SQLAlchemyUnitOfWork] = SQLAlchemyUnitOfWork,
        ro_uow_factory: Callable[[], SQLAlchemyReadOnlyUnitOfWork] = SQLAlchemyReadOnlyUnitOfWork,
    ) -> None:
        self._uow = uow_factory
        self._ro_uow = ro_uow_factory

    def create_or_replace(
        self,
        *,
        name: str,
        signature: str,
        user_id: int,
        credentials_id: int | None,
    ) -> DeviceView:
        with self._uow() as uow:
            existing = uow.devices.get_by_name(user_id, name)
            if existing is not None:
                # Flushed before the insert so the (user_id, name) constraint holds
                log.info(
                    "devices.replaced",
                    extra={"device_id": existing.id, "user_id": user_id},
                )
                uow.devices.delete(existing)
            device = uow.devices.add(
                Device(
                    user_id=user_id,
                    credentials_id=credentials_id,
                    name=name,
                    signature=signature,
                )
            )
            view = to_view(device)
        return view

    def find_by_id(self, device_id: int) -> DeviceView | None:
        with self._ro_uow() as uow:
            device = uow.devices.get(device_id)
            return to_view(device) if device is not None else None

    def update_tokens(
        self,
        device_id: int,
        *,
        access_token: str | None = None,
        refresh_token: str | None = None,
    ) -> None:
        with self._uow() as uow:
            device = uow.devices.get(device_id)
            if device is None:
                return
            uow.devices.update_tokens(
                device, access_token=access_token, refresh_token=refresh_token
            )

    def delete(self, device_id: int) -> bool:
        with self._uow() as uow:
            device = uow.devices.get(device_id)
            if device is None:
                return False
            uow.devices.delete(device)
            return True

    def list_for_user(self, user_id: int) -> list[DeviceView]:
        with self._ro_uow() as uow:
            return [to_view(d) for d in uow.devices.list_for_user(user_id)]
