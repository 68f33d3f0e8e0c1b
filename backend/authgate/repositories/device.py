"""Device repository."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from authgate.models.device import DEFAULT_DEVICE_NAME, Device
from authgate.repositories.base import BaseRepository


class DeviceRepository(BaseRepository[Device]):
    """Persistence-only repository for :class:`Device`."""

    model = Device

    def _updatable_fields(self) -> set[str]:
        return {"access_token", "refresh_token", "signature"}

    def get_by_name(self, user_id: int, name: str | None) -> Device | None:
        """Fetch the device a user registered under ``name``.

        Blank names resolve to :data:`DEFAULT_DEVICE_NAME`, mirroring the
        model validator.
        """
        key = (name or "").strip() or DEFAULT_DEVICE_NAME
        stmt = select(Device).where(Device.user_id == user_id, Device.name == key)
        return cast(Device | None, self.session.execute(stmt).scalars().first())

    def list_for_user(self, user_id: int) -> list[Device]:
        stmt = select(Device).where(Device.user_id == user_id).order_by(Device.id)
        return list(self.session.execute(stmt).scalars())

    def update_tokens(
        self,
        device: Device,
        *,
        access_token: str | None = None,
        refresh_token: str | None = None,
    ) -> Device:
        """Store the non-``None`` tokens on ``device`` and flush.

        :param device: Persistent device row.
        :param access_token: New access token, left untouched when ``None``.
        :param refresh_token: New refresh token, left untouched when ``None``.
        :returns: The updated device.
        """
        updates: dict[str, str] = {}
        if access_token is not None:
            updates["access_token"] = access_token
        if refresh_token is not None:
            updates["refresh_token"] = refresh_token
        if not updates:
            return device
        return self.assign_updates(device, updates)
