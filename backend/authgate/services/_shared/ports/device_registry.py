from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol


@dataclass(frozen=True)
class DeviceView:
    """
    Read-model for a registered device.

    :ivar device_id: Registry key.
    :ivar user_id: Owning user.
    :ivar credentials_id: Credentials used at login (``None`` if removed).
    :ivar name: Client supplied device name.
    :ivar signature: Opaque client fingerprint.
    :ivar access_token: Last issued access token.
    :ivar refresh_token: Last issued refresh token.
    :ivar created_at: Registration instant (UTC).
    :ivar updated_at: Last token update (UTC).
    """

    device_id: int
    user_id: int
    credentials_id: int | None
    name: str
    signature: str
    access_token: str | None
    refresh_token: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DeviceRegistry(Protocol):
    """
    Durable mapping from device identity to its last issued token pair.

    A user has at most one device per name. Deleting a device, directly or by
    replacing it, revokes every token minted for it.
    """

    def create_or_replace(
        self,
        *,
        name: str,
        signature: str,
        user_id: int,
        credentials_id: int | None,
    ) -> DeviceView:
        """
        Register a device, deleting any record with the same ``(name, user_id)``.

        The delete and the insert are one atomic step.
        """

    def find_by_id(self, device_id: int) -> DeviceView | None:
        """Return the device, or ``None`` when it was never created or was deleted."""

    def update_tokens(
        self,
        device_id: int,
        *,
        access_token: str | None = None,
        refresh_token: str | None = None,
    ) -> None:
        """Store the non-``None`` tokens. A missing device is left missing."""

    def delete(self, device_id: int) -> bool:
        """Remove a device. :returns: True if it existed."""

    def list_for_user(self, user_id: int) -> list[DeviceView]:
        """List a user's devices ordered by id."""


class InMemoryDeviceRegistry(DeviceRegistry):
    """
    Process-local registry for unit tests.

    .. note::
       Uses a threading lock to make create-or-replace atomic.
    """

    def __init__(self) -> None:
        self._by_id: dict[int, DeviceView] = {}
        self._seq = 0
        self._lock = threading.Lock()
        self.lookups = 0

    @staticmethod
    def _now() -> datetime:
        return datetime.now(UTC)

    def create_or_replace(
        self,
        *,
        name: str,
        signature: str,
        user_id: int,
        credentials_id: int | None,
    ) -> DeviceView:
        key = (name or "").strip() or "unnamed"
        with self._lock:
            stale = [
                d.device_id
                for d in self._by_id.values()
                if d.user_id == user_id and d.name == key
            ]
            for device_id in stale:
                del self._by_id[device_id]
            self._seq += 1
            now = self._now()
            view = DeviceView(
                device_id=self._seq,
                user_id=user_id,
                credentials_id=credentials_id,
                name=key,
                signature=(signature or "").strip(),
                access_token=None,
                refresh_token=None,
                created_at=now,
                updated_at=now,
            )
            self._by_id[view.device_id] = view
            return view

    def find_by_id(self, device_id: int) -> DeviceView | None:
        self.lookups += 1
        return self._by_id.get(device_id)

    def update_tokens(
        self,
        device_id: int,
        *,
        access_token: str | None = None,
        refresh_token: str | None = None,
    ) -> None:
        with self._lock:
            current = self._by_id.get(device_id)
            if current is None:
                return
            self._by_id[device_id] = replace(
                current,
                access_token=access_token if access_token is not None else current.access_token,
                refresh_token=(
                    refresh_token if refresh_token is not None else current.refresh_token
                ),
                updated_at=self._now(),
            )

    def delete(self, device_id: int) -> bool:
        with self._lock:
            return self._by_id.pop(device_id, None) is not None

    def list_for_user(self, user_id: int) -> list[DeviceView]:
        return sorted(
            (d for d in self._by_id.values() if d.user_id == user_id),
            key=lambda d: d.device_id,
        )
