# comments in English; reST docstrings
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

import redis

from authgate.models.device import DEFAULT_DEVICE_NAME
from authgate.services._shared.ports import DeviceRegistry, DeviceView


def _s(value: bytes | str | None) -> str:
    if value is None:
        return ""
    return value.decode() if isinstance(value, bytes | bytearray) else str(value)


def _opt(value: bytes | str | None) -> str | None:
    text = _s(value)
    return text or None


@dataclass(slots=True)
class RedisDeviceRegistry(DeviceRegistry):
    """
    Redis-backed device registry.

    Layout
    ------
    * ``dev:seq``: id counter (ids are never reused).
    * ``dev:{id}``: hash with the device fields.
    * ``dev:u:{user_id}``: set of the user's device ids.
    * ``dev:n:{user_id}``: hash mapping device name to device id.

    Replacement and token updates use WATCH/MULTI/EXEC with retry.

    :param r: A Redis client (already connected).
    """

    r: redis.Redis

    SEQ_KEY = "dev:seq"

    # -------------------- helpers --------------------

    @staticmethod
    def _k(device_id: int | str) -> str:
        return f"dev:{device_id}"

    @staticmethod
    def _ku(user_id: int | str) -> str:
        return f"dev:u:{user_id}"

    @staticmethod
    def _kn(user_id: int | str) -> str:
        return f"dev:n:{user_id}"

    @staticmethod
    def _now_ts() -> int:
        return int(datetime.now(UTC).timestamp())

    def _to_view(self, device_id: int, h: dict[bytes, bytes]) -> DeviceView:
        credentials_id = _opt(h.get(b"credentials_id"))
        return DeviceView(
            device_id=device_id,
            user_id=int(_s(h.get(b"user_id"))),
            credentials_id=int(credentials_id) if credentials_id else None,
            name=_s(h.get(b"name")),
            signature=_s(h.get(b"signature")),
            access_token=_opt(h.get(b"access_token")),
            refresh_token=_opt(h.get(b"refresh_token")),
            created_at=datetime.fromtimestamp(int(_s(h.get(b"created_at")) or 0), tz=UTC),
            updated_at=datetime.fromtimestamp(int(_s(h.get(b"updated_at")) or 0), tz=UTC),
        )

    # -------------------- API ------------------------

    def create_or_replace(
        self,
        *,
        name: str,
        signature: str,
        user_id: int,
        credentials_id: int | None,
    ) -> DeviceView:
        """
        Insert a device, dropping any same-named device of the user first.

        The name index is WATCHed so two concurrent logins from the same
        device name cannot both survive.
        """
        key_name = (name or "").strip() or DEFAULT_DEVICE_NAME
        k_names = self._kn(user_id)
        k_user = self._ku(user_id)

        while True:
            try:
                with self.r.pipeline() as p:
                    p.watch(k_names)
                    old_id = _s(p.hget(k_names, key_name))

                    new_id = int(self.r.incr(self.SEQ_KEY))
                    now = self._now_ts()
                    mapping = {
                        "user_id": str(user_id),
                        "credentials_id": "" if credentials_id is None else str(credentials_id),
                        "name": key_name,
                        "signature": (signature or "").strip(),
                        "access_token": "",
                        "refresh_token": "",
                        "created_at": str(now),
                        "updated_at": str(now),
                    }

                    p.multi()
                    if old_id:
                        p.delete(self._k(old_id))
                        p.srem(k_user, old_id)
                    p.hset(self._k(new_id), mapping=mapping)
                    p.hset(k_names, key_name, str(new_id))
                    p.sadd(k_user, str(new_id))
                    p.execute()

                return self._to_view(
                    new_id, {k.encode(): v.encode() for k, v in mapping.items()}
                )
            except redis.WatchError:
                # Concurrent login on the same device name; retry
                continue

    def find_by_id(self, device_id: int) -> DeviceView | None:
        h = self.r.hgetall(self._k(device_id))
        if not h:
            return None
        return self._to_view(int(device_id), h)

    def update_tokens(
        self,
        device_id: int,
        *,
        access_token: str | None = None,
        refresh_token: str | None = None,
    ) -> None:
        mapping: dict[str, str] = {}
        if access_token is not None:
            mapping["access_token"] = access_token
        if refresh_token is not None:
            mapping["refresh_token"] = refresh_token
        if not mapping:
            return
        key = self._k(device_id)

        while True:
            try:
                with self.r.pipeline() as p:
                    p.watch(key)
                    # Never resurrect a deleted device as a partial hash
                    if not p.exists(key):
                        p.unwatch()
                        return
                    mapping["updated_at"] = str(self._now_ts())
                    p.multi()
                    p.hset(key, mapping=mapping)
                    p.execute()
                return
            except redis.WatchError:
                continue

    def delete(self, device_id: int) -> bool:
        key = self._k(device_id)
        while True:
            try:
                with self.r.pipeline() as p:
                    p.watch(key)
                    h = p.hgetall(key)
                    if not h:
                        p.unwatch()
                        return False
                    user_id = _s(h.get(b"user_id"))
                    name = _s(h.get(b"name"))
                    k_names = self._kn(user_id)
                    indexed = _s(self.r.hget(k_names, name))

                    p.multi()
                    p.delete(key)
                    p.srem(self._ku(user_id), str(device_id))
                    if indexed == str(device_id):
                        p.hdel(k_names, name)
                    p.execute()
                return True
            except redis.WatchError:
                continue

    def list_for_user(self, user_id: int) -> list[DeviceView]:
        k_user = self._ku(user_id)
        members = sorted(int(_s(m)) for m in self.r.smembers(k_user))

        views: list[DeviceView] = []
        stale: list[str] = []
        for device_id in members:
            view = self.find_by_id(device_id)
            if view is not None:
                views.append(view)
            else:
                stale.append(str(device_id))

        if stale:
            # Underlying hash missing -> drop from the index
            self.r.srem(k_user, *stale)
        return views
