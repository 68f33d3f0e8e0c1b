"""Builds access/refresh payloads and delegates signing to a :class:`TokenCodec`."""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass

from authgate.services._shared.errors import EntropyUnavailableError, InvalidTokenError
from authgate.services._shared.ports import DecodedToken, TokenCodec
from authgate.services.tokens.settings import TokenSettings

log = logging.getLogger(__name__)

EntropySource = Callable[[int], bytes]


@dataclass(frozen=True, slots=True)
class DeviceInfo:
    """
    Client supplied device identity.

    :param name: Human label of the device (e.g. "Pixel 8").
    :param signature: Opaque client fingerprint.
    """

    name: str
    signature: str = ""


class TokenIssuer:
    """
    Mint access and refresh tokens for a device.

    Access payload: ``user_id``, ``name``, ``email``, ``device_id``.
    Refresh payload: ``user_id``, ``device_id``, ``device_name``,
    ``device_signature`` and a random ``nonce`` so two refresh tokens minted
    in the same second never collide.
    """

    def __init__(
        self,
        codec: TokenCodec,
        settings: TokenSettings | None = None,
        *,
        entropy: EntropySource = secrets.token_bytes,
    ) -> None:
        self.codec = codec
        self.settings = settings or TokenSettings()
        self._entropy = entropy

    def issue_access_token(
        self,
        *,
        user_id: int,
        display_name: str,
        email: str | None,
        device_id: int,
    ) -> str:
        payload = {
            "user_id": user_id,
            "name": display_name,
            "email": email,
            "device_id": device_id,
        }
        return self.codec.mint(payload, self.settings.access_ttl, token_type="access")

    def issue_refresh_token(
        self,
        *,
        device: DeviceInfo,
        device_id: int,
        user_id: int,
    ) -> str:
        """
        Mint a refresh token carrying a fresh nonce.

        :raises EntropyUnavailableError: If the random source fails.
        """
        payload = {
            "user_id": user_id,
            "device_id": device_id,
            "device_name": device.name,
            "device_signature": device.signature,
            "nonce": self._nonce(),
        }
        return self.codec.mint(payload, self.settings.refresh_ttl, token_type="refresh")

    def reissue_refresh_token(self, decoded: DecodedToken) -> str:
        """
        Mint a replacement for a decoded refresh token.

        ``user_id``, ``device_id`` and the device description are carried
        over; the nonce and expiry are new.

        :raises InvalidTokenError: If the payload lacks the binding claims.
        """
        data = decoded.payload
        try:
            user_id = int(data["user_id"])
            device_id = int(data["device_id"])
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidTokenError() from exc
        device = DeviceInfo(
            name=str(data.get("device_name") or ""),
            signature=str(data.get("device_signature") or ""),
        )
        return self.issue_refresh_token(device=device, device_id=device_id, user_id=user_id)

    def _nonce(self) -> str:
        try:
            raw = self._entropy(self.settings.nonce_bytes)
        except (OSError, NotImplementedError) as exc:
            log.error("tokens.entropy_unavailable", exc_info=True)
            raise EntropyUnavailableError() from exc
        return raw.hex().upper()
