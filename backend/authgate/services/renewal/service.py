# authgate/services/renewal/service.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from authgate.services._shared.base import BaseService, ServiceContext
from authgate.services._shared.errors import EntropyUnavailableError, InvalidTokenError
from authgate.services._shared.ports import (
    AccountStore,
    AccountView,
    DecodedToken,
    DeviceRegistry,
    DeviceView,
    TokenCodec,
)
from authgate.services.renewal.dto import (
    RenewalDecision,
    RenewalError,
    TokenPair,
)
from authgate.services.tokens.issuer import TokenIssuer
from authgate.services.tokens.lifecycle import has_expired, should_renew
from authgate.services.tokens.settings import AccessRenewalPolicy, TokenSettings

log = logging.getLogger(__name__)


def _binding(payload: dict[str, Any]) -> tuple[int, int] | None:
    """Return ``(user_id, device_id)`` from a token payload, if well formed."""
    try:
        return int(payload["user_id"]), int(payload["device_id"])
    except (KeyError, TypeError, ValueError):
        return None


class TokenRenewalService(BaseService):
    """
    Decide whether a presented token pair is rejected, passed through or rotated.

    The refresh token is evaluated first because it is the authority for the
    device binding; the access token is only re-minted once the refresh token
    and its device are known to be good.

    Every failure is returned as a :class:`RenewalDecision`; nothing is raised
    to the caller.
    """

    def __init__(
        self,
        *,
        codec: TokenCodec,
        registry: DeviceRegistry,
        accounts: AccountStore,
        settings: TokenSettings | None = None,
        issuer: TokenIssuer | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param codec: Signs and verifies tokens.
        :param registry: Device registry consulted on every refresh/access check.
        :param accounts: Account lookups; a gone or deactivated account rejects the device.
        :param settings: Lifetimes, renewal window and access policy.
        :param issuer: Token issuer (built from ``codec`` and ``settings`` if omitted).
        """
        super().__init__(ctx=ctx)
        self.codec = codec
        self.registry = registry
        self.accounts = accounts
        self.settings = settings or (issuer.settings if issuer else TokenSettings())
        self.issuer = issuer or TokenIssuer(codec, self.settings)

    # ------------------------------------------------------------------ #
    # Entry point
    # ------------------------------------------------------------------ #

    def evaluate(self, presented: TokenPair) -> RenewalDecision:
        """
        Evaluate a presented pair.

        :param presented: Tokens sent by the client (either may be ``None``).
        :returns: The decision, carrying the pair the client should keep.
        """
        if presented.is_empty:
            return self._finish(RenewalDecision.reject(RenewalError.INVALID_TOKEN))

        try:
            if presented.refresh_token is None and presented.access_token is not None:
                decision = self._evaluate_access_only(presented.access_token)
            elif presented.refresh_token is not None:
                decision = self._evaluate_with_refresh(
                    presented.refresh_token, presented.access_token
                )
            else:  # pragma: no cover - is_empty handled above
                decision = RenewalDecision.reject(RenewalError.INVALID_TOKEN)
        except EntropyUnavailableError:
            decision = RenewalDecision.reject(RenewalError.ENTROPY_UNAVAILABLE)
        return self._finish(decision)

    # ------------------------------------------------------------------ #
    # Refresh first, then access
    # ------------------------------------------------------------------ #

    def _evaluate_with_refresh(
        self, presented_refresh: str, presented_access: str | None
    ) -> RenewalDecision:
        now = self.now_utc()

        refresh = self._decode(presented_refresh, expected_type="refresh")
        if refresh is None:
            return RenewalDecision.reject(RenewalError.INVALID_TOKEN)
        if has_expired(refresh.expires_at, now=now):
            return RenewalDecision.reject(RenewalError.REFRESH_EXPIRED)

        binding = _binding(refresh.payload)
        if binding is None:
            return RenewalDecision.reject(RenewalError.INVALID_TOKEN)
        user_id, device_id = binding

        device = self.registry.find_by_id(device_id)
        if device is None or device.user_id != user_id:
            return RenewalDecision.reject(RenewalError.DEVICE_NOT_REGISTERED, device_id=device_id)
        account = self._active_account(device)
        if account is None:
            return RenewalDecision.reject(RenewalError.DEVICE_NOT_REGISTERED, device_id=device_id)

        refresh_token = presented_refresh
        refresh_rotated = False
        if should_renew(refresh.expires_at, self.settings.renewal_window_days, now=now):
            refresh_token = self.issuer.reissue_refresh_token(refresh)
            self.registry.update_tokens(device_id, refresh_token=refresh_token)
            refresh_rotated = True

        if presented_access is None:
            pair = TokenPair(access_token=None, refresh_token=refresh_token)
            if refresh_rotated:
                return RenewalDecision.rotate(pair, claims={}, device_id=device_id)
            return RenewalDecision.pass_through(pair, claims={}, device_id=device_id)

        access = self._decode(presented_access, expected_type="access")
        if (
            not refresh_rotated
            and access is not None
            and self._access_still_usable(access, binding, now)
        ):
            pair = TokenPair(access_token=presented_access, refresh_token=refresh_token)
            return RenewalDecision.pass_through(pair, claims=access.payload, device_id=device_id)

        return self._remint_access(binding, account, refresh_token)

    def _access_still_usable(
        self,
        access: DecodedToken,
        binding: tuple[int, int],
        now: datetime,
    ) -> bool:
        if self.settings.access_policy is AccessRenewalPolicy.ALWAYS:
            return False
        if has_expired(access.expires_at, now=now):
            return False
        return _binding(access.payload) == binding

    def _remint_access(
        self,
        binding: tuple[int, int],
        account: AccountView,
        refresh_token: str,
    ) -> RenewalDecision:
        user_id, device_id = binding
        # The device may have been deleted or replaced since the refresh check
        device = self.registry.find_by_id(device_id)
        if device is None or device.user_id != user_id:
            return RenewalDecision.reject(RenewalError.DEVICE_NOT_REGISTERED, device_id=device_id)

        access_token = self.issuer.issue_access_token(
            user_id=account.user_id,
            display_name=account.display_name,
            email=account.email,
            device_id=device.device_id,
        )
        self.registry.update_tokens(device_id, access_token=access_token)
        claims = self.codec.decode(access_token).payload
        pair = TokenPair(access_token=access_token, refresh_token=refresh_token)
        return RenewalDecision.rotate(pair, claims=claims, device_id=device_id)

    # ------------------------------------------------------------------ #
    # Access token without refresh token
    # ------------------------------------------------------------------ #

    def _evaluate_access_only(self, presented_access: str) -> RenewalDecision:
        access = self._decode(presented_access, expected_type="access")
        if access is None or has_expired(access.expires_at, now=self.now_utc()):
            return RenewalDecision.reject(RenewalError.INVALID_TOKEN)

        binding = _binding(access.payload)
        if binding is None:
            return RenewalDecision.reject(RenewalError.INVALID_TOKEN)
        user_id, device_id = binding

        device = self.registry.find_by_id(device_id)
        if device is None or device.user_id != user_id:
            return RenewalDecision.reject(RenewalError.DEVICE_NOT_REGISTERED, device_id=device_id)
        if self._active_account(device) is None:
            return RenewalDecision.reject(RenewalError.DEVICE_NOT_REGISTERED, device_id=device_id)
        pair = TokenPair(access_token=presented_access, refresh_token=None)
        return RenewalDecision.pass_through(pair, claims=access.payload, device_id=device_id)

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    def _active_account(self, device: DeviceView) -> AccountView | None:
        """Return the account behind ``device``; ``None`` if gone or deactivated."""
        account = self.accounts.find_account(device.user_id, device.credentials_id)
        if account is None or not account.activated:
            return None
        return account

    def _decode(self, token: str, *, expected_type: str) -> DecodedToken | None:
        try:
            decoded = self.codec.decode(token)
        except InvalidTokenError:
            return None
        return decoded if decoded.token_type == expected_type else None

    def _finish(self, decision: RenewalDecision) -> RenewalDecision:
        reason = decision.error.value if decision.error else None
        log.info(
            "renewal.decision",
            extra={
                "decision": decision.kind.value,
                "reason": reason,
                "device_id": decision.device_id,
            },
        )
        return decision
