"""Service layer public API.

This package exposes the building blocks of the token lifecycle so callers can
import from :mod:`authgate.services` without knowing the internal structure.

Re-exports
----------
- Base primitives (from ``authgate.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Token issuing (from ``authgate.services.tokens``)
    * :class:`TokenIssuer`, :class:`DeviceInfo`, :class:`TokenSettings`

- Renewal orchestrator (from ``authgate.services.renewal``)
    * :class:`TokenRenewalService`
    * DTOs: :class:`TokenPair`, :class:`RenewalDecision`,
      :class:`RenewalError`, :class:`DecisionKind`

- Authentication front (from ``authgate.services.auth``)
    * :class:`AuthService`
    * DTOs: :class:`RegisterIn`, :class:`LoginIn`, :class:`SocialProfileIn`,
      :class:`TokenPairOut`, :class:`UserOut`
"""

from __future__ import annotations

from ._shared.base import BaseService, ServiceContext
from .auth.dto import LoginIn, RegisterIn, SocialProfileIn, TokenPairOut, UserOut
from .auth.service import AuthService
from .renewal import (
    DecisionKind,
    RenewalDecision,
    RenewalError,
    TokenPair,
    TokenRenewalService,
)
from .tokens.issuer import DeviceInfo, TokenIssuer
from .tokens.settings import AccessRenewalPolicy, TokenSettings

__all__ = [
    # Base
    "BaseService",
    "ServiceContext",
    # Tokens
    "AccessRenewalPolicy",
    "DeviceInfo",
    "TokenIssuer",
    "TokenSettings",
    # Renewal
    "DecisionKind",
    "RenewalDecision",
    "RenewalError",
    "TokenPair",
    "TokenRenewalService",
    # Auth
    "AuthService",
    "LoginIn",
    "RegisterIn",
    "SocialProfileIn",
    "TokenPairOut",
    "UserOut",
]
