"""
authgate.services._shared.ports
===============================

Collection of *ports* (hexagonal interfaces) that the token lifecycle depends
on. They decouple the service layer from signing libraries and storage.

Modules
-------
- :mod:`token_codec`:
    Defines :class:`~.TokenCodec` and :class:`~.DecodedToken`, the signing and
    verification contract.

- :mod:`device_registry`:
    Defines :class:`~.DeviceRegistry` and :class:`~.DeviceView`, the durable
    binding between a device and its last issued token pair.

- :mod:`account_store`:
    Defines :class:`~.AccountStore` and :class:`~.AccountView`, a read-only
    view of user identity used when re-minting access tokens.

- :mod:`code_delivery`:
    Defines :class:`~.CodeDelivery` and :class:`~.SecurityCodeTicket`, the
    outbound channel for activation and password reset codes.

Concrete adapters live under ``authgate.infra``; in-memory doubles live next
to each port for unit tests.
"""

from __future__ import annotations

from .account_store import AccountStore, AccountView, InMemoryAccountStore
from .code_delivery import CodeDelivery, CodePurpose, InMemoryCodeDelivery, SecurityCodeTicket
from .device_registry import DeviceRegistry, DeviceView, InMemoryDeviceRegistry
from .token_codec import DecodedToken, StubTokenCodec, TokenCodec, TokenType

__all__ = [
    "AccountStore",
    "AccountView",
    "InMemoryAccountStore",
    "CodeDelivery",
    "CodePurpose",
    "InMemoryCodeDelivery",
    "SecurityCodeTicket",
    "DeviceRegistry",
    "DeviceView",
    "InMemoryDeviceRegistry",
    "DecodedToken",
    "StubTokenCodec",
    "TokenCodec",
    "TokenType",
]
