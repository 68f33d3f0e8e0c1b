"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    CodeIssuedSchema,
    EmailSchema,
    LoginSchema,
    PasswordResetSchema,
    RegisterSchema,
    SecurityCodeSchema,
    TokenCheckSchema,
    TokenPairSchema,
    WhoAmISchema,
)
from .user import DeviceSchema, UserSchema

__all__ = [
    "CodeIssuedSchema",
    "EmailSchema",
    "LoginSchema",
    "PasswordResetSchema",
    "RegisterSchema",
    "SecurityCodeSchema",
    "TokenCheckSchema",
    "TokenPairSchema",
    "WhoAmISchema",
    "DeviceSchema",
    "UserSchema",
]
