"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from authgate.repositories.base import BaseRepository
from authgate.repositories.credentials import CredentialsRepository
from authgate.repositories.device import DeviceRepository
from authgate.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "CredentialsRepository",
    "DeviceRepository",
    "UserRepository",
]
