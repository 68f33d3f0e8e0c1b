from authgate.models.credentials import AuthProvider, Credentials
from authgate.models.device import DEFAULT_DEVICE_NAME, Device
from authgate.models.user import User

__all__ = [
    "AuthProvider",
    "Credentials",
    "DEFAULT_DEVICE_NAME",
    "Device",
    "User",
]
