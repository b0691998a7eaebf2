"""Data models for channels, sessions, and licensing material."""

from .channel_models import Channel, SessionMetadata
from .license_models import ClearKey, ClearKeyDocument, LicenseInfo

__all__ = [
    "Channel",
    "SessionMetadata",
    "LicenseInfo",
    "ClearKey",
    "ClearKeyDocument",
]
