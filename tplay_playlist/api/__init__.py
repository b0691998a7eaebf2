"""API layer for the channel catalog, session, and licensing endpoints."""

from .channel_api import ChannelAPI
from .license_api import LicenseAPI
from .session_api import SessionAPI

__all__ = ["ChannelAPI", "LicenseAPI", "SessionAPI"]
