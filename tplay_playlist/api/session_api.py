"""API client for the session (hmac) endpoint."""

from __future__ import annotations

import logging
from typing import Optional

from ..models import SessionMetadata
from ..utils.http_client import HttpClient
from ..utils.ttl_cache import TTLCache, cache_key_for_url


class SessionAPI:
    """Retrieves the user agent and cookie used by every stream."""

    def __init__(self, http_client: HttpClient, cache: TTLCache, hmac_url: str, ttl: float) -> None:
        self._client = http_client
        self._cache = cache
        self._url = hmac_url
        self._ttl = ttl

    def get_session(self) -> Optional[SessionMetadata]:
        data = self._cache.get_or_fetch_json(
            cache_key_for_url("hmac", self._url),
            self._ttl,
            lambda: self._client.fetch_json(self._url),
        )
        if not isinstance(data, dict):
            return None

        user_agent = data.get("userAgent")
        inner = data.get("data")
        cookie = inner.get("hdntl") if isinstance(inner, dict) else None
        if not cookie:
            logging.error("Session response from %s lacks hdntl", self._url)
            return None
        return SessionMetadata(user_agent=str(user_agent or ""), cookie=str(cookie))
