"""API client responsible for fetching the channel catalog."""

from __future__ import annotations

import logging
from typing import List, Optional

from ..models import Channel
from ..utils.http_client import HttpClient
from ..utils.ttl_cache import TTLCache, cache_key_for_url


class ChannelAPI:
    """Fetches the channel list through the long-lived cache."""

    def __init__(self, http_client: HttpClient, cache: TTLCache, channels_url: str, ttl: float) -> None:
        self._client = http_client
        self._cache = cache
        self._url = channels_url
        self._ttl = ttl

    def get_channels(self) -> Optional[List[Channel]]:
        data = self._cache.get_or_fetch_json(
            cache_key_for_url("channels", self._url),
            self._ttl,
            lambda: self._client.fetch_json(self._url),
        )
        if data is None:
            return None

        entries = data.get("data") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            logging.error("Channel list from %s has no data array", self._url)
            return None

        channels = []
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            channel_id = entry.get("id")
            initial_url = entry.get("initialUrl")
            if channel_id is None or not initial_url:
                logging.debug("Skipping channel entry lacking id or url: %s", entry)
                continue
            channels.append(
                Channel(
                    id=channel_id if isinstance(channel_id, int) else str(channel_id),
                    title=str(entry.get("title") or ""),
                    genre=str(entry.get("genre") or ""),
                    logo=str(entry.get("logo") or ""),
                    initial_url=str(initial_url),
                    base64=entry.get("base64"),
                )
            )
        return channels
