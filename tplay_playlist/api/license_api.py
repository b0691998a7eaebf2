"""API client for per-channel licensing metadata."""

from __future__ import annotations

import logging
from typing import Optional

from ..models import LicenseInfo
from ..utils.http_client import HttpClient


class LicenseAPI:
    """Looks up manifest URL, PSSH and key material for a channel id."""

    def __init__(self, http_client: HttpClient, key_url: str) -> None:
        self._client = http_client
        self._key_url = key_url

    def get_license(self, channel_id: str) -> Optional[LicenseInfo]:
        url = f"{self._key_url}{channel_id}"
        data = self._client.fetch_json(url)
        if data is None:
            return None

        try:
            payload = data[0]["data"]
        except (KeyError, IndexError, TypeError):
            logging.error("Unexpected licensing response for channel %s", channel_id)
            return None
        if not isinstance(payload, dict):
            logging.error("Unexpected licensing response for channel %s", channel_id)
            return None

        return LicenseInfo(
            initial_url=_optional_str(payload.get("initialUrl")),
            pssh_set=_optional_str(payload.get("psshSet")),
            kid=_optional_str(payload.get("kid")),
            key_id_hex=_optional_str(payload.get("licence1")),
            key_hex=_optional_str(payload.get("licence2")),
        )


def _optional_str(value) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)
