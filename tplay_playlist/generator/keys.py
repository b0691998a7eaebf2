"""Clear-key document synthesis from hex-encoded licensing material."""

from __future__ import annotations

import base64
import logging
from typing import Any, Dict, Optional

from ..api.license_api import LicenseAPI
from ..models import ClearKey, ClearKeyDocument
from ..utils.file_utils import is_safe_filename
from ..utils.ttl_cache import TTLCache


def hex_to_base64url(value: str) -> str:
    """Re-encodes a hex string (UUID hyphens allowed) as unpadded base64url."""

    raw = bytes.fromhex(value.strip().replace("-", ""))
    if not raw:
        raise ValueError("empty hex value")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def build_clearkey_document(key_id_hex: str, key_hex: str) -> ClearKeyDocument:
    return ClearKeyDocument(
        keys=[ClearKey(k=hex_to_base64url(key_hex), kid=hex_to_base64url(key_id_hex))],
    )


class KeySynthesizer:
    """Produces (and caches) the clear-key JSON for a channel id."""

    def __init__(self, license_api: LicenseAPI, cache: TTLCache, ttl: float) -> None:
        self._license_api = license_api
        self._cache = cache
        self._ttl = ttl

    def synthesize(self, channel_id: str) -> Optional[Dict[str, Any]]:
        if not is_safe_filename(channel_id):
            logging.error("Invalid channel id %r", channel_id)
            return None
        return self._cache.get_or_fetch_json(
            f"TP-{channel_id}.json",
            self._ttl,
            lambda: self._build(channel_id),
        )

    def _build(self, channel_id: str) -> Optional[Dict[str, Any]]:
        info = self._license_api.get_license(channel_id)
        if info is None:
            return None
        if not info.key_id_hex or not info.key_hex:
            logging.error("Licensing data for channel %s has no key material", channel_id)
            return None

        try:
            document = build_clearkey_document(info.key_id_hex, info.key_hex)
        except ValueError as exc:
            logging.error("Malformed key material for channel %s: %s", channel_id, exc)
            return None

        logging.info("Generated clear-key document for channel %s", channel_id)
        return document.model_dump()
