"""Flat-file cache whose entries expire by age (file modification time)."""

from __future__ import annotations

import hashlib
import json
import logging
import os
import time
from typing import Any, Callable, Optional

from .file_utils import atomic_write_text, ensure_directory, sanitize_filename


def cache_key_for_url(prefix: str, url: str, suffix: str = ".json") -> str:
    """Cache key tied to the endpoint, so a reconfigured URL never reuses old data."""

    digest = hashlib.sha1(url.encode("utf-8")).hexdigest()[:12]
    return f"{prefix}-{digest}{suffix}"


class TTLCache:
    """Stores one file per cache key under ``cache_dir``.

    An entry younger than the requested TTL is returned as-is. Otherwise the
    producer is invoked; a ``None`` result leaves any stale entry on disk
    untouched and is passed through to the caller.
    """

    def __init__(self, cache_dir: str) -> None:
        self.cache_dir = ensure_directory(cache_dir)

    def path_for(self, key: str) -> str:
        return os.path.join(self.cache_dir, sanitize_filename(key, default="entry"))

    def age(self, key: str) -> Optional[float]:
        """Seconds since the entry was last written, or ``None`` if missing."""

        try:
            return time.time() - os.path.getmtime(self.path_for(key))
        except FileNotFoundError:
            return None

    def get_or_fetch_json(self, key: str, ttl: float, producer: Callable[[], Optional[Any]]) -> Optional[Any]:
        return self._get_or_fetch(key, ttl, producer, json.loads, _dump_json)

    def get_or_fetch_text(self, key: str, ttl: float, producer: Callable[[], Optional[str]]) -> Optional[str]:
        return self._get_or_fetch(key, ttl, producer, _identity, _identity)

    def _get_or_fetch(
        self,
        key: str,
        ttl: float,
        producer: Callable[[], Optional[Any]],
        load: Callable[[str], Any],
        dump: Callable[[Any], str],
    ) -> Optional[Any]:
        path = self.path_for(key)
        age = self.age(key)
        if age is not None and age < ttl:
            try:
                with open(path, "r", encoding="utf-8", newline="") as handle:
                    value = load(handle.read())
                logging.debug("Cache hit for %s (age %.0fs)", key, age)
                return value
            except (ValueError, OSError) as exc:
                logging.warning("Failed to read cache entry %s: %s", path, exc)

        value = producer()
        if value is None:
            return None
        try:
            atomic_write_text(path, dump(value))
            logging.info("Refreshed cache entry %s", key)
        except OSError as exc:
            logging.warning("Unable to write cache entry %s: %s", path, exc)
        return value


def _dump_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def _identity(value: str) -> str:
    return value
