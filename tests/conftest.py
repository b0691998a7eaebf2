"""Shared fixtures for the tplay_playlist test suite."""

from __future__ import annotations

import os
import time

import pytest
import requests

from tplay_playlist.utils.ttl_cache import TTLCache


def make_response(status: int = 200, body: bytes = b"", url: str = "https://upstream.test/resource") -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = body
    response.encoding = "utf-8"
    response.url = url
    return response


def seed_entry(cache: TTLCache, key: str, content: str, age: float) -> str:
    """Writes a cache file whose mtime lies ``age`` seconds in the past."""

    path = cache.path_for(key)
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(content)
    stamp = time.time() - age
    os.utime(path, (stamp, stamp))
    return path


@pytest.fixture
def cache(tmp_path) -> TTLCache:
    return TTLCache(str(tmp_path / "cache"))
