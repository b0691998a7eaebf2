"""Utility helpers for HTTP, caching and filesystem operations."""

from .file_utils import atomic_write_text, ensure_directory, sanitize_filename
from .http_client import HttpClient
from .retry import retry_call
from .ttl_cache import TTLCache, cache_key_for_url

__all__ = [
    "HttpClient",
    "TTLCache",
    "atomic_write_text",
    "cache_key_for_url",
    "ensure_directory",
    "retry_call",
    "sanitize_filename",
]
