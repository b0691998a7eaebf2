"""Shared HTTP helpers for the channel, session and licensing endpoints."""

from __future__ import annotations

from typing import Any, Dict, Optional

import requests

from .retry import retry_call

REAL_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/135.0.0.0 Safari/537.36"
)

DEFAULT_HEADERS: Dict[str, str] = {
    "user-agent": REAL_USER_AGENT,
    "accept": "*/*",
    "accept-language": "en-US,en;q=0.9",
}


class HttpClient:
    """Performs GET requests with a bounded number of attempts.

    Failures never propagate: once the attempts are exhausted the fetch
    helpers return ``None`` and the caller decides how to degrade.
    """

    def __init__(self, timeout: int = 10, retries: int = 3, retry_delay: float = 0.0) -> None:
        self.timeout = timeout
        self.retries = retries
        self.retry_delay = retry_delay
        self._session = requests.Session()
        self._session.headers.update(DEFAULT_HEADERS.copy())

    def fetch_json(self, url: str, attempts: Optional[int] = None) -> Optional[Any]:
        """GET ``url`` and decode the body as JSON."""

        return retry_call(
            lambda: self._get(url).json(),
            self.retries if attempts is None else attempts,
            url,
            self.retry_delay,
        )

    def fetch_text(self, url: str, attempts: Optional[int] = None) -> Optional[str]:
        """GET ``url`` and return the body as text (e.g. an MPD manifest)."""

        def producer() -> str:
            text = self._get(url).text
            if not text:
                raise ValueError("empty response body")
            return text

        return retry_call(producer, self.retries if attempts is None else attempts, url, self.retry_delay)

    def _get(self, url: str) -> requests.Response:
        response = self._session.get(url, timeout=self.timeout)
        response.raise_for_status()
        return response

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()
