"""Bounded retry policy shared by every upstream fetch."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, TypeVar

import requests

T = TypeVar("T")

RETRYABLE_ERRORS = (requests.RequestException, ValueError)


def retry_call(
    producer: Callable[[], T],
    attempts: int,
    description: str,
    delay: float = 0.0,
) -> Optional[T]:
    """Calls ``producer`` up to ``attempts`` times and returns its first result.

    Network errors, HTTP errors and undecodable bodies are logged with the
    attempt number; once every attempt has failed ``None`` is returned instead
    of raising.
    """

    attempts = max(1, attempts)
    for attempt in range(1, attempts + 1):
        try:
            return producer()
        except RETRYABLE_ERRORS as exc:
            logging.error(
                "Error fetching %s (attempt %s/%s): %s",
                description,
                attempt,
                attempts,
                exc,
            )
            if attempt < attempts and delay > 0:
                time.sleep(delay)
    return None
