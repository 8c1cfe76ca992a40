"""GitHub API rate limit monitoring."""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone

import httpx

from ..errors import RateLimitedError

logger = logging.getLogger(__name__)


class RateLimitMonitor:
    """Tracks GitHub rate limit headers.

    Short waits for the quota reset are slept through; anything longer than
    ``max_wait`` seconds fails fast with RateLimitedError.
    """

    def __init__(self, threshold: int = 0, max_wait: float = 60.0) -> None:
        self._remaining: int | None = None
        self._reset_at: float | None = None
        self._threshold = threshold
        self._max_wait = max_wait

    @property
    def remaining(self) -> int | None:
        return self._remaining

    @property
    def reset_at(self) -> datetime | None:
        if self._reset_at is None:
            return None
        return datetime.fromtimestamp(self._reset_at, tz=timezone.utc)

    def update(self, response: httpx.Response) -> None:
        remaining = response.headers.get("X-RateLimit-Remaining")
        reset_at = response.headers.get("X-RateLimit-Reset")
        if remaining is not None:
            try:
                self._remaining = int(remaining)
            except ValueError:
                logger.debug("Ignoring malformed X-RateLimit-Remaining: %r", remaining)
        if reset_at is not None:
            try:
                self._reset_at = float(reset_at)
            except ValueError:
                logger.debug("Ignoring malformed X-RateLimit-Reset: %r", reset_at)

    def is_exhausted(self, response: httpx.Response) -> bool:
        """Whether a 403/429 response means the quota ran out."""
        if response.status_code == 429:
            return True
        if response.headers.get("X-RateLimit-Remaining") == "0":
            return True
        if response.headers.get("Retry-After") is not None:
            return True
        try:
            message = str(response.json().get("message", ""))
        except (ValueError, AttributeError):
            return False
        return "rate limit" in message.lower()

    async def wait_if_needed(self) -> None:
        if (
            self._remaining is None
            or self._remaining > self._threshold
            or self._reset_at is None
        ):
            return
        wait_seconds = max(0, self._reset_at - time.time()) + 1
        if wait_seconds > self._max_wait:
            raise RateLimitedError(
                "GitHub API rate limit exceeded", reset_at=self.reset_at
            )
        logger.info("Rate limit reached, waiting %.0fs for reset", wait_seconds)
        await asyncio.sleep(wait_seconds)
        self._remaining = None
