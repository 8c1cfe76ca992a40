"""Tests for rate limit monitoring."""

from __future__ import annotations

import time
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from repo_pulse.errors import RateLimitedError
from repo_pulse.github.rate_limit import RateLimitMonitor


def _response(status_code: int = 200, headers: dict | None = None, json_data=None):
    resp = MagicMock(spec=httpx.Response)
    resp.status_code = status_code
    resp.headers = headers or {}
    resp.json.return_value = json_data if json_data is not None else {}
    return resp


def test_update_reads_headers():
    monitor = RateLimitMonitor()
    monitor.update(
        _response(headers={"X-RateLimit-Remaining": "42", "X-RateLimit-Reset": "1717200000"})
    )
    assert monitor.remaining == 42
    assert monitor.reset_at.year == 2024


def test_is_exhausted():
    monitor = RateLimitMonitor()
    assert monitor.is_exhausted(_response(429))
    assert monitor.is_exhausted(_response(403, {"X-RateLimit-Remaining": "0"}))
    assert monitor.is_exhausted(_response(403, json_data={"message": "API rate limit exceeded"}))
    assert not monitor.is_exhausted(_response(403, json_data={"message": "Forbidden"}))


@pytest.mark.asyncio
async def test_wait_if_needed_no_data():
    monitor = RateLimitMonitor()
    with patch("repo_pulse.github.rate_limit.asyncio.sleep", new_callable=AsyncMock) as sleep:
        await monitor.wait_if_needed()
    sleep.assert_not_called()


@pytest.mark.asyncio
async def test_wait_if_needed_short_wait_sleeps():
    monitor = RateLimitMonitor(max_wait=60)
    monitor.update(
        _response(
            headers={
                "X-RateLimit-Remaining": "0",
                "X-RateLimit-Reset": str(time.time() + 5),
            }
        )
    )
    with patch("repo_pulse.github.rate_limit.asyncio.sleep", new_callable=AsyncMock) as sleep:
        await monitor.wait_if_needed()
    sleep.assert_awaited_once()
    assert monitor.remaining is None


@pytest.mark.asyncio
async def test_wait_if_needed_long_wait_raises():
    monitor = RateLimitMonitor(max_wait=60)
    monitor.update(
        _response(
            headers={
                "X-RateLimit-Remaining": "0",
                "X-RateLimit-Reset": str(time.time() + 3600),
            }
        )
    )
    with pytest.raises(RateLimitedError) as excinfo:
        await monitor.wait_if_needed()
    assert excinfo.value.reset_at is not None


def test_update_ignores_malformed_headers():
    monitor = RateLimitMonitor()
    monitor.update(
        _response(headers={"X-RateLimit-Remaining": "42", "X-RateLimit-Reset": "1717200000"})
    )
    monitor.update(
        _response(headers={"X-RateLimit-Remaining": "n/a", "X-RateLimit-Reset": "later"})
    )
    assert monitor.remaining == 42
    assert monitor.reset_at.year == 2024
