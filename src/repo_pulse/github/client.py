"""GitHub REST API client."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from ..cache import FileCache
from ..errors import (
    AuthenticationError,
    FetchError,
    InvalidResponseShapeError,
    NotFoundError,
    RateLimitedError,
    TransportError,
)
from .rate_limit import RateLimitMonitor

logger = logging.getLogger(__name__)

BASE_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 30.0

CONTRIBUTORS_PER_PAGE = 30
COMMITS_PER_PAGE = 50
ISSUES_PER_PAGE = 50


def _decode_json(response: httpx.Response, url: str) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise InvalidResponseShapeError(f"{url} did not return JSON") from exc


class GitHubClient:
    """Async GitHub REST API client for the resources of one repository.

    Implements the ResourceFetcher protocol used by the aggregator. HTTP
    failures are raised as repo_pulse.errors exceptions.
    """

    def __init__(
        self,
        token: str | None = None,
        concurrency: int = 5,
        no_cache: bool = False,
        base_url: str | None = None,
        verify_ssl: bool = True,
        timeout: float = DEFAULT_TIMEOUT,
        cache: FileCache | None = None,
        max_rate_limit_wait: float = 60.0,
    ) -> None:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "repo-pulse",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url or BASE_URL,
            headers=headers,
            timeout=timeout,
            verify=verify_ssl,
            follow_redirects=True,
        )
        self._rate_limit = RateLimitMonitor(max_wait=max_rate_limit_wait)
        self._semaphore = asyncio.Semaphore(concurrency)
        if no_cache:
            self._cache: FileCache | None = None
        else:
            self._cache = cache if cache is not None else FileCache()

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    def _translate(self, response: httpx.Response, url: str) -> FetchError:
        error = self._error_for_status(response, url)
        error.status_code = response.status_code
        return error

    def _error_for_status(self, response: httpx.Response, url: str) -> FetchError:
        status = response.status_code
        if status in (404, 410, 451):
            return NotFoundError(f"Repository not found: {url}")
        if status in (403, 429) and self._rate_limit.is_exhausted(response):
            return RateLimitedError(
                "GitHub API rate limit exceeded", reset_at=self._rate_limit.reset_at
            )
        if status in (401, 403):
            return AuthenticationError(
                f"GitHub API denied access ({status}). Check your token."
            )
        if status >= 500:
            return TransportError(f"GitHub API returned {status} for {url}")
        return FetchError(f"GitHub API returned {status} for {url}")

    async def _get(
        self, url: str, params: dict[str, Any] | None = None
    ) -> httpx.Response:
        async with self._semaphore:
            await self._rate_limit.wait_if_needed()
            try:
                response = await self._client.get(url, params=params)
            except httpx.TimeoutException as exc:
                raise TransportError(f"Timed out requesting {url}") from exc
            except httpx.TransportError as exc:
                raise TransportError(f"Could not reach GitHub API: {exc}") from exc
            self._rate_limit.update(response)
            logger.debug(
                "GET %s -> %d (rate limit remaining: %s)",
                url,
                response.status_code,
                self._rate_limit.remaining,
            )
            try:
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise self._translate(exc.response, url) from exc
            return response

    async def _cached_get_json(
        self, url: str, params: dict[str, Any] | None = None
    ) -> Any:
        """GET with file cache support. Returns parsed JSON."""
        if self._cache is not None:
            cached = self._cache.get(url, params)
            if cached is not None:
                return cached
        response = await self._get(url, params)
        data = [] if response.status_code == 204 else _decode_json(response, url)
        if self._cache is not None:
            self._cache.set(url, params, data)
        return data

    async def get_repository(self, owner: str, repo: str) -> dict[str, Any]:
        """Get repository metadata."""
        return await self._cached_get_json(f"/repos/{owner}/{repo}")

    async def list_contributors(self, owner: str, repo: str) -> list[dict[str, Any]]:
        """List the top contributors, in upstream rank order."""
        return await self._cached_get_json(
            f"/repos/{owner}/{repo}/contributors",
            params={"per_page": CONTRIBUTORS_PER_PAGE},
        )

    async def list_commits(self, owner: str, repo: str) -> list[dict[str, Any]]:
        """List the most recent commits, newest first."""
        try:
            return await self._cached_get_json(
                f"/repos/{owner}/{repo}/commits",
                params={"per_page": COMMITS_PER_PAGE},
            )
        except FetchError as exc:
            # 409 means the repository is empty
            if exc.status_code == 409:
                return []
            raise

    async def list_issues(self, owner: str, repo: str) -> list[dict[str, Any]]:
        """Recent open and closed issues, pull requests included."""
        url = f"/repos/{owner}/{repo}/issues"
        open_issues, closed_issues = await asyncio.gather(
            self._cached_get_json(
                url, params={"state": "open", "per_page": ISSUES_PER_PAGE}
            ),
            self._cached_get_json(
                url, params={"state": "closed", "per_page": ISSUES_PER_PAGE}
            ),
        )
        # Pull requests stay in the sample; open_issues_count counts them too
        results: list[Any] = []
        for batch in (open_issues, closed_issues):
            if isinstance(batch, list):
                results.extend(batch)
            else:
                results.append(batch)
        return results

    async def get_commit_activity(
        self, owner: str, repo: str, retries: int = 4
    ) -> list[dict[str, Any]]:
        """Weekly commit totals for the last year. Handles 202 (computing) with retries."""
        url = f"/repos/{owner}/{repo}/stats/commit_activity"

        if self._cache is not None:
            cached = self._cache.get(url)
            if cached is not None:
                return cached

        for attempt in range(retries):
            response = await self._get(url)
            if response.status_code == 204:
                return []
            if response.status_code == 202:
                if attempt < retries - 1:
                    delay = min(2 ** (attempt + 1), 10)
                    logger.info(
                        "%s/%s: commit activity computing (attempt %d/%d), retry in %ds",
                        owner,
                        repo,
                        attempt + 1,
                        retries,
                        delay,
                    )
                    await asyncio.sleep(delay)
                    continue
                logger.warning(
                    "%s/%s: commit activity still computing after %d attempts",
                    owner,
                    repo,
                    retries,
                )
                return []
            data = _decode_json(response, url)
            if self._cache is not None and data:
                self._cache.set(url, None, data)
            return data
        return []

    async def get_languages(self, owner: str, repo: str) -> dict[str, int]:
        """Get language breakdown (bytes) for a repository."""
        return await self._cached_get_json(f"/repos/{owner}/{repo}/languages")
