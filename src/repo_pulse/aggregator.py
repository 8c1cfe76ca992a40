"""Data aggregation: fetch the six resources of a repository into a snapshot."""

from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from typing import Any, Iterator, Protocol

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from .errors import FetchError
from .identity import RepoIdentity, validate_identity
from .models import AnalyticsSnapshot
from .parsing import build_snapshot

logger = logging.getLogger(__name__)

_RESOURCES = (
    "repository",
    "contributors",
    "commits",
    "issues",
    "commit_activity",
    "languages",
)


class ResourceFetcher(Protocol):
    """One coroutine per upstream resource kind of a repository."""

    async def get_repository(self, owner: str, repo: str) -> Any: ...

    async def list_contributors(self, owner: str, repo: str) -> Any: ...

    async def list_commits(self, owner: str, repo: str) -> Any: ...

    async def list_issues(self, owner: str, repo: str) -> Any: ...

    async def get_commit_activity(self, owner: str, repo: str) -> Any: ...

    async def get_languages(self, owner: str, repo: str) -> Any: ...


def _first_failure(results: list[Any]) -> FetchError | None:
    """Pick the error to surface: first known kind, else first unknown wrapped."""
    failures = [
        (name, r) for name, r in zip(_RESOURCES, results) if isinstance(r, BaseException)
    ]
    if not failures:
        return None
    for name, exc in failures:
        if isinstance(exc, FetchError):
            return exc
    name, exc = failures[0]
    error = FetchError(f"Failed to fetch {name}: {exc}")
    error.__cause__ = exc
    return error


@contextmanager
def _spinner(description: str, enabled: bool) -> Iterator[None]:
    if not enabled:
        yield
        return
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=Console(stderr=True),
        transient=True,
    ) as progress:
        progress.add_task(description, total=None)
        yield


async def aggregate(
    fetcher: ResourceFetcher, owner: str, repo: str, show_progress: bool = False
) -> AnalyticsSnapshot:
    """Fetch everything for owner/repo and build an AnalyticsSnapshot.

    The six fetches run concurrently. If any of them fails, every result is
    discarded and the failure is raised; a partial snapshot is never built.
    """
    identity = validate_identity(owner, repo)
    owner, repo = identity.owner, identity.repo
    logger.debug("Aggregating %s", identity.full_name)

    with _spinner(f"Fetching {identity.full_name}...", show_progress):
        results = await asyncio.gather(
            fetcher.get_repository(owner, repo),
            fetcher.list_contributors(owner, repo),
            fetcher.list_commits(owner, repo),
            fetcher.list_issues(owner, repo),
            fetcher.get_commit_activity(owner, repo),
            fetcher.get_languages(owner, repo),
            return_exceptions=True,
        )

    failure = _first_failure(list(results))
    if failure is not None:
        logger.warning(
            "Aggregation of %s failed (%s): %s", identity.full_name, failure.kind, failure
        )
        raise failure

    repository, contributors, commits, issues, commit_activity, languages = results
    snapshot = build_snapshot(
        repository, contributors, commits, issues, commit_activity, languages
    )
    logger.debug(
        "%s: %d contributors, %d commits, %d issues, %d activity weeks",
        identity.full_name,
        len(snapshot.contributors),
        len(snapshot.commits),
        len(snapshot.issues),
        len(snapshot.commit_activity),
    )
    return snapshot


async def aggregate_pair(
    fetcher: ResourceFetcher,
    first: RepoIdentity,
    second: RepoIdentity,
    show_progress: bool = False,
) -> tuple[AnalyticsSnapshot, AnalyticsSnapshot]:
    """Aggregate two repositories concurrently for comparison.

    The first failure propagates immediately and the other aggregation is
    cancelled.
    """
    tasks = [
        asyncio.create_task(aggregate(fetcher, first.owner, first.repo)),
        asyncio.create_task(aggregate(fetcher, second.owner, second.repo)),
    ]
    try:
        description = f"Fetching {first.full_name} and {second.full_name}..."
        with _spinner(description, show_progress):
            snapshot_a, snapshot_b = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    return snapshot_a, snapshot_b
