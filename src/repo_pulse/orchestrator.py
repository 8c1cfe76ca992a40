"""Orchestrator: wires together client, aggregator, scoring and renderer."""

from __future__ import annotations

import logging
from pathlib import Path

from .aggregator import aggregate, aggregate_pair
from .cache import DEFAULT_CACHE_DIR, DEFAULT_TTL, FileCache
from .comparison import compare
from .github.client import DEFAULT_TIMEOUT, GitHubClient
from .health import score
from .identity import RepoIdentity
from .metrics import derive
from .renderer import (
    comparison_payload,
    health_payload,
    overview_payload,
    render_comparison,
    render_health,
    render_json,
    render_overview,
)

logger = logging.getLogger(__name__)

VIEWS = ("overview", "health", "compare")


async def run(
    targets: list[RepoIdentity],
    view: str = "overview",
    token: str | None = None,
    output_format: str = "table",
    output_file: str | None = None,
    no_cache: bool = False,
    clear_cache: bool = False,
    cache_ttl: int = DEFAULT_TTL,
    cache_dir: Path = DEFAULT_CACHE_DIR,
    timeout: float = DEFAULT_TIMEOUT,
    api_url: str | None = None,
    verify_ssl: bool = True,
) -> None:
    """Main pipeline: fetch and aggregate, derive metrics, render."""
    if view not in VIEWS:
        raise ValueError(f"Unknown view: {view}")
    if view == "compare" and len(targets) != 2:
        raise ValueError("The compare view needs exactly two repositories")

    cache = None if no_cache else FileCache(cache_dir=cache_dir, ttl=cache_ttl)
    if cache is not None:
        if clear_cache:
            removed = cache.clear()
            logger.info("Cleared %d cached responses from %s", removed, cache_dir)
        logger.debug("Caching API responses for %ds", cache.ttl)
    async with GitHubClient(
        token=token,
        no_cache=no_cache,
        cache=cache,
        base_url=api_url,
        verify_ssl=verify_ssl,
        timeout=timeout,
    ) as client:
        if view == "compare":
            snapshot_a, snapshot_b = await aggregate_pair(
                client, targets[0], targets[1], show_progress=True
            )
        else:
            target = targets[0]
            snapshot = await aggregate(
                client, target.owner, target.repo, show_progress=True
            )

    if view == "compare":
        rows = compare(snapshot_a, snapshot_b)
        if output_format == "json":
            render_json(comparison_payload(snapshot_a, snapshot_b, rows), output_file)
        else:
            render_comparison(
                snapshot_a, snapshot_b, rows, output_format=output_format, output_file=output_file
            )
    elif view == "health":
        report = score(snapshot)
        logger.debug("%s scored %d (%s)", snapshot.repository.full_name, report.score, report.grade)
        if output_format == "json":
            render_json(health_payload(snapshot, report), output_file)
        else:
            render_health(snapshot, report, output_format=output_format, output_file=output_file)
    else:
        derived = derive(snapshot)
        if output_format == "json":
            render_json(overview_payload(snapshot, derived), output_file)
        else:
            render_overview(
                snapshot, derived, output_format=output_format, output_file=output_file
            )
