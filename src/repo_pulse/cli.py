"""CLI entrypoint for repo-pulse."""

from __future__ import annotations

import asyncio
import logging
import sys

import click

from . import __version__
from .cache import DEFAULT_TTL
from .errors import (
    AuthenticationError,
    FetchError,
    InvalidInputError,
    InvalidResponseShapeError,
    NotFoundError,
    RateLimitedError,
    TransportError,
)
from .github.client import DEFAULT_TIMEOUT
from .identity import parse_target


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _error_message(exc: FetchError, targets: tuple[str, ...]) -> str:
    """One human-readable line for a failed analysis."""
    names = " / ".join(targets)
    if isinstance(exc, NotFoundError):
        return f"Error: '{names}' not found. Check the owner/repo name."
    if isinstance(exc, RateLimitedError):
        message = "Error: GitHub API rate limit exceeded."
        if exc.reset_at is not None:
            message += f" Resets at {exc.reset_at:%Y-%m-%d %H:%M:%S} UTC."
        return message + " Use --token or $GITHUB_TOKEN for a higher limit."
    if isinstance(exc, AuthenticationError):
        return "Error: Authentication failed. Check your --token or $GITHUB_TOKEN."
    if isinstance(exc, TransportError):
        return f"Error: Could not connect to GitHub API. {exc}"
    if isinstance(exc, InvalidResponseShapeError):
        return f"Error: GitHub returned data that could not be read. {exc}"
    return f"Error: {exc}"


@click.command()
@click.argument("targets", nargs=-1, required=True)
@click.option(
    "--token",
    envvar="GITHUB_TOKEN",
    default=None,
    show_envvar=True,
    help="GitHub personal access token (optional, raises the rate limit)",
)
@click.option(
    "--view",
    type=click.Choice(["overview", "health", "compare"], case_sensitive=False),
    default=None,
    help="View to render [default: compare for two targets, else overview]",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json", "html"], case_sensitive=False),
    default="table",
    show_default=True,
    help="Output format",
)
@click.option(
    "--output",
    "output_file",
    default=None,
    type=click.Path(),
    help="Save output to file instead of stdout",
)
@click.option("--no-cache", is_flag=True, default=False, help="Disable HTTP response caching")
@click.option(
    "--clear-cache",
    is_flag=True,
    default=False,
    help="Delete cached API responses before fetching",
)
@click.option(
    "--cache-ttl",
    envvar="REPO_PULSE_CACHE_TTL",
    type=click.IntRange(min=0),
    default=DEFAULT_TTL,
    show_default=True,
    show_envvar=True,
    help="Seconds a cached API response stays valid",
)
@click.option(
    "--timeout",
    envvar="REPO_PULSE_TIMEOUT",
    type=click.FloatRange(min=0, min_open=True),
    default=DEFAULT_TIMEOUT,
    show_default=True,
    show_envvar=True,
    help="Timeout in seconds for each GitHub API call",
)
@click.option(
    "--api-url",
    envvar="REPO_PULSE_API_URL",
    default=None,
    show_envvar=True,
    help="GitHub Enterprise API base URL",
)
@click.option(
    "--no-ssl-verify",
    is_flag=True,
    default=False,
    help="Disable SSL verification (self-signed certs)",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
@click.version_option(version=__version__)
def main(
    targets: tuple[str, ...],
    token: str | None,
    view: str | None,
    output_format: str,
    output_file: str | None,
    no_cache: bool,
    clear_cache: bool,
    cache_ttl: int,
    timeout: float,
    api_url: str | None,
    no_ssl_verify: bool,
    verbose: bool,
) -> None:
    """Analyze GitHub repositories: overview, health score and comparison.

    \b
    TARGETS are one or two repositories, each given as:
      - owner/repo:                repo-pulse pallets/flask
      - a GitHub URL:              repo-pulse https://github.com/pallets/flask

    \b
    Examples:
      repo-pulse pallets/flask --view health
      repo-pulse pallets/flask django/django
      repo-pulse pallets/flask --view health --format json --output health.json
      repo-pulse pallets/flask --format html --output flask.html
    """
    _configure_logging(verbose)

    if view is None:
        view = "compare" if len(targets) == 2 else "overview"
    view = view.lower()
    if view == "compare" and len(targets) != 2:
        raise click.UsageError("The compare view needs exactly two repositories.")
    if view != "compare" and len(targets) != 1:
        raise click.UsageError(f"The {view} view takes exactly one repository.")

    try:
        identities = [parse_target(t) for t in targets]
    except InvalidInputError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    from .orchestrator import run

    try:
        asyncio.run(
            run(
                targets=identities,
                view=view,
                token=token,
                output_format=output_format.lower(),
                output_file=output_file,
                no_cache=no_cache,
                clear_cache=clear_cache,
                cache_ttl=cache_ttl,
                timeout=timeout,
                api_url=api_url,
                verify_ssl=not no_ssl_verify,
            )
        )
    except FetchError as exc:
        click.echo(_error_message(exc, targets), err=True)
        sys.exit(1)
    except Exception as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
