"""Tests for the CLI entrypoint."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

from click.testing import CliRunner

from repo_pulse.cli import main
from repo_pulse.errors import (
    InvalidResponseShapeError,
    NotFoundError,
    RateLimitedError,
    TransportError,
)


def test_help():
    result = CliRunner().invoke(main, ["--help"])
    assert result.exit_code == 0
    assert "--view" in result.output
    assert "GITHUB_TOKEN" in result.output


def test_invalid_target():
    result = CliRunner().invoke(main, ["not-a-repo"])
    assert result.exit_code == 1
    assert "Invalid target" in result.output


def test_compare_needs_two_targets():
    result = CliRunner().invoke(main, ["acme/widget", "--view", "compare"])
    assert result.exit_code == 2


def test_single_view_rejects_two_targets():
    result = CliRunner().invoke(main, ["acme/a", "acme/b", "--view", "health"])
    assert result.exit_code == 2


def test_runs_pipeline_with_parsed_targets():
    run = AsyncMock()
    with patch("repo_pulse.orchestrator.run", new=run):
        result = CliRunner().invoke(
            main,
            ["https://github.com/acme/widget", "--view", "health", "--no-cache"],
            env={"GITHUB_TOKEN": "tok"},
        )
    assert result.exit_code == 0, result.output
    kwargs = run.call_args.kwargs
    assert kwargs["targets"][0].full_name == "acme/widget"
    assert kwargs["view"] == "health"
    assert kwargs["token"] == "tok"
    assert kwargs["no_cache"] is True


def test_two_targets_default_to_compare():
    run = AsyncMock()
    with patch("repo_pulse.orchestrator.run", new=run):
        result = CliRunner().invoke(main, ["acme/a", "acme/b"])
    assert result.exit_code == 0, result.output
    assert run.call_args.kwargs["view"] == "compare"


def _invoke_failing(error: Exception):
    with patch("repo_pulse.orchestrator.run", new=AsyncMock(side_effect=error)):
        return CliRunner().invoke(main, ["acme/widget"])


def test_not_found_message():
    result = _invoke_failing(NotFoundError("missing"))
    assert result.exit_code == 1
    assert "'acme/widget' not found" in result.output


def test_rate_limited_message():
    result = _invoke_failing(RateLimitedError("quota"))
    assert result.exit_code == 1
    assert "rate limit exceeded" in result.output


def test_transport_message():
    result = _invoke_failing(TransportError("timed out"))
    assert result.exit_code == 1
    assert "Could not connect" in result.output


def test_invalid_shape_message():
    result = _invoke_failing(InvalidResponseShapeError("bad"))
    assert result.exit_code == 1
    assert "could not be read" in result.output


def test_clear_cache_flag_is_passed_to_pipeline():
    run = AsyncMock()
    with patch("repo_pulse.orchestrator.run", new=run):
        result = CliRunner().invoke(main, ["acme/widget", "--clear-cache"])
    assert result.exit_code == 0, result.output
    assert run.call_args.kwargs["clear_cache"] is True
