"""Conversion of raw GitHub payloads into the repo-pulse data model.

Everything upstream returns passes through here before it reaches the
metrics or scoring code. Payloads that can't be coerced raise
InvalidResponseShapeError; malformed commit-activity weeks are dropped.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any

from .errors import InvalidResponseShapeError
from .models import (
    AnalyticsSnapshot,
    CommitActivityWeek,
    CommitRecord,
    Contributor,
    IssueLabel,
    IssueRecord,
    RepositorySummary,
)

logger = logging.getLogger(__name__)


def _require_dict(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise InvalidResponseShapeError(
            f"Expected an object for {what}, got {type(value).__name__}"
        )
    return value


def _require_list(value: Any, what: str) -> list[Any]:
    if not isinstance(value, list):
        raise InvalidResponseShapeError(
            f"Expected a list for {what}, got {type(value).__name__}"
        )
    return value


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def _int(value: Any, what: str, default: int = 0) -> int:
    if value is None:
        return default
    if not _is_number(value):
        raise InvalidResponseShapeError(f"Expected a number for {what}: {value!r}")
    return int(value)


def _count(value: Any, what: str) -> int:
    return max(0, _int(value, what))


def _str(value: Any, what: str, default: str = "") -> str:
    if value is None:
        return default
    if not isinstance(value, str):
        raise InvalidResponseShapeError(f"Expected a string for {what}: {value!r}")
    return value


def _required_str(data: dict[str, Any], key: str, what: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise InvalidResponseShapeError(f"Missing {key} in {what}")
    return value


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def parse_repository(payload: Any) -> RepositorySummary:
    data = _require_dict(payload, "repository")
    name = _required_str(data, "name", "repository")
    license_info = data.get("license")
    license_name = None
    if isinstance(license_info, dict):
        license_name = _optional_str(license_info.get("name")) or _optional_str(
            license_info.get("key")
        )
    return RepositorySummary(
        name=name,
        full_name=_str(data.get("full_name"), "repository.full_name", name),
        html_url=_str(data.get("html_url"), "repository.html_url"),
        description=_optional_str(data.get("description")),
        language=_optional_str(data.get("language")),
        stargazers_count=_count(data.get("stargazers_count"), "stargazers_count"),
        watchers_count=_count(data.get("watchers_count"), "watchers_count"),
        forks_count=_count(data.get("forks_count"), "forks_count"),
        open_issues_count=_count(data.get("open_issues_count"), "open_issues_count"),
        license_name=license_name,
        created_at=_optional_str(data.get("created_at")),
        updated_at=_optional_str(data.get("updated_at")),
        pushed_at=_optional_str(data.get("pushed_at")),
        size_kb=_count(data.get("size"), "size"),
        default_branch=_str(data.get("default_branch"), "default_branch", "main"),
    )


def parse_contributors(payload: Any) -> tuple[Contributor, ...]:
    contributors = []
    for raw in _require_list(payload, "contributors"):
        data = _require_dict(raw, "contributor")
        contributors.append(
            Contributor(
                login=_required_str(data, "login", "contributor"),
                id=_int(data.get("id"), "contributor.id"),
                avatar_url=_str(data.get("avatar_url"), "contributor.avatar_url"),
                contributions=_count(data.get("contributions"), "contributions"),
                html_url=_str(data.get("html_url"), "contributor.html_url"),
            )
        )
    return tuple(contributors)


def parse_commits(payload: Any) -> tuple[CommitRecord, ...]:
    commits = []
    for raw in _require_list(payload, "commits"):
        data = _require_dict(raw, "commit")
        detail = _require_dict(data.get("commit") or {}, "commit.commit")
        git_author = detail.get("author") or {}
        if not isinstance(git_author, dict):
            raise InvalidResponseShapeError("Expected an object for commit author")
        account = data.get("author")
        if not isinstance(account, dict):
            account = {}
        commits.append(
            CommitRecord(
                sha=_required_str(data, "sha", "commit"),
                message=_str(detail.get("message"), "commit.message"),
                html_url=_str(data.get("html_url"), "commit.html_url"),
                author_name=_str(git_author.get("name"), "commit.author.name"),
                author_email=_str(git_author.get("email"), "commit.author.email"),
                author_date=_optional_str(git_author.get("date")),
                author_login=_optional_str(account.get("login")),
                author_avatar_url=_optional_str(account.get("avatar_url")),
            )
        )
    return tuple(commits)


def _parse_labels(raw_labels: Any) -> tuple[IssueLabel, ...]:
    if not isinstance(raw_labels, list):
        return ()
    labels = []
    for raw in raw_labels:
        if isinstance(raw, dict) and isinstance(raw.get("name"), str) and raw["name"]:
            labels.append(
                IssueLabel(name=raw["name"], color=_optional_str(raw.get("color")) or "")
            )
        elif isinstance(raw, str) and raw:
            labels.append(IssueLabel(name=raw))
    return tuple(labels)


def parse_issues(payload: Any) -> tuple[IssueRecord, ...]:
    issues = []
    for raw in _require_list(payload, "issues"):
        data = _require_dict(raw, "issue")
        state = data.get("state")
        issues.append(
            IssueRecord(
                id=_int(data.get("id"), "issue.id"),
                number=_int(data.get("number"), "issue.number"),
                title=_str(data.get("title"), "issue.title"),
                # Unknown states are kept so statistics can exclude them
                state=state if isinstance(state, str) else "",
                created_at=_optional_str(data.get("created_at")),
                closed_at=_optional_str(data.get("closed_at")),
                labels=_parse_labels(data.get("labels")),
                html_url=_str(data.get("html_url"), "issue.html_url"),
            )
        )
    return tuple(issues)


def _parse_days(raw_days: Any) -> tuple[int, ...]:
    if (
        isinstance(raw_days, list)
        and len(raw_days) == 7
        and all(_is_number(d) for d in raw_days)
    ):
        return tuple(int(d) for d in raw_days)
    return (0,) * 7


def parse_commit_activity(payload: Any) -> tuple[CommitActivityWeek, ...]:
    if not isinstance(payload, list):
        # GitHub answers {} while statistics are still being computed
        logger.debug("Commit activity unavailable (%s)", type(payload).__name__)
        return ()
    weeks = []
    skipped = 0
    for raw in payload:
        if (
            not isinstance(raw, dict)
            or not _is_number(raw.get("week"))
            or not _is_number(raw.get("total"))
        ):
            skipped += 1
            continue
        weeks.append(
            CommitActivityWeek(
                week=int(raw["week"]),
                total=int(raw["total"]),
                days=_parse_days(raw.get("days")),
            )
        )
    if skipped:
        logger.debug("Skipped %d malformed commit activity entries", skipped)
    return tuple(weeks)


def parse_languages(payload: Any) -> MappingProxyType:
    data = _require_dict(payload, "languages")
    languages: dict[str, int] = {}
    for name, size in data.items():
        languages[str(name)] = _count(size, f"languages.{name}")
    return MappingProxyType(languages)


def build_snapshot(
    repository: Any,
    contributors: Any,
    commits: Any,
    issues: Any,
    commit_activity: Any,
    languages: Any,
) -> AnalyticsSnapshot:
    """Parse the six raw collections into one AnalyticsSnapshot."""
    return AnalyticsSnapshot(
        repository=parse_repository(repository),
        contributors=parse_contributors(contributors),
        commits=parse_commits(commits),
        issues=parse_issues(issues),
        commit_activity=parse_commit_activity(commit_activity),
        languages=parse_languages(languages),
        fetched_at=datetime.now(timezone.utc).isoformat(),
    )
