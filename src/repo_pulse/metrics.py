"""Derived metrics: presentation-ready projections of an AnalyticsSnapshot.

Every function here is pure and never raises on incomplete data; missing or
malformed values are skipped or counted as zero.
"""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone

from .models import (
    ActivityPoint,
    AnalyticsSnapshot,
    CommitActivityWeek,
    CommitRecord,
    Contributor,
    DerivedMetrics,
    IssueRecord,
    IssueStats,
    LabelCount,
    LanguageShare,
)

DEFAULT_LANGUAGE_COLOR = "#8884d8"

LANGUAGE_COLORS = {
    "JavaScript": "#f1e05a",
    "TypeScript": "#2b7489",
    "Python": "#3572A5",
    "Java": "#b07219",
    "C++": "#f34b7d",
    "C": "#555555",
    "C#": "#239120",
    "PHP": "#4F5D95",
    "Ruby": "#701516",
    "Go": "#00ADD8",
    "Rust": "#dea584",
    "Swift": "#ffac45",
    "Kotlin": "#F18E33",
    "Scala": "#c22d40",
    "Shell": "#89e051",
    "HTML": "#e34c26",
    "CSS": "#1572B6",
    "Vue": "#2c3e50",
}

TOP_LANGUAGES = 6
ACTIVITY_WEEKS = 12
TOP_LABELS = 5
TOP_CONTRIBUTORS = 5
RECENT_COMMITS = 10


def _is_number(value: object) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def language_distribution(
    languages: Mapping[str, int], limit: int = TOP_LANGUAGES
) -> list[LanguageShare]:
    """Top languages by bytes with their share of the non-zero total."""
    sizes = [
        (name, int(size))
        for name, size in languages.items()
        if _is_number(size) and size > 0
    ]
    total = sum(size for _, size in sizes)
    if total <= 0:
        return []
    sizes.sort(key=lambda x: x[1], reverse=True)
    return [
        LanguageShare(
            language=name,
            bytes=size,
            percentage=round(size / total * 100, 1),
            color=LANGUAGE_COLORS.get(name, DEFAULT_LANGUAGE_COLOR),
        )
        for name, size in sizes[:limit]
    ]


def _week_date(week: int | float) -> str | None:
    try:
        return datetime.fromtimestamp(week, tz=timezone.utc).strftime("%Y-%m-%d")
    except (OverflowError, OSError, ValueError):
        return None


def commit_activity_window(
    weeks: Iterable[CommitActivityWeek], limit: int = ACTIVITY_WEEKS
) -> list[ActivityPoint]:
    """The last ``limit`` valid weeks, labelled Week 1..N in kept order."""
    valid: list[tuple[int, str]] = []
    for entry in weeks:
        week = getattr(entry, "week", None)
        total = getattr(entry, "total", None)
        if not _is_number(week) or not _is_number(total):
            continue
        date = _week_date(week)
        if date is None:
            continue
        valid.append((max(0, int(total)), date))
    kept = valid[-limit:] if limit > 0 else []
    return [
        ActivityPoint(week=f"Week {i}", commits=commits, date=date)
        for i, (commits, date) in enumerate(kept, 1)
    ]


def issue_statistics(issues: Iterable[IssueRecord]) -> IssueStats:
    open_count = 0
    closed_count = 0
    for issue in issues:
        state = getattr(issue, "state", None)
        if not isinstance(state, str):
            continue
        if state == "open":
            open_count += 1
        elif state == "closed":
            closed_count += 1
    return IssueStats(
        open=open_count, closed=closed_count, total=open_count + closed_count
    )


def top_labels(issues: Iterable[IssueRecord], limit: int = TOP_LABELS) -> list[LabelCount]:
    """Most frequent label names across all issues; ties keep first-seen order."""
    counts: Counter[str] = Counter()
    for issue in issues:
        for label in getattr(issue, "labels", ()) or ():
            name = getattr(label, "name", None)
            if isinstance(name, str) and name:
                counts[name] += 1
    ranked = sorted(counts.items(), key=lambda x: x[1], reverse=True)
    return [LabelCount(name=name, count=count) for name, count in ranked[:limit]]


def top_contributors(
    contributors: Iterable[Contributor], limit: int = TOP_CONTRIBUTORS
) -> list[Contributor]:
    """The first ``limit`` contributors in upstream rank order."""
    return list(contributors)[:limit]


def recent_commits(
    commits: Iterable[CommitRecord], limit: int = RECENT_COMMITS
) -> list[CommitRecord]:
    return list(commits)[:limit]


def derive(snapshot: AnalyticsSnapshot) -> DerivedMetrics:
    """Compute every derived metric of a snapshot in one pass."""
    return DerivedMetrics(
        languages=tuple(language_distribution(snapshot.languages)),
        activity=tuple(commit_activity_window(snapshot.commit_activity)),
        issue_stats=issue_statistics(snapshot.issues),
        top_labels=tuple(top_labels(snapshot.issues)),
        top_contributors=tuple(top_contributors(snapshot.contributors)),
        recent_commits=tuple(recent_commits(snapshot.commits)),
    )
