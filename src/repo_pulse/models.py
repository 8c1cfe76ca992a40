"""Data models for repo-pulse."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True)
class RepositorySummary:
    name: str
    full_name: str
    html_url: str
    description: str | None = None
    language: str | None = None
    stargazers_count: int = 0
    watchers_count: int = 0
    forks_count: int = 0
    open_issues_count: int = 0
    license_name: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    pushed_at: str | None = None
    size_kb: int = 0
    default_branch: str = "main"


@dataclass(frozen=True)
class Contributor:
    login: str
    id: int
    avatar_url: str = ""
    contributions: int = 0
    html_url: str = ""


@dataclass(frozen=True)
class CommitRecord:
    sha: str
    message: str
    html_url: str = ""
    author_name: str = ""
    author_email: str = ""
    author_date: str | None = None
    # Linked GitHub account; None when the author has no account
    author_login: str | None = None
    author_avatar_url: str | None = None

    @property
    def summary(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0]


@dataclass(frozen=True)
class IssueLabel:
    name: str
    color: str = ""


@dataclass(frozen=True)
class IssueRecord:
    id: int
    number: int
    title: str
    state: str
    created_at: str | None = None
    closed_at: str | None = None
    labels: tuple[IssueLabel, ...] = ()
    html_url: str = ""


@dataclass(frozen=True)
class CommitActivityWeek:
    week: int
    total: int
    days: tuple[int, ...] = (0, 0, 0, 0, 0, 0, 0)


@dataclass(frozen=True)
class AnalyticsSnapshot:
    """Immutable aggregate of everything fetched for one repository.

    Collections are tuples and ``languages`` is a read-only mapping, so a
    snapshot never changes after construction. Re-analysis builds a new one.
    """

    repository: RepositorySummary
    contributors: tuple[Contributor, ...] = ()
    # Most recent first, as returned upstream
    commits: tuple[CommitRecord, ...] = ()
    issues: tuple[IssueRecord, ...] = ()
    commit_activity: tuple[CommitActivityWeek, ...] = ()
    languages: Mapping[str, int] = field(
        default_factory=lambda: MappingProxyType({})
    )
    fetched_at: str | None = None


@dataclass(frozen=True)
class LanguageShare:
    language: str
    bytes: int
    percentage: float
    color: str


@dataclass(frozen=True)
class ActivityPoint:
    week: str
    commits: int
    date: str


@dataclass(frozen=True)
class IssueStats:
    open: int = 0
    closed: int = 0
    total: int = 0


@dataclass(frozen=True)
class LabelCount:
    name: str
    count: int


@dataclass(frozen=True)
class DerivedMetrics:
    """Presentation-ready projections of one snapshot."""

    languages: tuple[LanguageShare, ...] = ()
    activity: tuple[ActivityPoint, ...] = ()
    issue_stats: IssueStats = field(default_factory=IssueStats)
    top_labels: tuple[LabelCount, ...] = ()
    top_contributors: tuple[Contributor, ...] = ()
    recent_commits: tuple[CommitRecord, ...] = ()


@dataclass(frozen=True)
class HealthMetrics:
    activity: int
    maintenance: int
    community: int
    documentation: int
    stability: int


@dataclass(frozen=True)
class HealthReport:
    score: int
    grade: str
    color: str
    metrics: HealthMetrics
    recommendations: tuple[str, ...] = ()


@dataclass(frozen=True)
class ComparisonRow:
    metric: str
    value_a: int
    value_b: int
