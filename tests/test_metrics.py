"""Tests for the derived metrics module."""

from __future__ import annotations

from types import MappingProxyType

from repo_pulse.metrics import (
    DEFAULT_LANGUAGE_COLOR,
    commit_activity_window,
    derive,
    issue_statistics,
    language_distribution,
    recent_commits,
    top_contributors,
    top_labels,
)
from repo_pulse.models import (
    AnalyticsSnapshot,
    CommitActivityWeek,
    CommitRecord,
    Contributor,
    IssueLabel,
    IssueRecord,
    RepositorySummary,
)


def _issue(number: int, state: str, labels: tuple[str, ...] = ()) -> IssueRecord:
    return IssueRecord(
        id=number,
        number=number,
        title=f"Issue {number}",
        state=state,
        labels=tuple(IssueLabel(name=n) for n in labels),
    )


def _week(index: int, total) -> CommitActivityWeek:
    return CommitActivityWeek(week=1704067200 + index * 604800, total=total)


def test_language_distribution_sorted_and_rounded():
    result = language_distribution({"Shell": 1000, "Python": 2000})
    assert [l.language for l in result] == ["Python", "Shell"]
    assert [l.percentage for l in result] == [66.7, 33.3]
    assert result[0].color == "#3572A5"


def test_language_distribution_drops_zero_bytes():
    result = language_distribution({"Python": 100, "Empty": 0})
    assert [l.language for l in result] == ["Python"]
    assert result[0].percentage == 100.0


def test_language_distribution_keeps_top_six():
    languages = {f"Lang{i}": (i + 1) * 10 for i in range(8)}
    result = language_distribution(languages)
    assert len(result) == 6
    assert result[0].language == "Lang7"
    assert "Lang0" not in {l.language for l in result}
    assert "Lang1" not in {l.language for l in result}


def test_language_distribution_percentages_sum_to_100():
    languages = {"A": 333, "B": 333, "C": 334, "D": 17, "E": 1}
    total = sum(l.percentage for l in language_distribution(languages))
    assert abs(total - 100.0) <= 0.1


def test_language_distribution_empty():
    assert language_distribution({}) == []
    assert language_distribution(MappingProxyType({})) == []


def test_language_distribution_zero_total():
    assert language_distribution({"Python": 0, "Go": 0}) == []


def test_language_distribution_unknown_color():
    assert language_distribution({"Zig": 10})[0].color == DEFAULT_LANGUAGE_COLOR


def test_commit_activity_window_last_twelve():
    weeks = [_week(i, i) for i in range(20)]
    window = commit_activity_window(weeks)
    assert len(window) == 12
    assert window[0].week == "Week 1"
    assert window[0].commits == 8
    assert window[-1].week == "Week 12"
    assert window[-1].commits == 19


def test_commit_activity_window_clamps_negative():
    window = commit_activity_window([_week(0, -5), _week(1, 3)])
    assert [p.commits for p in window] == [0, 3]


def test_commit_activity_window_skips_malformed():
    weeks = [
        _week(0, 1),
        CommitActivityWeek(week="bad", total=2),
        CommitActivityWeek(week=1704067200, total=None),
        _week(3, 4),
    ]
    window = commit_activity_window(weeks)
    assert [(p.week, p.commits) for p in window] == [("Week 1", 1), ("Week 2", 4)]


def test_commit_activity_window_date():
    window = commit_activity_window([CommitActivityWeek(week=1704067200, total=1)])
    assert window[0].date == "2024-01-01"


def test_commit_activity_window_empty():
    assert commit_activity_window([]) == []


def test_issue_statistics():
    stats = issue_statistics([_issue(1, "open"), _issue(2, "closed"), _issue(3, "closed")])
    assert (stats.open, stats.closed, stats.total) == (1, 2, 3)


def test_issue_statistics_excludes_unknown_states():
    stats = issue_statistics([_issue(1, "open"), _issue(2, "merged"), _issue(3, "")])
    assert (stats.open, stats.closed, stats.total) == (1, 0, 1)


def test_issue_statistics_total_bounded_by_input():
    issues = [_issue(i, s) for i, s in enumerate(["open", "closed", "merged", "Open"])]
    stats = issue_statistics(issues)
    assert stats.open + stats.closed == stats.total
    assert stats.total <= len(issues)


def test_top_labels_counts_and_order():
    issues = [
        _issue(1, "open", ("bug", "ui")),
        _issue(2, "closed", ("bug",)),
        _issue(3, "open", ("docs", "ui", "Bug")),
    ]
    labels = top_labels(issues)
    assert [(l.name, l.count) for l in labels] == [
        ("bug", 2),
        ("ui", 2),
        ("docs", 1),
        ("Bug", 1),
    ]


def test_top_labels_keeps_five():
    issues = [_issue(1, "open", tuple(f"l{i}" for i in range(8)))]
    labels = top_labels(issues)
    assert [l.name for l in labels] == ["l0", "l1", "l2", "l3", "l4"]


def test_top_labels_empty():
    assert top_labels([_issue(1, "open")]) == []


def test_top_contributors_and_recent_commits_truncate():
    contributors = [Contributor(login=f"u{i}", id=i) for i in range(8)]
    commits = [CommitRecord(sha=str(i), message="m") for i in range(15)]
    assert [c.login for c in top_contributors(contributors)] == ["u0", "u1", "u2", "u3", "u4"]
    assert len(recent_commits(commits)) == 10


def test_derive_is_idempotent():
    snapshot = AnalyticsSnapshot(
        repository=RepositorySummary(name="w", full_name="a/w", html_url=""),
        issues=(_issue(1, "open", ("bug",)), _issue(2, "closed")),
        commit_activity=tuple(_week(i, i) for i in range(5)),
        languages=MappingProxyType({"Python": 10, "Go": 5}),
    )
    first = derive(snapshot)
    assert derive(snapshot) == first
    assert first.issue_stats.total == 2
    assert first.languages[0].language == "Python"
    assert len(first.activity) == 5
    assert first.top_labels[0].name == "bug"
