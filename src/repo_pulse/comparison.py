"""Side-by-side comparison of two snapshots."""

from __future__ import annotations

from .models import AnalyticsSnapshot, ComparisonRow

# Fixed row order; values are reported as-is, never normalized
COMPARED_METRICS = (
    ("Stars", lambda s: s.repository.stargazers_count),
    ("Forks", lambda s: s.repository.forks_count),
    ("Contributors", lambda s: len(s.contributors)),
    ("Open Issues", lambda s: s.repository.open_issues_count),
    ("Watchers", lambda s: s.repository.watchers_count),
)


def compare(a: AnalyticsSnapshot, b: AnalyticsSnapshot) -> list[ComparisonRow]:
    """Return one row per compared metric, in fixed order.

    Contributors is the length of the fetched contributor sample, not an
    upstream total.
    """
    return [
        ComparisonRow(metric=name, value_a=value(a), value_b=value(b))
        for name, value in COMPARED_METRICS
    ]
