"""Repository health scoring.

The overall score is a weighted sum of five sub-scores, each in [0, 100]:

- Activity: commits in the last 4 weeks of commit activity, 50 commits = 100.
- Maintenance: share of closed issues among the repository's open issue
  count plus the closed issues fetched; 50 when there is no issue data.
- Community: mean of contributor score (20 contributors = 100) and star
  score (1000 stars = 100).
- Documentation: 40 for a description, 30 for a license, and a flat 30 for
  a README, which is assumed present and never checked.
- Stability: mean of age score (one year = 50) and freshness score (loses
  50 points per 30 days since the last update); both 50 when the dates
  can't be parsed.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone

from .models import AnalyticsSnapshot, HealthMetrics, HealthReport

logger = logging.getLogger(__name__)

WEIGHTS = {
    "activity": 0.25,
    "maintenance": 0.25,
    "community": 0.20,
    "documentation": 0.15,
    "stability": 0.15,
}

# (minimum score, grade, color), checked top-down
GRADE_BANDS = (
    (90, "A+", "#10B981"),
    (80, "A", "#34D399"),
    (70, "B", "#FBBF24"),
    (60, "C", "#F59E0B"),
    (50, "D", "#F97316"),
)
FAILING_GRADE = ("F", "#EF4444")

# (sub-score, threshold, advice), in report order
RECOMMENDATIONS = (
    ("activity", 50, "Increase commit frequency to show active development"),
    ("maintenance", 60, "Address open issues to improve maintenance score"),
    ("community", 50, "Encourage more contributors and engagement"),
    (
        "documentation",
        70,
        "Improve documentation with detailed README and proper license",
    ),
    ("stability", 60, "Update repository more regularly to maintain stability"),
)

ACTIVITY_WEEKS = 4
ACTIVITY_TARGET = 50
CONTRIBUTOR_TARGET = 20
STAR_TARGET = 1000
NEUTRAL_SCORE = 50.0


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


def _round(value: float) -> int:
    """Round half up, so 94.5 becomes 95."""
    return int(math.floor(value + 0.5))


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def activity_score(snapshot: AnalyticsSnapshot) -> float:
    recent = 0
    for week in snapshot.commit_activity[-ACTIVITY_WEEKS:]:
        total = getattr(week, "total", None)
        if isinstance(total, (int, float)) and not isinstance(total, bool):
            recent += total
    return _clamp(min(100.0, recent / ACTIVITY_TARGET * 100))


def maintenance_score(snapshot: AnalyticsSnapshot) -> float:
    # Open count comes from the repository itself, closed from the fetched sample
    closed = sum(1 for issue in snapshot.issues if issue.state == "closed")
    total = snapshot.repository.open_issues_count + closed
    if total <= 0:
        return NEUTRAL_SCORE
    return _clamp(closed / total * 100)


def community_score(snapshot: AnalyticsSnapshot) -> float:
    contributor_score = min(100.0, len(snapshot.contributors) / CONTRIBUTOR_TARGET * 100)
    star_score = min(100.0, snapshot.repository.stargazers_count / STAR_TARGET * 100)
    return _clamp((contributor_score + star_score) / 2)


def documentation_score(snapshot: AnalyticsSnapshot) -> float:
    score = 0.0
    if snapshot.repository.description:
        score += 40
    if snapshot.repository.license_name:
        score += 30
    score += 30  # README
    return _clamp(score)


def stability_score(snapshot: AnalyticsSnapshot, now: datetime | None = None) -> float:
    now = now or datetime.now(timezone.utc)
    created = _parse_timestamp(snapshot.repository.created_at)
    updated = _parse_timestamp(snapshot.repository.updated_at)
    if created is None or updated is None:
        logger.debug("Unparseable repository dates, using neutral stability")
        age = freshness = NEUTRAL_SCORE
    else:
        age_days = (now - created).total_seconds() / 86400
        since_update_days = (now - updated).total_seconds() / 86400
        age = min(100.0, age_days / 365 * 50)
        freshness = max(0.0, 100 - since_update_days / 30 * 50)
    return _clamp((age + freshness) / 2)


def grade_for(score: int) -> tuple[str, str]:
    """Return (grade, color) for an overall score."""
    for minimum, grade, color in GRADE_BANDS:
        if score >= minimum:
            return grade, color
    return FAILING_GRADE


def score(snapshot: AnalyticsSnapshot, now: datetime | None = None) -> HealthReport:
    """Compute the health report of a snapshot. Never raises."""
    sub_scores = {
        "activity": activity_score(snapshot),
        "maintenance": maintenance_score(snapshot),
        "community": community_score(snapshot),
        "documentation": documentation_score(snapshot),
        "stability": stability_score(snapshot, now=now),
    }
    overall = _round(sum(sub_scores[name] * w for name, w in WEIGHTS.items()))
    overall = max(0, min(100, overall))
    grade, color = grade_for(overall)
    recommendations = tuple(
        advice
        for name, threshold, advice in RECOMMENDATIONS
        if sub_scores[name] < threshold
    )
    return HealthReport(
        score=overall,
        grade=grade,
        color=color,
        metrics=HealthMetrics(**{name: _round(v) for name, v in sub_scores.items()}),
        recommendations=recommendations,
    )
