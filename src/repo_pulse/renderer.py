"""Rich-based terminal renderer with JSON and HTML export."""

from __future__ import annotations

import io
import json
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import (
    AnalyticsSnapshot,
    ComparisonRow,
    DerivedMetrics,
    HealthReport,
)


def _format_number(n: int) -> str:
    return f"{n:,}"


def _format_compact(n: int | None) -> str:
    """Format 1500 as 1.5K and 2300000 as 2.3M."""
    if n is None:
        return "0"
    n = max(0, n)
    if n >= 1_000_000:
        return f"{n / 1_000_000:.1f}M"
    if n >= 1_000:
        return f"{n / 1_000:.1f}K"
    return str(n)


def _format_date(iso: str | None) -> str:
    """Format an ISO 8601 timestamp as e.g. 'Jan 05, 2024'."""
    if not iso:
        return "N/A"
    try:
        parsed = datetime.fromisoformat(iso.replace("Z", "+00:00"))
    except ValueError:
        return "Invalid date"
    return parsed.strftime("%b %d, %Y")


def _make_bar(percentage: float, width: int = 20) -> str:
    filled = round(percentage / 100 * width)
    return "█" * filled + "░" * (width - filled)


def _make_inline_bar(count: int, max_count: int, width: int = 15) -> str:
    if max_count == 0:
        return ""
    filled = round(count / max_count * width)
    return "█" * filled


def _write_to_file(content: str, output_file: str) -> None:
    """Write content to a file and print confirmation."""
    with open(output_file, "w", encoding="utf-8") as f:
        f.write(content)
    Console(stderr=True).print(f"Saved to {output_file}")


def _open_console(output_format: str, output_file: str | None) -> Console:
    if output_format == "html" or output_file:
        return Console(
            file=io.StringIO(), force_terminal=False, width=120, record=True
        )
    return Console()


def _finish(console: Console, output_format: str, output_file: str | None) -> None:
    if output_format == "html":
        content = console.export_html(inline_styles=True)
    elif output_file:
        content = console.file.getvalue()
    else:
        return
    if output_file:
        _write_to_file(content, output_file)
    else:
        print(content)


def _header(console: Console, snapshot: AnalyticsSnapshot, subtitle: str) -> None:
    repo = snapshot.repository
    lines = f"{repo.full_name}\n{subtitle}"
    if repo.description:
        lines += f"\n{repo.description}"
    console.print(Panel(Text(lines, justify="center"), style="bold cyan"))
    console.print()


def _print_summary(console: Console, snapshot: AnalyticsSnapshot) -> None:
    repo = snapshot.repository
    console.print("[bold]Summary[/bold]")
    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_column("label", style="dim")
    summary.add_column("value", style="bold")
    summary.add_row("Stars", _format_compact(repo.stargazers_count))
    summary.add_row("Forks", _format_compact(repo.forks_count))
    summary.add_row("Watchers", _format_compact(repo.watchers_count))
    summary.add_row("Open Issues", _format_compact(repo.open_issues_count))
    summary.add_row("Language", repo.language or "-")
    summary.add_row("License", repo.license_name or "-")
    summary.add_row("Default Branch", repo.default_branch)
    summary.add_row("Size", f"{_format_number(repo.size_kb)} KB")
    summary.add_row("Created", _format_date(repo.created_at))
    summary.add_row("Updated", _format_date(repo.updated_at))
    summary.add_row("Last Push", _format_date(repo.pushed_at))
    console.print(summary)
    console.print()


def render_overview(
    snapshot: AnalyticsSnapshot,
    derived: DerivedMetrics,
    output_format: str = "table",
    output_file: str | None = None,
) -> None:
    """Render the repository overview: summary, languages, activity, issues."""
    console = _open_console(output_format, output_file)
    _header(console, snapshot, "Repository Overview")
    _print_summary(console, snapshot)

    console.print("[bold]Language Distribution[/bold]")
    if derived.languages:
        lang_table = Table(show_header=True, header_style="bold")
        lang_table.add_column("Language")
        lang_table.add_column("Bar")
        lang_table.add_column("Percentage", justify="right")
        lang_table.add_column("Bytes", justify="right")
        for lang in derived.languages:
            lang_table.add_row(
                Text(lang.language, style=lang.color),
                _make_bar(lang.percentage),
                f"{lang.percentage}%",
                _format_number(lang.bytes),
            )
        console.print(lang_table)
    else:
        console.print("[dim]No language data available[/dim]")
    console.print()

    console.print("[bold]Commit Activity (Last 12 Weeks)[/bold]")
    if derived.activity:
        activity_table = Table(show_header=True, header_style="bold")
        activity_table.add_column("Week")
        activity_table.add_column("Date", no_wrap=True)
        activity_table.add_column("Commits", justify="right")
        activity_table.add_column("")
        max_commits = max(p.commits for p in derived.activity)
        for point in derived.activity:
            activity_table.add_row(
                point.week,
                point.date,
                _format_number(point.commits),
                _make_inline_bar(point.commits, max_commits),
            )
        console.print(activity_table)
    else:
        console.print("[dim]No commit activity data available[/dim]")
    console.print()

    console.print("[bold]Top Contributors[/bold]")
    if derived.top_contributors:
        contrib_table = Table(show_header=True, header_style="bold")
        contrib_table.add_column("#", justify="right")
        contrib_table.add_column("Username")
        contrib_table.add_column("Contributions", justify="right")
        for i, c in enumerate(derived.top_contributors, 1):
            contrib_table.add_row(str(i), Text(c.login), _format_compact(c.contributions))
        console.print(contrib_table)
    else:
        console.print("[dim]No contributors data available[/dim]")
    console.print()

    stats = derived.issue_stats
    console.print("[bold]Issue Statistics[/bold]")
    issue_table = Table(show_header=False, box=None, padding=(0, 2))
    issue_table.add_column("label", style="dim")
    issue_table.add_column("value", style="bold")
    issue_table.add_row("Closed", f"[green]{_format_number(stats.closed)}[/green]")
    issue_table.add_row("Open", f"[yellow]{_format_number(stats.open)}[/yellow]")
    issue_table.add_row("Total", _format_number(stats.total))
    console.print(issue_table)
    if derived.top_labels:
        label_table = Table(show_header=True, header_style="bold")
        label_table.add_column("Top Issue Labels")
        label_table.add_column("Count", justify="right")
        for label in derived.top_labels:
            label_table.add_row(Text(label.name), _format_number(label.count))
        console.print(label_table)
    console.print()

    console.print("[bold]Recent Commits[/bold]")
    if derived.recent_commits:
        commit_table = Table(show_header=True, header_style="bold")
        commit_table.add_column("SHA", no_wrap=True)
        commit_table.add_column("Message")
        commit_table.add_column("Author", no_wrap=True)
        commit_table.add_column("Date", no_wrap=True)
        for commit in derived.recent_commits:
            commit_table.add_row(
                commit.sha[:7],
                Text(commit.summary),
                commit.author_login or commit.author_name or "Unknown",
                _format_date(commit.author_date),
            )
        console.print(commit_table)
    else:
        console.print("[dim]No recent commits available[/dim]")
    console.print()

    _finish(console, output_format, output_file)


def render_health(
    snapshot: AnalyticsSnapshot,
    report: HealthReport,
    output_format: str = "table",
    output_file: str | None = None,
) -> None:
    """Render the health score, sub-scores and recommendations."""
    console = _open_console(output_format, output_file)
    _header(console, snapshot, "Health Report")

    console.print(
        Panel(
            Text(
                f"Health Score: {report.score}   Grade: {report.grade}",
                justify="center",
                style=f"bold {report.color}",
            )
        )
    )
    console.print()

    console.print("[bold]Health Metrics[/bold]")
    metric_table = Table(show_header=True, header_style="bold")
    metric_table.add_column("Metric")
    metric_table.add_column("Score", justify="right")
    metric_table.add_column("Bar")
    for name, value in asdict(report.metrics).items():
        metric_table.add_row(name.capitalize(), str(value), _make_bar(value))
    console.print(metric_table)
    console.print()

    if report.recommendations:
        console.print("[bold]Recommendations[/bold]")
        for advice in report.recommendations:
            console.print(f"  [yellow]![/yellow] {advice}")
    else:
        console.print("[bold green]No recommendations: all metrics look healthy.[/bold green]")
    console.print()

    _finish(console, output_format, output_file)


def render_comparison(
    snapshot_a: AnalyticsSnapshot,
    snapshot_b: AnalyticsSnapshot,
    rows: list[ComparisonRow],
    output_format: str = "table",
    output_file: str | None = None,
) -> None:
    """Render the side-by-side metric table of two repositories."""
    console = _open_console(output_format, output_file)
    name_a = snapshot_a.repository.full_name
    name_b = snapshot_b.repository.full_name
    console.print(
        Panel(Text(f"{name_a}  vs  {name_b}", justify="center"), style="bold cyan")
    )
    console.print()

    table = Table(show_header=True, header_style="bold")
    table.add_column("Metric")
    table.add_column(name_a, justify="right")
    table.add_column(name_b, justify="right")
    for row in rows:
        a, b = row.value_a, row.value_b
        cell_a = f"[bold]{_format_number(a)}[/bold]" if a > b else _format_number(a)
        cell_b = f"[bold]{_format_number(b)}[/bold]" if b > a else _format_number(b)
        table.add_row(row.metric, cell_a, cell_b)
    console.print(table)
    console.print()

    _finish(console, output_format, output_file)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def overview_payload(snapshot: AnalyticsSnapshot, derived: DerivedMetrics) -> dict[str, Any]:
    return {
        "repository": asdict(snapshot.repository),
        "languages": dict(snapshot.languages),
        "derived": asdict(derived),
        "fetchedAt": snapshot.fetched_at,
    }


def health_payload(
    snapshot: AnalyticsSnapshot, report: HealthReport, analyzed_at: str | None = None
) -> dict[str, Any]:
    return {
        "repository": snapshot.repository.full_name,
        "healthScore": report.score,
        "grade": report.grade,
        "metrics": asdict(report.metrics),
        "recommendations": list(report.recommendations),
        "analyzedAt": analyzed_at or _now_iso(),
    }


def _comparison_side(snapshot: AnalyticsSnapshot) -> dict[str, Any]:
    repo = snapshot.repository
    return {
        "name": repo.full_name,
        "stars": repo.stargazers_count,
        "forks": repo.forks_count,
        "contributors": len(snapshot.contributors),
        "openIssues": repo.open_issues_count,
    }


def comparison_payload(
    snapshot_a: AnalyticsSnapshot,
    snapshot_b: AnalyticsSnapshot,
    rows: list[ComparisonRow],
    compared_at: str | None = None,
) -> dict[str, Any]:
    return {
        "repository1": _comparison_side(snapshot_a),
        "repository2": _comparison_side(snapshot_b),
        "comparison": [
            {"metric": r.metric, "valueA": r.value_a, "valueB": r.value_b} for r in rows
        ],
        "comparedAt": compared_at or _now_iso(),
    }


def render_json(payload: dict[str, Any], output_file: str | None = None) -> None:
    """Render an export payload as JSON."""
    content = json.dumps(payload, indent=2, ensure_ascii=False)
    if output_file:
        _write_to_file(content, output_file)
    else:
        print(content)
