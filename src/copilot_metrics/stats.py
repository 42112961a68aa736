"""Summary statistics and formatting helpers for Copilot metrics reporting.

This module provides utilities for:
- Computing the overall acceptance rate of a daily series.
- Aggregating headline figures (totals, peak active users, day count).
- Formatting rates and large line counts for display.
- Building a human-readable report for an organization.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from .aggregation import acceptance_rate
from .models import DailyMetric, LanguageTotal, SeriesSummary


def overall_acceptance_rate(series: Sequence[DailyMetric]) -> Optional[float]:
    """Calculate accepted/suggested lines across a whole daily series.

    Args:
        series: Daily metrics as produced by ``to_daily_series``.

    Returns:
        Percentage in ``[0, 100]``; ``0.0`` when nothing was suggested and
        ``None`` when the series is empty.
    """
    if not series:
        return None

    accepted = sum(metric.total_lines_accepted for metric in series)
    suggested = sum(metric.total_lines_suggested for metric in series)
    return acceptance_rate(accepted, suggested)


def summarize_series(series: Sequence[DailyMetric]) -> SeriesSummary:
    """Compute the headline dashboard figures for a daily series."""
    return SeriesSummary(
        overall_acceptance_rate=overall_acceptance_rate(series),
        total_lines_suggested=sum(metric.total_lines_suggested for metric in series),
        total_lines_accepted=sum(metric.total_lines_accepted for metric in series),
        peak_active_users=max((metric.active_users for metric in series), default=0),
        days=len(series),
    )


def format_rate(rate: Optional[float]) -> str:
    """Format a percentage with one decimal, or ``"n/a"`` when missing."""
    if rate is None:
        return "n/a"
    return f"{rate:.1f}%"


def format_thousands(value: int) -> str:
    """Format a line count in thousands with one decimal, e.g. ``12.3K``."""
    return f"{value / 1000:.1f}K"


def generate_report(
    org: str,
    series: Sequence[DailyMetric],
    ranking: Sequence[LanguageTotal],
    top: int = 5,
) -> str:
    """Generate a human-readable Copilot metrics report for an organization.

    The report includes:
    - Overall acceptance rate, suggested/accepted totals and peak active users
    - The ``top`` languages by accepted lines
    - One line per day of the series

    Args:
        org: Organization display name.
        series: Daily metrics sorted by day.
        ranking: Language totals sorted by accepted lines.
        top: Maximum number of languages to list.

    Returns:
        Formatted multi-line text report.
    """
    summary = summarize_series(series)

    lines: List[str] = [
        f"Organization: {org}",
        "Copilot Metrics Report",
        "",
        "1) Summary",
        f"   Days: {summary.days}",
        f"   Overall Acceptance Rate: {format_rate(summary.overall_acceptance_rate)}",
        f"   Lines Suggested: {summary.total_lines_suggested} ({format_thousands(summary.total_lines_suggested)})",
        f"   Lines Accepted: {summary.total_lines_accepted}",
        f"   Peak Daily Active Users: {summary.peak_active_users}",
        "",
        "2) Top Languages (Accepted Lines)",
    ]

    if not ranking:
        lines.append("   n/a")
    for position, language in enumerate(ranking[:top], start=1):
        lines.append(f"   {position}. {language.name}: {language.value}")

    lines.extend(["", "3) Daily Volume"])
    if not series:
        lines.append("   n/a")
    for metric in series:
        lines.append(
            f"   {metric.day}: suggested={metric.total_lines_suggested}"
            f" accepted={metric.total_lines_accepted}"
            f" rate={format_rate(metric.acceptance_rate)}"
            f" users={metric.active_users}"
        )

    return "\n".join(lines)
