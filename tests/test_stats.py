"""Tests for summary statistics and report rendering."""

import sys
from pathlib import Path

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from copilot_metrics.models import DailyMetric, LanguageTotal
from copilot_metrics.stats import (
    format_rate,
    format_thousands,
    generate_report,
    overall_acceptance_rate,
    summarize_series,
)


def _metric(day: str, suggested: int, accepted: int, users: int = 1) -> DailyMetric:
    rate = accepted * 100 / suggested if suggested else 0.0
    return DailyMetric(
        day=day,
        total_lines_suggested=suggested,
        total_lines_accepted=accepted,
        active_users=users,
        acceptance_rate=rate,
    )


def test_overall_acceptance_rate_empty_returns_none():
    """Verify overall rate is None when the series is empty."""
    assert overall_acceptance_rate([]) is None


def test_overall_acceptance_rate_zero_suggested_returns_zero():
    """Verify overall rate is 0 when no lines were suggested on any day."""
    assert overall_acceptance_rate([_metric("2024-01-01", 0, 0)]) == 0.0


def test_overall_acceptance_rate_weights_by_volume():
    """Verify overall rate divides summed totals rather than averaging daily rates."""
    series = [_metric("2024-01-01", 100, 50), _metric("2024-01-02", 300, 50)]

    assert overall_acceptance_rate(series) == pytest.approx(25.0)


def test_summarize_series_computes_totals_and_peak_users():
    """Verify summary totals, peak daily active users and day count."""
    series = [
        _metric("2024-01-01", 100, 40, users=3),
        _metric("2024-01-02", 50, 10, users=8),
        _metric("2024-01-03", 0, 0, users=5),
    ]

    summary = summarize_series(series)

    assert summary.total_lines_suggested == 150
    assert summary.total_lines_accepted == 50
    assert summary.peak_active_users == 8
    assert summary.days == 3
    assert summary.overall_acceptance_rate == pytest.approx(100 / 3)


def test_summarize_series_empty():
    """Verify an empty series summarizes to zeros with no overall rate."""
    summary = summarize_series([])

    assert summary.to_dict() == {
        "overall_acceptance_rate": None,
        "total_lines_suggested": 0,
        "total_lines_accepted": 0,
        "peak_active_users": 0,
        "days": 0,
    }


def test_format_helpers():
    """Verify rate and thousands formatting, including missing values."""
    assert format_rate(None) == "n/a"
    assert format_rate(0) == "0.0%"
    assert format_rate(33.333) == "33.3%"
    assert format_thousands(0) == "0.0K"
    assert format_thousands(12345) == "12.3K"


def test_generate_report_contains_expected_sections_and_values():
    """Verify report output includes header, summary, top languages and daily lines."""
    series = [_metric("2024-01-01", 1000, 250, users=4), _metric("2024-01-02", 1000, 750, users=6)]
    ranking = [
        LanguageTotal(name="python", value=600),
        LanguageTotal(name="go", value=300),
        LanguageTotal(name="rust", value=100),
    ]

    report = generate_report(org="acme", series=series, ranking=ranking, top=2)

    assert "Organization: acme" in report
    assert "Copilot Metrics Report" in report
    assert "Days: 2" in report
    assert "Overall Acceptance Rate: 50.0%" in report
    assert "Lines Suggested: 2000 (2.0K)" in report
    assert "Peak Daily Active Users: 6" in report
    assert "1. python: 600" in report
    assert "2. go: 300" in report
    assert "rust" not in report
    assert "2024-01-01: suggested=1000 accepted=250 rate=25.0% users=4" in report


def test_generate_report_empty_feed():
    """Verify an empty feed renders n/a placeholders instead of failing."""
    report = generate_report(org="acme", series=[], ranking=[])

    assert "Overall Acceptance Rate: n/a" in report
    assert report.count("   n/a") == 2
