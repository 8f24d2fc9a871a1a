from __future__ import annotations

from datetime import timezone

from incident_analysis.contracts import (
    HOURLY,
    StatisticsResult,
    TimeWindow,
    TopTermsResult,
    TrendResult,
)
from incident_analysis.report.tables import render_markdown_table

DATE_FORMAT = "%Y-%m-%d"

SEVERITY_HEADER = ("Severity", "Count", "Share")
DAILY_HEADER = ("Date", "Incidents")
TREND_HEADER = ("Time", "Incidents")
THREAT_HEADER = ("Rank", "Threat Type", "Count", "Share")
GEO_HEADER = ("Rank", "Country", "Incidents", "Share")

INTERVAL_LABELS = {HOURLY: "hourly"}


def format_window(window: TimeWindow) -> str:
    start = window.start.astimezone(timezone.utc).strftime(DATE_FORMAT)
    end = window.end.astimezone(timezone.utc).strftime(DATE_FORMAT)
    return f"{start} ~ {end}"


def statistics_markdown(result: StatisticsResult) -> str:
    severity_table = render_markdown_table(
        SEVERITY_HEADER,
        [(row.label, str(row.count), row.percentage) for row in result.severity_rows],
    )
    daily_table = render_markdown_table(
        DAILY_HEADER,
        [(row.label, str(row.count)) for row in result.daily_rows],
    )
    return "\n".join(
        [
            f"# Incident Statistics (last {result.lookback_days} days)",
            "",
            "## Overview",
            f"- **Total incidents**: {result.total}",
            f"- **Daily average**: {result.daily_average}",
            f"- **Analysis period**: {format_window(result.window)}",
            "",
            "## Severity Distribution",
            severity_table,
            "",
            "## Daily Incident Counts",
            daily_table,
        ]
    )


def trend_markdown(result: TrendResult) -> str:
    table = render_markdown_table(
        TREND_HEADER,
        [(point.label, str(point.count)) for point in result.points],
    )
    cadence = INTERVAL_LABELS.get(result.interval, "daily")
    return (
        f"## Incident Trend ({cadence}, last {result.lookback_days} days)\n\n"
        f"**{result.total} incidents in total.**\n\n"
        f"{table}"
    )


def top_threats_markdown(result: TopTermsResult) -> str:
    table = render_markdown_table(
        THREAT_HEADER,
        [(str(row.rank), row.label, str(row.count), row.percentage) for row in result.rows],
    )
    return f"# Top Threat Types (last {result.lookback_days} days)\n\n{table}"


def geographic_markdown(result: TopTermsResult) -> str:
    table = render_markdown_table(
        GEO_HEADER,
        [(str(row.rank), row.label, str(row.count), row.percentage) for row in result.rows],
    )
    return f"# Geographic Distribution (last {result.lookback_days} days)\n\n{table}"
