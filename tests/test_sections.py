from __future__ import annotations

from conftest import FIXED_NOW, STATISTICS_PAYLOAD, THREATS_PAYLOAD, TREND_PAYLOAD

from incident_analysis.analysis.interpret import (
    interpret_statistics,
    interpret_top_terms,
    interpret_trend,
    response_body,
)
from incident_analysis.contracts import HOURLY, AnalysisRequest
from incident_analysis.query.builder import TOP_THREATS_AGG, build_time_window
from incident_analysis.report.sections import (
    format_window,
    geographic_markdown,
    statistics_markdown,
    top_threats_markdown,
    trend_markdown,
)

WINDOW = build_time_window(7, now=FIXED_NOW)


def _statistics_text() -> str:
    request = AnalysisRequest(index_pattern="security-logs-*", field_name="severity")
    return statistics_markdown(interpret_statistics(response_body(STATISTICS_PAYLOAD), request, WINDOW))


def test_format_window_shows_utc_dates() -> None:
    assert format_window(WINDOW) == "2024-01-15 ~ 2024-01-22"


def test_statistics_markdown_layout() -> None:
    text = _statistics_text()
    lines = text.splitlines()

    assert lines[0] == "# Incident Statistics (last 7 days)"
    assert "- **Total incidents**: 100" in lines
    assert "- **Daily average**: 14" in lines
    assert "- **Analysis period**: 2024-01-15 ~ 2024-01-22" in lines
    assert lines.index("## Severity Distribution") < lines.index("## Daily Incident Counts")
    assert "| high     | 60    | 60.0% |" in lines
    assert "| 2024-01-16 | 60        |" in lines


def test_statistics_markdown_is_deterministic() -> None:
    assert _statistics_text() == _statistics_text()


def test_trend_markdown_names_cadence_and_total() -> None:
    request = AnalysisRequest(index_pattern="security-logs-*", interval=HOURLY)
    text = trend_markdown(interpret_trend(response_body(TREND_PAYLOAD), request, WINDOW))

    assert text.startswith("## Incident Trend (hourly, last 7 days)\n\n**7 incidents in total.**")
    assert "| 01-15 01:00 | 0         |" in text


def test_ranked_sections_use_their_own_headers() -> None:
    request = AnalysisRequest(index_pattern="security-logs-*", field_name="threat_type")
    result = interpret_top_terms(response_body(THREATS_PAYLOAD), TOP_THREATS_AGG, request, WINDOW)

    threats = top_threats_markdown(result)
    geo = geographic_markdown(result)

    assert threats.startswith("# Top Threat Types (last 7 days)")
    assert "| Rank | Threat Type | Count | Share |" in threats
    assert geo.startswith("# Geographic Distribution (last 7 days)")
    assert "| Rank | Country     | Incidents | Share |" in geo
