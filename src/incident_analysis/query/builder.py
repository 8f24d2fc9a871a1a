"""Backend aggregation queries for the incident analyses.

Every query filters ``@timestamp`` to the lookback window, asks for aggregations
only (``size: 0``) and buckets term fields on their ``.keyword`` sub-field. The
suffix is appended unconditionally: callers pass the logical field name
(``severity``, ``geoip.country_name``) and never the keyword variant.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from incident_analysis.contracts import DAILY, AnalysisRequest, Interval, TimeWindow
from incident_analysis.errors import InvalidRequestError

TIMESTAMP_FIELD = "@timestamp"
KEYWORD_SUFFIX = ".keyword"

SEVERITY_AGG = "severity_stats"
DAILY_AGG = "daily_count"
TOTAL_AGG = "total_incidents"
TREND_AGG = "trend"
TOP_THREATS_AGG = "top_threats"
COUNTRIES_AGG = "countries"

SearchQuery = dict[str, Any]


def keyword_field(field_name: str) -> str:
    return f"{field_name}{KEYWORD_SUFFIX}"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def build_time_window(lookback_days: int, now: datetime | None = None) -> TimeWindow:
    if lookback_days < 1:
        raise InvalidRequestError(f"lookback_days must be >= 1, got {lookback_days}.")
    end = (now or utc_now()).astimezone(timezone.utc)
    return TimeWindow(start=end - timedelta(days=lookback_days), end=end)


def format_backend_timestamp(value: datetime) -> str:
    utc_value = value.astimezone(timezone.utc)
    return utc_value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _range_filter(window: TimeWindow) -> dict[str, Any]:
    return {
        "range": {
            TIMESTAMP_FIELD: {
                "gte": format_backend_timestamp(window.start),
                "lte": format_backend_timestamp(window.end),
            }
        }
    }


def _terms(field_name: str, size: int) -> dict[str, Any]:
    return {"terms": {"field": keyword_field(field_name), "size": int(size)}}


def _date_histogram(interval: Interval) -> dict[str, Any]:
    return {"date_histogram": {"field": TIMESTAMP_FIELD, "calendar_interval": interval}}


def _search_query(request: AnalysisRequest, window: TimeWindow, aggs: dict[str, Any]) -> SearchQuery:
    return {
        "index": request.index_pattern,
        "body": {
            "query": _range_filter(window),
            "aggs": aggs,
            "size": 0,
        },
    }


def _require_field(request: AnalysisRequest) -> str:
    if not request.field_name:
        raise InvalidRequestError("field_name is required for terms aggregations.")
    return request.field_name


def statistics_query(request: AnalysisRequest, window: TimeWindow) -> SearchQuery:
    return _search_query(
        request,
        window,
        {
            SEVERITY_AGG: _terms(_require_field(request), request.top_count),
            DAILY_AGG: _date_histogram(DAILY),
            TOTAL_AGG: {"value_count": {"field": TIMESTAMP_FIELD}},
        },
    )


def trend_query(request: AnalysisRequest, window: TimeWindow) -> SearchQuery:
    return _search_query(request, window, {TREND_AGG: _date_histogram(request.interval)})


def top_terms_query(
    request: AnalysisRequest,
    window: TimeWindow,
    aggregation_name: str,
) -> SearchQuery:
    return _search_query(
        request,
        window,
        {aggregation_name: _terms(_require_field(request), request.top_count)},
    )
