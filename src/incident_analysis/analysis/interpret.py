from __future__ import annotations

from typing import Any, Mapping

from incident_analysis.analysis.time import epoch_millis_to_iso, format_bucket_labels
from incident_analysis.contracts import (
    DAILY,
    AggregationResult,
    AnalysisRequest,
    Bucket,
    DailyRow,
    Interval,
    RankedRow,
    SeverityRow,
    StatisticsResult,
    TimeWindow,
    TopTermsResult,
    TrendResult,
)
from incident_analysis.errors import MalformedResponseError
from incident_analysis.proportion_stats import percentage_labels, round_half_up
from incident_analysis.query.builder import DAILY_AGG, SEVERITY_AGG, TOTAL_AGG, TREND_AGG


def response_body(payload: Mapping[str, Any]) -> Mapping[str, Any]:
    body = payload.get("body") if isinstance(payload, Mapping) else None
    if not isinstance(body, Mapping):
        raise MalformedResponseError("Search response is missing 'body'.")
    return body


def _aggregations(body: Mapping[str, Any]) -> Mapping[str, Any]:
    aggregations = body.get("aggregations")
    if not isinstance(aggregations, Mapping):
        raise MalformedResponseError("Search response is missing 'body.aggregations'.")
    return aggregations


def _aggregation(aggregations: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    aggregation = aggregations.get(name)
    if not isinstance(aggregation, Mapping):
        raise MalformedResponseError(f"Search response is missing aggregation '{name}'.")
    return aggregation


def _bucket_key(raw: Mapping[str, Any], histogram: bool) -> str:
    if histogram:
        if raw.get("key_as_string"):
            return str(raw["key_as_string"])
        if isinstance(raw.get("key"), (int, float)):
            return epoch_millis_to_iso(raw["key"])
    if "key" not in raw:
        raise MalformedResponseError(f"Bucket without key: {dict(raw)!r}")
    return str(raw["key"])


def parse_buckets(aggregation: Mapping[str, Any], histogram: bool = False) -> tuple[Bucket, ...]:
    raw_buckets = aggregation.get("buckets")
    if not isinstance(raw_buckets, list):
        raise MalformedResponseError("Aggregation is missing its 'buckets' list.")
    return tuple(
        Bucket(key=_bucket_key(raw, histogram), count=int(raw.get("doc_count", 0)))
        for raw in raw_buckets
    )


def hits_total(body: Mapping[str, Any]) -> int:
    total = (body.get("hits") or {}).get("total", 0)
    if isinstance(total, Mapping):
        total = total.get("value", 0)
    return int(total or 0)


def _timeline_rows(buckets: tuple[Bucket, ...], interval: Interval) -> tuple[DailyRow, ...]:
    labels = format_bucket_labels([bucket.key for bucket in buckets], interval)
    return tuple(DailyRow(label=label, count=bucket.count) for label, bucket in zip(labels, buckets))


def interpret_statistics(
    body: Mapping[str, Any],
    request: AnalysisRequest,
    window: TimeWindow,
) -> StatisticsResult:
    aggregations = _aggregations(body)
    total = int(_aggregation(aggregations, TOTAL_AGG).get("value") or 0)
    severity = AggregationResult(
        buckets=parse_buckets(_aggregation(aggregations, SEVERITY_AGG)),
        total=total,
    )
    daily_buckets = parse_buckets(_aggregation(aggregations, DAILY_AGG), histogram=True)

    shares = percentage_labels([bucket.count for bucket in severity.buckets], severity.total)
    severity_rows = tuple(
        SeverityRow(label=bucket.key, count=bucket.count, percentage=share)
        for bucket, share in zip(severity.buckets, shares)
    )
    return StatisticsResult(
        severity_rows=severity_rows,
        daily_rows=_timeline_rows(daily_buckets, DAILY),
        total=total,
        daily_average=round_half_up(total / request.lookback_days),
        window=window,
        lookback_days=request.lookback_days,
    )


def interpret_trend(
    body: Mapping[str, Any],
    request: AnalysisRequest,
    window: TimeWindow,
) -> TrendResult:
    buckets = parse_buckets(_aggregation(_aggregations(body), TREND_AGG), histogram=True)
    result = AggregationResult(buckets=buckets, total=sum(bucket.count for bucket in buckets))
    return TrendResult(
        points=_timeline_rows(result.buckets, request.interval),
        total=result.total,
        interval=request.interval,
        window=window,
        lookback_days=request.lookback_days,
    )


def interpret_top_terms(
    body: Mapping[str, Any],
    aggregation_name: str,
    request: AnalysisRequest,
    window: TimeWindow,
) -> TopTermsResult:
    """Rank terms buckets in backend order.

    Percentages are taken against the overall document-match total, so the shown
    rows can add up to less than 100% when the long tail is truncated.
    """
    result = AggregationResult(
        buckets=parse_buckets(_aggregation(_aggregations(body), aggregation_name)),
        total=hits_total(body),
    )
    shares = percentage_labels([bucket.count for bucket in result.buckets], result.total)
    rows = tuple(
        RankedRow(rank=index, label=bucket.key, count=bucket.count, percentage=share)
        for index, (bucket, share) in enumerate(zip(result.buckets, shares), start=1)
    )
    return TopTermsResult(
        rows=rows,
        total=result.total,
        window=window,
        lookback_days=request.lookback_days,
        top_count=request.top_count,
    )
