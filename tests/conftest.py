from __future__ import annotations

import base64
import json
from datetime import datetime, timezone
from typing import Any, Callable, Sequence

import httpx
import pytest

from incident_analysis.config import AppConfig, BackendConfig
from incident_analysis.contracts import ImageContent
from incident_analysis.viz.renderer import ChartRenderer

BACKEND_URL = "http://search-proxy:8080"
FIXED_NOW = datetime(2024, 1, 22, 12, 0, 0, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return FIXED_NOW


STATISTICS_PAYLOAD: dict[str, Any] = {
    "body": {
        "hits": {"total": {"value": 100, "relation": "eq"}},
        "aggregations": {
            "severity_stats": {
                "buckets": [
                    {"key": "high", "doc_count": 60},
                    {"key": "medium", "doc_count": 30},
                    {"key": "low", "doc_count": 10},
                ]
            },
            "daily_count": {
                "buckets": [
                    {
                        "key_as_string": "2024-01-15T00:00:00.000Z",
                        "key": 1705276800000,
                        "doc_count": 40,
                    },
                    {
                        "key_as_string": "2024-01-16T00:00:00.000Z",
                        "key": 1705363200000,
                        "doc_count": 60,
                    },
                ]
            },
            "total_incidents": {"value": 100},
        },
    }
}

TREND_PAYLOAD: dict[str, Any] = {
    "body": {
        "hits": {"total": {"value": 7, "relation": "eq"}},
        "aggregations": {
            "trend": {
                "buckets": [
                    {"key_as_string": "2024-01-15T00:00:00.000Z", "doc_count": 3},
                    {"key_as_string": "2024-01-15T01:00:00.000Z", "doc_count": 0},
                    {"key_as_string": "2024-01-15T02:00:00.000Z", "doc_count": 4},
                ]
            }
        },
    }
}

THREATS_PAYLOAD: dict[str, Any] = {
    "body": {
        "hits": {"total": {"value": 200, "relation": "eq"}},
        "aggregations": {
            "top_threats": {
                "buckets": [
                    {"key": "malware", "doc_count": 50},
                    {"key": "phishing", "doc_count": 30},
                    {"key": "brute_force", "doc_count": 20},
                ]
            }
        },
    }
}

COUNTRIES_PAYLOAD: dict[str, Any] = {
    "body": {
        "hits": {"total": {"value": 100, "relation": "eq"}},
        "aggregations": {
            "countries": {
                "buckets": [
                    {"key": "South Korea", "doc_count": 40},
                    {"key": "United States", "doc_count": 30},
                    {"key": "China", "doc_count": 10},
                ]
            }
        },
    }
}

PAYLOADS_BY_AGG: dict[str, dict[str, Any]] = {
    "severity_stats": STATISTICS_PAYLOAD,
    "trend": TREND_PAYLOAD,
    "top_threats": THREATS_PAYLOAD,
    "countries": COUNTRIES_PAYLOAD,
}


class FakeBackend:
    """Routes each query to a canned payload by its first aggregation name."""

    def __init__(
        self,
        payloads: dict[str, dict[str, Any]] | None = None,
        failing_aggs: Sequence[str] = (),
    ) -> None:
        self.payloads = dict(PAYLOADS_BY_AGG if payloads is None else payloads)
        self.failing_aggs = set(failing_aggs)
        self.queries: list[dict[str, Any]] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        query = json.loads(request.content)
        self.queries.append(query)
        agg_name = next(iter(query["body"]["aggs"]))
        if agg_name in self.failing_aggs:
            return httpx.Response(503, json={"error": "search unavailable"})
        return httpx.Response(200, json=self.payloads[agg_name])

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def agg_names(self) -> list[str]:
        return [next(iter(query["body"]["aggs"])) for query in self.queries]


class StubChartRenderer(ChartRenderer):
    available = True

    def __init__(self) -> None:
        self.calls: list[tuple[str, list[str], list[int], str]] = []

    def _image(self, kind: str, labels, counts, title) -> ImageContent:
        self.calls.append((kind, list(labels), list(counts), title))
        return ImageContent(data=base64.b64encode(f"{kind}-chart".encode()).decode("ascii"))

    def line_chart(self, labels, counts, title):
        return self._image("line", labels, counts, title)

    def pie_chart(self, labels, counts, title):
        return self._image("pie", labels, counts, title)

    def bar_chart(self, labels, counts, title):
        return self._image("bar", labels, counts, title)


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(backend=BackendConfig(base_url=BACKEND_URL))


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return fixed_clock
