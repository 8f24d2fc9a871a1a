from __future__ import annotations

import pytest

from incident_analysis.analysis.time import (
    epoch_millis_to_iso,
    format_bucket_labels,
    parse_bucket_timestamps,
)
from incident_analysis.errors import MalformedResponseError


def test_daily_and_hourly_label_formats() -> None:
    key = "2024-01-15T00:00:00.000Z"

    assert format_bucket_labels([key], "1d") == ["2024-01-15"]
    assert format_bucket_labels([key], "1h") == ["01-15 00:00"]


def test_labels_are_rendered_in_utc() -> None:
    labels = format_bucket_labels(["2024-01-15T09:00:00.000+09:00"], "1h")

    assert labels == ["01-15 00:00"]


def test_empty_keys_give_empty_labels() -> None:
    assert format_bucket_labels([], "1d") == []


def test_epoch_millis_converted_to_iso_utc() -> None:
    assert epoch_millis_to_iso(1705276800000) == "2024-01-15T00:00:00.000Z"


def test_unparseable_keys_are_reported() -> None:
    with pytest.raises(MalformedResponseError):
        parse_bucket_timestamps(["not-a-date"])
