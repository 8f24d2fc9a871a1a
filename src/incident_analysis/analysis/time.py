from __future__ import annotations

from typing import Sequence

import pandas as pd

from incident_analysis.contracts import DAILY, HOURLY, Interval
from incident_analysis.errors import MalformedResponseError

LABEL_FORMAT_MAP: dict[str, str] = {
    DAILY: "%Y-%m-%d",
    HOURLY: "%m-%d %H:%M",
}


def parse_bucket_timestamps(keys: Sequence[str]) -> pd.Series:
    timestamps = pd.to_datetime(pd.Series(list(keys), dtype="object"), utc=True, errors="coerce")
    if timestamps.isna().any():
        bad = [key for key, stamp in zip(keys, timestamps) if pd.isna(stamp)]
        raise MalformedResponseError(f"Unparseable histogram bucket keys: {bad[:3]}")
    return timestamps


def epoch_millis_to_iso(value: int | float) -> str:
    stamp = pd.Timestamp(int(value), unit="ms", tz="UTC")
    return stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_bucket_labels(keys: Sequence[str], interval: Interval) -> list[str]:
    """Render ISO bucket keys as UTC labels for the given histogram interval."""
    if not keys:
        return []
    label_format = LABEL_FORMAT_MAP.get(interval, LABEL_FORMAT_MAP[DAILY])
    return parse_bucket_timestamps(keys).dt.strftime(label_format).tolist()
