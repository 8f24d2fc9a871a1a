from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal, Union

from incident_analysis.errors import InvalidRequestError

Interval = Literal["1h", "1d"]

HOURLY: Interval = "1h"
DAILY: Interval = "1d"
ALLOWED_INTERVALS = frozenset({HOURLY, DAILY})

PNG_MIME_TYPE = "image/png"


def _ensure_positive_int(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRequestError(f"{name} must be an integer, got {value!r}.")
    if value < 1:
        raise InvalidRequestError(f"{name} must be >= 1, got {value}.")


@dataclass(slots=True, frozen=True)
class AnalysisRequest:
    index_pattern: str
    lookback_days: int = 7
    field_name: str | None = None
    interval: Interval = DAILY
    top_count: int = 10

    def __post_init__(self) -> None:
        if not isinstance(self.index_pattern, str) or not self.index_pattern.strip():
            raise InvalidRequestError("index_pattern must be a non-empty string.")
        _ensure_positive_int("lookback_days", self.lookback_days)
        _ensure_positive_int("top_count", self.top_count)
        if self.interval not in ALLOWED_INTERVALS:
            raise InvalidRequestError(f"Unsupported interval: {self.interval!r}.")
        if self.field_name is not None and not self.field_name.strip():
            raise InvalidRequestError("field_name must be non-empty when provided.")


@dataclass(slots=True, frozen=True)
class TimeWindow:
    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("TimeWindow bounds must be timezone-aware.")
        if self.start > self.end:
            raise ValueError("TimeWindow start must not be after end.")


@dataclass(slots=True, frozen=True)
class Bucket:
    key: str
    count: int

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError(f"Bucket count must be >= 0, got {self.count}.")


@dataclass(slots=True, frozen=True)
class AggregationResult:
    buckets: tuple[Bucket, ...]
    total: int


@dataclass(slots=True, frozen=True)
class SeverityRow:
    label: str
    count: int
    percentage: str


@dataclass(slots=True, frozen=True)
class DailyRow:
    label: str
    count: int


@dataclass(slots=True, frozen=True)
class RankedRow:
    rank: int
    label: str
    count: int
    percentage: str


@dataclass(slots=True, frozen=True)
class StatisticsResult:
    severity_rows: tuple[SeverityRow, ...]
    daily_rows: tuple[DailyRow, ...]
    total: int
    daily_average: int
    window: TimeWindow
    lookback_days: int


@dataclass(slots=True, frozen=True)
class TrendResult:
    points: tuple[DailyRow, ...]
    total: int
    interval: Interval
    window: TimeWindow
    lookback_days: int


@dataclass(slots=True, frozen=True)
class TopTermsResult:
    rows: tuple[RankedRow, ...]
    total: int
    window: TimeWindow
    lookback_days: int
    top_count: int


@dataclass(slots=True, frozen=True)
class TextContent:
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "text", "text": self.text}


@dataclass(slots=True, frozen=True)
class ImageContent:
    data: str
    mime_type: str = PNG_MIME_TYPE

    def to_dict(self) -> dict[str, Any]:
        return {"type": "image", "data": self.data, "mimeType": self.mime_type}


ContentItem = Union[TextContent, ImageContent]


@dataclass(slots=True, frozen=True)
class ReportSection:
    title: str
    body: str
    image: ImageContent | None = None


@dataclass(slots=True, frozen=True)
class OperationResult:
    content: tuple[ContentItem, ...]

    def __post_init__(self) -> None:
        if not self.content or not isinstance(self.content[0], TextContent):
            raise ValueError("OperationResult must start with a text content item.")
        object.__setattr__(self, "content", tuple(self.content))

    @property
    def text(self) -> str:
        return self.content[0].text  # type: ignore[union-attr]

    @property
    def images(self) -> tuple[ImageContent, ...]:
        return tuple(item for item in self.content if isinstance(item, ImageContent))

    def to_dict(self) -> dict[str, Any]:
        return {"content": [item.to_dict() for item in self.content]}

    @classmethod
    def build(cls, text: str, *images: ImageContent | None) -> OperationResult:
        items: list[ContentItem] = [TextContent(text)]
        items.extend(image for image in images if image is not None)
        return cls(content=tuple(items))
