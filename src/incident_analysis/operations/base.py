from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, ClassVar, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from incident_analysis.analysis.interpret import response_body
from incident_analysis.config import AnalysisDefaultsConfig
from incident_analysis.contracts import OperationResult, TimeWindow
from incident_analysis.errors import InvalidRequestError
from incident_analysis.io.search_client import SearchClient
from incident_analysis.query.builder import SearchQuery, build_time_window, utc_now
from incident_analysis.viz.renderer import ChartRenderer, NullChartRenderer

LOGGER = logging.getLogger(__name__)

Clock = Callable[[], datetime]

DEFAULT_INDEX_PATTERN = "security-logs-*"


class ToolArguments(BaseModel):
    model_config = ConfigDict(extra="ignore")

    index_pattern: str = Field(
        min_length=1,
        description=(
            f"Index pattern to search (for example {DEFAULT_INDEX_PATTERN} or incident-*)."
        ),
        json_schema_extra={"examples": [DEFAULT_INDEX_PATTERN]},
    )
    days: int = Field(default=7, ge=1, description="Number of days to analyze.")

    def value_or(self, field_name: str, fallback: Any) -> Any:
        """The caller's value when explicitly supplied, else the configured fallback."""
        if field_name in self.model_fields_set:
            return getattr(self, field_name)
        return fallback


class Operation:
    name: ClassVar[str]
    description: ClassVar[str]
    arguments_model: ClassVar[type[ToolArguments]] = ToolArguments

    def schema_defaults(self) -> dict[str, Any]:
        return {}

    def input_schema(self) -> dict[str, Any]:
        schema = self.arguments_model.model_json_schema()
        properties = schema.get("properties", {})
        for field_name, default in self.schema_defaults().items():
            if field_name in properties:
                properties[field_name]["default"] = default
        return schema

    def parse_arguments(self, arguments: Mapping[str, Any] | None) -> ToolArguments:
        try:
            return self.arguments_model.model_validate(dict(arguments or {}))
        except ValidationError as exc:
            raise InvalidRequestError(f"Invalid arguments for {self.name}: {exc}") from exc

    async def run(self, arguments: ToolArguments) -> OperationResult:
        raise NotImplementedError

    async def execute(self, arguments: Mapping[str, Any] | None) -> OperationResult:
        return await self.run(self.parse_arguments(arguments))


class SearchOperation(Operation):
    """An operation backed by exactly one aggregation query."""

    def __init__(
        self,
        client: SearchClient,
        defaults: AnalysisDefaultsConfig | None = None,
        charts: ChartRenderer | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self.client = client
        self.defaults = defaults or AnalysisDefaultsConfig()
        self.charts = charts or NullChartRenderer()
        self.clock = clock

    def schema_defaults(self) -> dict[str, Any]:
        return {"days": self.defaults.days}

    def window_for(self, days: int) -> TimeWindow:
        return build_time_window(days, now=self.clock())

    async def search_body(self, query: SearchQuery) -> Mapping[str, Any]:
        LOGGER.debug("Running %s against %s", self.name, query["index"])
        return response_body(await self.client.search(query))
