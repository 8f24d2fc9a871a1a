from __future__ import annotations

from typing import Any

from pydantic import Field

from incident_analysis.analysis.interpret import interpret_statistics
from incident_analysis.contracts import AnalysisRequest, OperationResult
from incident_analysis.operations.base import SearchOperation, ToolArguments
from incident_analysis.query.builder import statistics_query
from incident_analysis.report.sections import statistics_markdown


class StatisticsArguments(ToolArguments):
    severity_field: str = Field(
        default="severity",
        min_length=1,
        description="Severity field name (the .keyword sub-field is used for bucketing).",
    )


class StatisticsOperation(SearchOperation):
    name = "get_incident_statistics"
    description = (
        "Summarize incident counts for the lookback window as markdown tables: "
        "totals, daily average, severity distribution and daily counts."
    )
    arguments_model = StatisticsArguments

    def schema_defaults(self) -> dict[str, Any]:
        return {**super().schema_defaults(), "severity_field": self.defaults.severity_field}

    async def run(self, arguments: StatisticsArguments) -> OperationResult:  # type: ignore[override]
        request = AnalysisRequest(
            index_pattern=arguments.index_pattern,
            lookback_days=arguments.value_or("days", self.defaults.days),
            field_name=arguments.value_or("severity_field", self.defaults.severity_field),
            top_count=self.defaults.severity_top_count,
        )
        window = self.window_for(request.lookback_days)
        body = await self.search_body(statistics_query(request, window))
        result = interpret_statistics(body, request, window)
        return OperationResult.build(statistics_markdown(result))
