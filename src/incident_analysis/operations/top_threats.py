from __future__ import annotations

from typing import Any

from pydantic import Field

from incident_analysis.analysis.interpret import interpret_top_terms
from incident_analysis.contracts import AnalysisRequest, OperationResult
from incident_analysis.operations.base import SearchOperation, ToolArguments
from incident_analysis.query.builder import TOP_THREATS_AGG, top_terms_query
from incident_analysis.report.sections import top_threats_markdown


class TopThreatsArguments(ToolArguments):
    threat_field: str = Field(
        default="threat_type",
        min_length=1,
        description="Threat type field name (the .keyword sub-field is used for bucketing).",
    )
    top_count: int = Field(default=10, ge=1, description="How many top threat types to rank.")


class TopThreatsOperation(SearchOperation):
    name = "analyze_top_threats"
    description = (
        "Rank the most frequent threat types with their share of all matching "
        "incidents, with a pie chart when chart rendering is available."
    )
    arguments_model = TopThreatsArguments

    def schema_defaults(self) -> dict[str, Any]:
        return {
            **super().schema_defaults(),
            "threat_field": self.defaults.threat_field,
            "top_count": self.defaults.threat_top_count,
        }

    async def run(self, arguments: TopThreatsArguments) -> OperationResult:  # type: ignore[override]
        request = AnalysisRequest(
            index_pattern=arguments.index_pattern,
            lookback_days=arguments.value_or("days", self.defaults.days),
            field_name=arguments.value_or("threat_field", self.defaults.threat_field),
            top_count=arguments.value_or("top_count", self.defaults.threat_top_count),
        )
        window = self.window_for(request.lookback_days)
        body = await self.search_body(top_terms_query(request, window, TOP_THREATS_AGG))
        result = interpret_top_terms(body, TOP_THREATS_AGG, request, window)

        chart = self.charts.pie_chart(
            [row.label for row in result.rows],
            [row.count for row in result.rows],
            f"Top {result.top_count} threat types",
        )
        return OperationResult.build(top_threats_markdown(result), chart)
