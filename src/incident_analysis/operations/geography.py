from __future__ import annotations

from typing import Any

from pydantic import Field

from incident_analysis.analysis.interpret import interpret_top_terms
from incident_analysis.contracts import AnalysisRequest, OperationResult
from incident_analysis.operations.base import SearchOperation, ToolArguments
from incident_analysis.query.builder import COUNTRIES_AGG, top_terms_query
from incident_analysis.report.sections import geographic_markdown


class GeographicArguments(ToolArguments):
    geo_field: str = Field(
        default="geoip.country_name",
        min_length=1,
        description="Geographic field name (the .keyword sub-field is used for bucketing).",
    )


class GeographicDistributionOperation(SearchOperation):
    name = "analyze_geographic_distribution"
    description = (
        "Rank countries by incident count with their share of all matching incidents, "
        "with a bar chart of the leading countries when chart rendering is available."
    )
    arguments_model = GeographicArguments

    def schema_defaults(self) -> dict[str, Any]:
        return {**super().schema_defaults(), "geo_field": self.defaults.geo_field}

    async def run(self, arguments: GeographicArguments) -> OperationResult:  # type: ignore[override]
        request = AnalysisRequest(
            index_pattern=arguments.index_pattern,
            lookback_days=arguments.value_or("days", self.defaults.days),
            field_name=arguments.value_or("geo_field", self.defaults.geo_field),
            top_count=self.defaults.geo_top_count,
        )
        window = self.window_for(request.lookback_days)
        body = await self.search_body(top_terms_query(request, window, COUNTRIES_AGG))
        result = interpret_top_terms(body, COUNTRIES_AGG, request, window)

        leaders = result.rows[: self.defaults.geo_chart_top_count]
        chart = self.charts.bar_chart(
            [row.label for row in leaders],
            [row.count for row in leaders],
            f"Incidents by country (top {len(leaders)})",
        )
        return OperationResult.build(geographic_markdown(result), chart)
