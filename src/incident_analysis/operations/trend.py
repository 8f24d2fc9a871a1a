from __future__ import annotations

from typing import Literal

from pydantic import Field

from incident_analysis.analysis.interpret import interpret_trend
from incident_analysis.contracts import DAILY, AnalysisRequest, OperationResult
from incident_analysis.operations.base import SearchOperation, ToolArguments
from incident_analysis.query.builder import trend_query
from incident_analysis.report.sections import trend_markdown


class TrendArguments(ToolArguments):
    interval: Literal["1h", "1d"] = Field(
        default=DAILY,
        description="Histogram interval: 1h (hourly) or 1d (daily).",
    )


class TrendOperation(SearchOperation):
    name = "create_incident_trend_chart"
    description = (
        "Build an hourly or daily incident trend table, with a line chart when "
        "chart rendering is available."
    )
    arguments_model = TrendArguments

    async def run(self, arguments: TrendArguments) -> OperationResult:  # type: ignore[override]
        request = AnalysisRequest(
            index_pattern=arguments.index_pattern,
            lookback_days=arguments.value_or("days", self.defaults.days),
            interval=arguments.interval,
        )
        window = self.window_for(request.lookback_days)
        body = await self.search_body(trend_query(request, window))
        result = interpret_trend(body, request, window)

        chart = self.charts.line_chart(
            [point.label for point in result.points],
            [point.count for point in result.points],
            f"Incident trend (last {result.lookback_days} days)",
        )
        return OperationResult.build(trend_markdown(result), chart)
