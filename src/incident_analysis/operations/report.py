from __future__ import annotations

import logging
from typing import Any

from pydantic import Field

from incident_analysis.config import ReportConfig
from incident_analysis.contracts import AnalysisRequest, OperationResult, ReportSection
from incident_analysis.operations.base import Clock, Operation, ToolArguments
from incident_analysis.operations.geography import GeographicDistributionOperation
from incident_analysis.operations.statistics import StatisticsOperation
from incident_analysis.operations.top_threats import TopThreatsOperation
from incident_analysis.query.builder import utc_now
from incident_analysis.report.composer import compose_report

LOGGER = logging.getLogger(__name__)

DEFAULT_REPORT_TITLE = ReportConfig().default_title


class ReportArguments(ToolArguments):
    report_title: str = Field(
        default=DEFAULT_REPORT_TITLE,
        min_length=1,
        description="Title printed at the top of the report.",
    )


class IncidentReportOperation(Operation):
    """Statistics, top threats and geography over one window, composed into one report.

    Sub-analyses run one after another; the first failure fails the whole report.
    """

    name = "generate_incident_report"
    description = (
        "Generate a comprehensive incident analysis report combining statistics, "
        "top threat types and geographic distribution, with recommendations."
    )
    arguments_model = ReportArguments

    def __init__(
        self,
        statistics: StatisticsOperation,
        top_threats: TopThreatsOperation,
        geography: GeographicDistributionOperation,
        config: ReportConfig | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self.pipeline = (statistics, top_threats, geography)
        self.config = config or ReportConfig()
        self.clock = clock

    def schema_defaults(self) -> dict[str, Any]:
        return {
            "days": self.pipeline[0].defaults.days,
            "report_title": self.config.default_title,
        }

    async def run(self, arguments: ReportArguments) -> OperationResult:  # type: ignore[override]
        request = AnalysisRequest(
            index_pattern=arguments.index_pattern,
            lookback_days=arguments.value_or("days", self.pipeline[0].defaults.days),
        )
        title = arguments.value_or("report_title", self.config.default_title)

        sections: list[ReportSection] = []
        for operation in self.pipeline:
            sub_arguments = operation.parse_arguments(
                {"index_pattern": request.index_pattern, "days": request.lookback_days}
            )
            result = await operation.run(sub_arguments)
            sections.append(ReportSection(title=operation.name, body=result.text.strip()))
            LOGGER.debug("Report section %s complete", operation.name)

        report = compose_report(
            title=title,
            index_pattern=request.index_pattern,
            days=request.lookback_days,
            generated_at=self.clock(),
            sections=sections,
        )
        return OperationResult.build(report)
