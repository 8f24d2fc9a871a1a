from __future__ import annotations

from incident_analysis.config import AppConfig
from incident_analysis.io.search_client import SearchClient
from incident_analysis.operations.base import Clock, Operation
from incident_analysis.operations.geography import GeographicDistributionOperation
from incident_analysis.operations.report import IncidentReportOperation
from incident_analysis.operations.statistics import StatisticsOperation
from incident_analysis.operations.top_threats import TopThreatsOperation
from incident_analysis.operations.trend import TrendOperation
from incident_analysis.query.builder import utc_now
from incident_analysis.viz.renderer import ChartRenderer, NullChartRenderer


def default_operations(
    config: AppConfig,
    client: SearchClient,
    charts: ChartRenderer,
    clock: Clock = utc_now,
) -> list[Operation]:
    defaults = config.analysis
    statistics = StatisticsOperation(client, defaults, charts, clock)
    trend = TrendOperation(client, defaults, charts, clock)
    top_threats = TopThreatsOperation(client, defaults, charts, clock)
    geography = GeographicDistributionOperation(client, defaults, charts, clock)
    # The report is text only.
    tables_only = NullChartRenderer()
    report = IncidentReportOperation(
        statistics=StatisticsOperation(client, defaults, tables_only, clock),
        top_threats=TopThreatsOperation(client, defaults, tables_only, clock),
        geography=GeographicDistributionOperation(client, defaults, tables_only, clock),
        config=config.report,
        clock=clock,
    )
    return [statistics, trend, top_threats, report, geography]
