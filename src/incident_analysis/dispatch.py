from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

import httpx

from incident_analysis.config import AppConfig
from incident_analysis.contracts import OperationResult
from incident_analysis.errors import ExecutionFailedError, UnknownOperationError
from incident_analysis.io.search_client import SearchClient
from incident_analysis.operations.base import Clock, Operation
from incident_analysis.operations.registry import default_operations
from incident_analysis.query.builder import utc_now
from incident_analysis.viz.renderer import ChartRenderer, probe_chart_renderer

LOGGER = logging.getLogger(__name__)


class ToolDispatcher:
    def __init__(self, operations: Sequence[Operation]) -> None:
        self._operations: dict[str, Operation] = {}
        for operation in operations:
            if operation.name in self._operations:
                raise ValueError(f"Duplicate operation name: {operation.name}")
            self._operations[operation.name] = operation

    @property
    def operations(self) -> list[Operation]:
        return list(self._operations.values())

    @property
    def names(self) -> list[str]:
        return list(self._operations)

    def get(self, name: str) -> Operation:
        operation = self._operations.get(name)
        if operation is None:
            raise UnknownOperationError(name)
        return operation

    async def call(self, name: str, arguments: Mapping[str, Any] | None) -> OperationResult:
        operation = self.get(name)
        LOGGER.info("Running tool %s", name)
        try:
            return await operation.execute(arguments)
        except Exception as exc:
            LOGGER.warning("Tool %s failed: %s", name, exc)
            raise ExecutionFailedError(name, exc) from exc


def build_dispatcher(
    config: AppConfig,
    charts: ChartRenderer | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    clock: Clock = utc_now,
) -> ToolDispatcher:
    client = SearchClient.from_config(config.backend, transport=transport)
    renderer = charts if charts is not None else probe_chart_renderer(config.charts.enabled)
    return ToolDispatcher(default_operations(config, client, renderer, clock))
