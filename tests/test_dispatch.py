from __future__ import annotations

import asyncio

import pytest
from conftest import FakeBackend, fixed_clock

from incident_analysis.config import AppConfig
from incident_analysis.dispatch import ToolDispatcher, build_dispatcher
from incident_analysis.errors import (
    ExecutionFailedError,
    InvalidRequestError,
    MalformedResponseError,
    UnknownOperationError,
)
from incident_analysis.viz.renderer import NullChartRenderer


def _dispatcher(config: AppConfig, backend: FakeBackend) -> ToolDispatcher:
    return build_dispatcher(
        config, charts=NullChartRenderer(), transport=backend.transport, clock=fixed_clock
    )


def test_registered_tool_names(app_config: AppConfig, fake_backend: FakeBackend) -> None:
    assert _dispatcher(app_config, fake_backend).names == [
        "get_incident_statistics",
        "create_incident_trend_chart",
        "analyze_top_threats",
        "generate_incident_report",
        "analyze_geographic_distribution",
    ]


def test_unknown_tool_is_not_an_execution_failure(
    app_config: AppConfig, fake_backend: FakeBackend
) -> None:
    dispatcher = _dispatcher(app_config, fake_backend)

    with pytest.raises(UnknownOperationError, match="Unknown tool: delete_everything"):
        asyncio.run(dispatcher.call("delete_everything", {"index_pattern": "x"}))
    assert fake_backend.queries == []


@pytest.mark.parametrize(
    "arguments",
    [
        {},
        {"index_pattern": ""},
        {"index_pattern": "security-logs-*", "days": 0},
        {"index_pattern": "security-logs-*", "days": "a week"},
    ],
)
def test_invalid_arguments_fail_before_any_query(
    app_config: AppConfig, fake_backend: FakeBackend, arguments: dict
) -> None:
    dispatcher = _dispatcher(app_config, fake_backend)

    with pytest.raises(ExecutionFailedError) as excinfo:
        asyncio.run(dispatcher.call("get_incident_statistics", arguments))

    assert isinstance(excinfo.value.cause, InvalidRequestError)
    assert fake_backend.queries == []


def test_invalid_interval_is_rejected(app_config: AppConfig, fake_backend: FakeBackend) -> None:
    dispatcher = _dispatcher(app_config, fake_backend)

    with pytest.raises(ExecutionFailedError):
        asyncio.run(
            dispatcher.call(
                "create_incident_trend_chart", {"index_pattern": "security-logs-*", "interval": "1w"}
            )
        )
    assert fake_backend.queries == []


def test_malformed_backend_payload_is_an_execution_failure(app_config: AppConfig) -> None:
    backend = FakeBackend(payloads={"severity_stats": {"body": {"hits": {}}}})
    dispatcher = _dispatcher(app_config, backend)

    with pytest.raises(ExecutionFailedError) as excinfo:
        asyncio.run(dispatcher.call("get_incident_statistics", {"index_pattern": "security-logs-*"}))

    assert isinstance(excinfo.value.cause, MalformedResponseError)


def test_duplicate_operation_names_are_rejected(
    app_config: AppConfig, fake_backend: FakeBackend
) -> None:
    operations = _dispatcher(app_config, fake_backend).operations

    with pytest.raises(ValueError, match="Duplicate operation name"):
        ToolDispatcher([operations[0], operations[0]])
