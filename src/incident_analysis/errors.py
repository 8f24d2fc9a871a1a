from __future__ import annotations


class IncidentAnalysisError(Exception):
    """Base class for every error raised by incident_analysis."""


class ConfigurationError(IncidentAnalysisError):
    pass


class InvalidRequestError(IncidentAnalysisError, ValueError):
    pass


class TransportError(IncidentAnalysisError):
    pass


class MalformedResponseError(IncidentAnalysisError):
    pass


class UnknownOperationError(IncidentAnalysisError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class ExecutionFailedError(IncidentAnalysisError):
    def __init__(self, name: str, cause: BaseException) -> None:
        super().__init__(f"Tool execution failed: {cause}")
        self.name = name
        self.cause = cause
