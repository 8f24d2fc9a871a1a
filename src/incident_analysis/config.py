from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from incident_analysis.errors import ConfigurationError

BACKEND_URL_ENV = "MCP_SERVER_URL"

CONFIGURATION_HELP = f"""\
{BACKEND_URL_ENV} environment variable is required.

Set the search proxy URL in your MCP client configuration, for example:
{{
  "mcpServers": {{
    "incident-analysis": {{
      "command": "incident-analysis-mcp",
      "args": ["serve"],
      "env": {{
        "{BACKEND_URL_ENV}": "http://your-server:your-port"
      }}
    }}
  }}
}}

Contact your system administrator for the correct {BACKEND_URL_ENV} value."""


class BackendConfig(BaseModel):
    base_url: str | None = None
    search_path: str = "/search"
    timeout_seconds: float = Field(default=60.0, gt=0)

    @property
    def search_url(self) -> str:
        base = (self.base_url or "").rstrip("/")
        return f"{base}/{self.search_path.lstrip('/')}"


class AnalysisDefaultsConfig(BaseModel):
    days: int = Field(default=7, ge=1)
    severity_field: str = "severity"
    severity_top_count: int = Field(default=10, ge=1)
    threat_field: str = "threat_type"
    threat_top_count: int = Field(default=10, ge=1)
    geo_field: str = "geoip.country_name"
    geo_top_count: int = Field(default=20, ge=1)
    geo_chart_top_count: int = Field(default=10, ge=1)


class ChartsConfig(BaseModel):
    enabled: bool = True


class ReportConfig(BaseModel):
    default_title: str = "Security Incident Analysis Report"


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    backend: BackendConfig = Field(default_factory=BackendConfig)
    analysis: AnalysisDefaultsConfig = Field(default_factory=AnalysisDefaultsConfig)
    charts: ChartsConfig = Field(default_factory=ChartsConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict:
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def load_config(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> AppConfig:
    env = os.environ if environ is None else environ
    data = _read_yaml(path) if path is not None else {}

    try:
        config = AppConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration in {path}: {exc}") from exc

    config.backend.base_url = (env.get(BACKEND_URL_ENV) or "").strip() or config.backend.base_url
    if not config.backend.base_url:
        raise ConfigurationError(CONFIGURATION_HELP)
    return config
