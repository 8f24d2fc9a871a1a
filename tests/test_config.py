from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from incident_analysis.config import BACKEND_URL_ENV, load_config
from incident_analysis.errors import ConfigurationError

REPO_ROOT = Path(__file__).resolve().parents[1]


def test_load_config_reads_backend_url_from_env() -> None:
    cfg = load_config(environ={BACKEND_URL_ENV: "http://search-proxy:8080/"})

    assert cfg.backend.base_url == "http://search-proxy:8080/"
    assert cfg.backend.search_url == "http://search-proxy:8080/search"
    assert cfg.backend.timeout_seconds == 60.0
    assert cfg.analysis.days == 7
    assert cfg.analysis.geo_top_count == 20
    assert cfg.charts.enabled is True


def test_load_config_without_backend_url_explains_required_configuration() -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        load_config(environ={})

    message = str(excinfo.value)
    assert BACKEND_URL_ENV in message
    assert '"mcpServers"' in message


def test_load_config_blank_env_value_is_treated_as_missing() -> None:
    with pytest.raises(ConfigurationError):
        load_config(environ={BACKEND_URL_ENV: "   "})


def test_load_config_yaml_overrides_and_env_precedence(tmp_path: Path) -> None:
    config_data = {
        "backend": {"base_url": "http://from-file:9000", "timeout_seconds": 15},
        "analysis": {"threat_field": "attack.category", "geo_top_count": 5},
        "charts": {"enabled": False},
        "report": {"default_title": "Weekly SOC Report"},
    }
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.safe_dump(config_data), encoding="utf-8")

    from_file = load_config(config_path, environ={})
    assert from_file.backend.base_url == "http://from-file:9000"
    assert from_file.backend.timeout_seconds == 15
    assert from_file.analysis.threat_field == "attack.category"
    assert from_file.analysis.geo_top_count == 5
    assert from_file.charts.enabled is False
    assert from_file.report.default_title == "Weekly SOC Report"

    from_env = load_config(config_path, environ={BACKEND_URL_ENV: "http://from-env:8080"})
    assert from_env.backend.base_url == "http://from-env:8080"


def test_load_config_rejects_unknown_sections(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.safe_dump({"cache": {"ttl": 60}}), encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_config(config_path, environ={BACKEND_URL_ENV: "http://search-proxy:8080"})


def test_shipped_default_config_loads() -> None:
    cfg = load_config(
        REPO_ROOT / "configs" / "default.yaml",
        environ={BACKEND_URL_ENV: "http://search-proxy:8080"},
    )
    assert cfg.backend.search_path == "/search"
    assert cfg.analysis.severity_field == "severity"
    assert cfg.analysis.geo_field == "geoip.country_name"
