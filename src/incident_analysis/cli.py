from __future__ import annotations

import asyncio
import base64
import json
from pathlib import Path

import typer

from incident_analysis.config import DEFAULT_CONFIG_PATH, AppConfig, load_config
from incident_analysis.dispatch import build_dispatcher
from incident_analysis.errors import ConfigurationError, ExecutionFailedError, UnknownOperationError
from incident_analysis.logging import configure_logging
from incident_analysis.server import serve_stdio
from incident_analysis.viz.renderer import NullChartRenderer

app = typer.Typer(no_args_is_help=True, add_completion=False)

CONFIG_OPTION_HELP = (
    "YAML config with backend, analysis, chart and report settings "
    f"(defaults to {DEFAULT_CONFIG_PATH} when that file exists)."
)


def _resolve_config_path(config_path: Path | None) -> Path | None:
    if config_path is None and DEFAULT_CONFIG_PATH.is_file():
        return DEFAULT_CONFIG_PATH
    return config_path


def _load_app_config(config_path: Path | None) -> AppConfig:
    return load_config(_resolve_config_path(config_path))


def _require_config(config_path: Path | None) -> AppConfig:
    try:
        return _load_app_config(config_path)
    except ConfigurationError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc


def _parse_params(params: str) -> dict:
    try:
        arguments = json.loads(params)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"--params must be valid JSON: {exc}") from exc
    if not isinstance(arguments, dict):
        raise typer.BadParameter("--params must be a JSON object")
    return arguments


@app.command()
def serve(
    config: Path | None = typer.Option(
        None, exists=True, readable=True, resolve_path=True, help=CONFIG_OPTION_HELP
    ),
    log_level: str = typer.Option("INFO", help="Logging level (logs go to stderr)."),
) -> None:
    """Serve the incident analysis tools over MCP stdio."""
    configure_logging(log_level)
    cfg = _require_config(config)
    dispatcher = build_dispatcher(cfg)
    asyncio.run(serve_stdio(dispatcher))


@app.command()
def tools(
    config: Path | None = typer.Option(
        None, exists=True, readable=True, resolve_path=True, help=CONFIG_OPTION_HELP
    ),
) -> None:
    """List the registered analysis tools."""
    configure_logging()
    cfg = _require_config(config)
    dispatcher = build_dispatcher(cfg, charts=NullChartRenderer())
    for operation in dispatcher.operations:
        typer.echo(f"{operation.name}: {operation.description}")


@app.command()
def run(
    tool: str = typer.Argument(..., help="Tool name, for example get_incident_statistics."),
    params: str = typer.Option("{}", help="JSON object of tool arguments."),
    figures_dir: Path | None = typer.Option(
        None, resolve_path=True, help="Directory to write chart images to."
    ),
    config: Path | None = typer.Option(
        None, exists=True, readable=True, resolve_path=True, help=CONFIG_OPTION_HELP
    ),
) -> None:
    """Run one analysis tool against the backend and print its markdown."""
    configure_logging()
    arguments = _parse_params(params)
    cfg = _require_config(config)
    dispatcher = build_dispatcher(cfg)

    try:
        result = asyncio.run(dispatcher.call(tool, arguments))
    except (UnknownOperationError, ExecutionFailedError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(result.text)
    if figures_dir is None:
        return
    figures_dir.mkdir(parents=True, exist_ok=True)
    for index, image in enumerate(result.images, start=1):
        image_path = figures_dir / f"{tool}_{index}.png"
        image_path.write_bytes(base64.b64decode(image.data))
        typer.echo(f"Chart written to: {image_path}")
