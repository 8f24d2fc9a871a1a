from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from incident_analysis.contracts import ReportSection

REPORT_TEMPLATE = "incident_report.md.j2"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

RECOMMENDATIONS: tuple[str, ...] = (
    "Review additional security controls for the **most frequent threat types**",
    "Activate the incident response process immediately when **geographic anomalies** appear",
    "Monitor **trend changes** to respond before incidents escalate",
    "Run **regular security policy reviews** and apply updates",
)

NEXT_STEPS: tuple[str, ...] = (
    "Detailed analysis of each major threat type",
    "Configure automated response rules",
    "Build a real-time monitoring dashboard",
    "Schedule automatic generation of periodic reports",
)

FOOTER = "This report was generated automatically by the incident analysis MCP server."


def _template_env() -> Environment:
    templates_path = Path(__file__).resolve().parent / "templates"
    return Environment(
        loader=FileSystemLoader(str(templates_path)),
        autoescape=select_autoescape(enabled_extensions=("html", "xml")),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def compose_report(
    title: str,
    index_pattern: str,
    days: int,
    generated_at: datetime,
    sections: Sequence[ReportSection],
) -> str:
    """Stitch section bodies into one markdown report.

    Sections are separated by horizontal rules and followed by the fixed
    recommendations and next-step checklist. Section images are not carried over.
    """
    template = _template_env().get_template(REPORT_TEMPLATE)
    return template.render(
        title=title,
        generated_at=generated_at.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT),
        days=days,
        index_pattern=index_pattern,
        sections=list(sections),
        recommendations=RECOMMENDATIONS,
        next_steps=NEXT_STEPS,
        footer=FOOTER,
    )
