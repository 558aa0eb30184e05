"""Report serializers: pretty text, JSON, SARIF."""

from __future__ import annotations

from enum import Enum

from skillscan.models import AuditReport
from skillscan.output.json_output import format_json
from skillscan.output.pretty import format_collection_summary, format_pretty
from skillscan.output.sarif import format_sarif


class OutputFormat(str, Enum):
    PRETTY = "pretty"
    JSON = "json"
    SARIF = "sarif"


def format_report(report: AuditReport, fmt: OutputFormat | str, *, color: bool = False) -> str:
    fmt = OutputFormat(fmt)
    if fmt == OutputFormat.JSON:
        return format_json(report)
    if fmt == OutputFormat.SARIF:
        return format_sarif(report)
    return format_pretty(report, color=color)


__all__ = [
    "OutputFormat",
    "format_collection_summary",
    "format_json",
    "format_pretty",
    "format_report",
    "format_sarif",
]
