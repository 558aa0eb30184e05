"""SARIF 2.1.0 report for code-scanning dashboards.

Active and suppressed findings are both emitted; suppressed ones carry a
SARIF ``suppressions`` entry so viewers can hide them.  The rule table is
sorted by id and each result points into it with ``ruleIndex``.
"""

from __future__ import annotations

import json
from typing import Any

from skillscan import __version__
from skillscan.models import AuditReport, Finding, Severity

SARIF_VERSION = "2.1.0"
SARIF_SCHEMA = "https://json.schemastore.org/sarif-2.1.0.json"
TOOL_NAME = "skillscan"

_LEVELS = {
    Severity.ERROR: "error",
    Severity.WARNING: "warning",
    Severity.INFO: "note",
}


def _rule_descriptor(rule_id: str, first: Finding) -> dict[str, Any]:
    descriptor: dict[str, Any] = {
        "id": rule_id,
        "shortDescription": {"text": first.message},
    }
    if first.remediation:
        descriptor["help"] = {"text": first.remediation}
    return descriptor


def _result(f: Finding, rule_index: int) -> dict[str, Any]:
    result: dict[str, Any] = {
        "ruleId": f.rule_id,
        "ruleIndex": rule_index,
        "level": _LEVELS[f.severity],
        "message": {"text": f.message},
    }
    if f.file:
        physical: dict[str, Any] = {"artifactLocation": {"uri": f.file.replace("\\", "/")}}
        if f.line is not None:
            region: dict[str, Any] = {"startLine": f.line}
            if f.column is not None:
                region["startColumn"] = f.column
            physical["region"] = region
        result["locations"] = [{"physicalLocation": physical}]
    if f.suppressed:
        result["suppressions"] = [{
            "kind": "external",
            "justification": f.suppression_reason or "",
        }]
    return result


def sarif_payload(report: AuditReport) -> dict[str, Any]:
    all_findings = [*report.findings, *report.suppressed]

    first_by_rule: dict[str, Finding] = {}
    for f in all_findings:
        first_by_rule.setdefault(f.rule_id, f)
    rule_ids = sorted(first_by_rule)
    index = {rule_id: i for i, rule_id in enumerate(rule_ids)}

    return {
        "$schema": SARIF_SCHEMA,
        "version": SARIF_VERSION,
        "runs": [{
            "tool": {
                "driver": {
                    "name": TOOL_NAME,
                    "version": __version__,
                    "rules": [_rule_descriptor(r, first_by_rule[r]) for r in rule_ids],
                },
            },
            "results": [_result(f, index[f.rule_id]) for f in all_findings],
        }],
    }


def format_sarif(report: AuditReport) -> str:
    return json.dumps(sarif_payload(report), indent=2) + "\n"
