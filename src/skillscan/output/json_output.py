"""Machine-readable JSON report."""

from __future__ import annotations

import json
from typing import Any

from skillscan.models import AuditReport


def report_payload(report: AuditReport) -> dict[str, Any]:
    errors, warnings, info = report.count_by_severity()
    return {
        "skill": report.skill,
        "version": report.version,
        "audit_timestamp": report.audit_timestamp,
        "status": report.status.value,
        "risk_level": report.risk_level.value,
        "passed": report.passed,
        "files_scanned": report.files_scanned,
        "summary": {
            "errors": errors,
            "warnings": warnings,
            "info": info,
            "suppressed": len(report.suppressed),
        },
        "scanners": [r.to_dict() | {"findings": len(r.findings)} for r in report.scanner_results],
        "findings": [f.to_dict() for f in report.findings],
        "suppressed": [f.to_dict() for f in report.suppressed],
    }


def format_json(report: AuditReport) -> str:
    return json.dumps(report_payload(report), indent=2) + "\n"
