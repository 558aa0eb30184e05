"""Semgrep static analysis adapter.

Semgrep fetches its registry rules over the network, so a restricted
environment can make it hang.  A timeout therefore turns into a skipped
result rather than an error.
"""

from __future__ import annotations

import json
import logging
import subprocess
import time
from pathlib import Path
from typing import Any

from skillscan.config import Config
from skillscan.files import relative_path, which_exists
from skillscan.models import Finding, ScanResult, Severity
from skillscan.rules import RuleInfo

log = logging.getLogger(__name__)

SCANNER_NAME = "semgrep"

_SEVERITIES = {"ERROR": Severity.ERROR, "WARNING": Severity.WARNING}


class SemgrepScanner:
    scanner_name = SCANNER_NAME
    description = "Static analysis via semgrep (external tool)"

    def is_available(self) -> bool:
        return which_exists("semgrep")

    def scan(self, path: Path, config: Config) -> ScanResult:
        start = time.monotonic()

        def elapsed() -> int:
            return int((time.monotonic() - start) * 1000)

        cmd = ["semgrep", "scan", "--json", "--quiet", str(path)]
        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, timeout=config.semgrep_timeout,
            )
        except subprocess.TimeoutExpired:
            log.warning("semgrep timed out scanning %s", path)
            skipped = ScanResult.skipped_result(
                SCANNER_NAME,
                f"semgrep timed out after {config.semgrep_timeout:g}s, "
                "likely blocked by network restrictions",
            )
            skipped.duration_ms = elapsed()
            return skipped
        except OSError as e:
            return ScanResult.failed(SCANNER_NAME, f"Failed to run semgrep: {e}", duration_ms=elapsed())

        try:
            findings, files_scanned = _parse_output(result.stdout, path)
        except ValueError as e:
            log.warning("Failed to parse semgrep JSON output")
            return ScanResult.failed(SCANNER_NAME, f"Failed to parse semgrep JSON: {e}", duration_ms=elapsed())

        return ScanResult(
            scanner_name=SCANNER_NAME,
            findings=findings,
            files_scanned=files_scanned,
            duration_ms=elapsed(),
        )

    def rules(self) -> list[RuleInfo]:
        return [
            RuleInfo(
                id="semgrep/javascript.express.security.audit.xss.direct-response-write.direct-response-write",
                severity=Severity.ERROR, scanner=SCANNER_NAME,
                message="Direct response write (XSS vulnerability)",
                remediation="Escape output or use a templating engine",
            ),
        ]


def _parse_output(raw: str, root: str | Path) -> tuple[list[Finding], int]:
    """Return (findings, files scanned); raises ValueError on bad JSON.

    The file count comes from ``stats.total_files`` when semgrep reports it,
    otherwise from the distinct paths among the results.
    """
    if not raw.strip():
        return [], 0
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object")
    results = data.get("results")
    if not isinstance(results, list):
        return [], 0

    findings: list[Finding] = []
    for item in results:
        if not isinstance(item, dict):
            continue
        extra: dict[str, Any] = item.get("extra") or {}
        start: dict[str, Any] = item.get("start") or {}
        metadata: dict[str, Any] = extra.get("metadata") or {}
        lines = extra.get("lines")
        path = item.get("path")
        findings.append(Finding(
            rule_id=f"semgrep/{item.get('check_id') or 'unknown'}",
            message=extra.get("message") or "semgrep finding",
            severity=_SEVERITIES.get(str(extra.get("severity", "WARNING")).upper(), Severity.INFO),
            scanner=SCANNER_NAME,
            file=relative_path(path, root) if path else None,
            line=start.get("line"),
            column=start.get("col"),
            snippet=lines.strip() if isinstance(lines, str) else None,
            remediation=metadata.get("fix") or extra.get("fix"),
        ))

    total = (data.get("stats") or {}).get("total_files")
    if isinstance(total, int):
        return findings, total
    return findings, len({f.file for f in findings if f.file})
