"""Gitleaks secrets scanner adapter.

Wraps the ``gitleaks`` CLI, reads its JSON report from a temporary file, and
normalizes leaks into ``secrets/<RuleID>`` findings.  Every leak is an
error.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
import tempfile
import time
from pathlib import Path
from typing import Any

from skillscan.config import Config
from skillscan.defaults import STDERR_EXCERPT_LIMIT
from skillscan.files import relative_path, which_exists
from skillscan.models import Finding, ScanResult, Severity
from skillscan.rules import RuleInfo

log = logging.getLogger(__name__)

SCANNER_NAME = "secrets"
REMEDIATION = "Rotate the leaked secret immediately and remove it from the codebase"
REDACT_KEEP = 4


def redact(secret: str) -> str:
    """Keep the first few characters; mask the rest."""
    return secret[:REDACT_KEEP] + "*" * max(0, len(secret) - REDACT_KEEP)


class GitleaksScanner:
    scanner_name = SCANNER_NAME
    description = "Secret scanning via gitleaks (external tool)"

    def is_available(self) -> bool:
        return which_exists("gitleaks")

    def scan(self, path: Path, config: Config) -> ScanResult:
        start = time.monotonic()

        def elapsed() -> int:
            return int((time.monotonic() - start) * 1000)

        fd, report_path = tempfile.mkstemp(prefix="skillscan-gitleaks-", suffix=".json")
        os.close(fd)
        try:
            cmd = [
                "gitleaks", "detect",
                "--source", str(path),
                "--no-git",
                "--report-format", "json",
                "--report-path", report_path,
            ]
            try:
                result = subprocess.run(
                    cmd, capture_output=True, text=True, timeout=config.tool_timeout,
                )
            except subprocess.TimeoutExpired:
                log.error("gitleaks timed out scanning %s", path)
                return ScanResult.skipped_result(
                    SCANNER_NAME, f"gitleaks timed out after {config.tool_timeout:g}s",
                )
            except OSError as e:
                return ScanResult.failed(SCANNER_NAME, f"Failed to run gitleaks: {e}", duration_ms=elapsed())

            # exit 1 means leaks were found
            if result.returncode > 1:
                stderr = result.stderr.strip()[:STDERR_EXCERPT_LIMIT]
                return ScanResult.failed(
                    SCANNER_NAME, f"gitleaks error (exit {result.returncode}): {stderr}",
                    duration_ms=elapsed(),
                )

            try:
                with open(report_path, encoding="utf-8") as f:
                    raw = f.read()
            except OSError as e:
                return ScanResult.failed(SCANNER_NAME, f"Failed to read gitleaks report: {e}", duration_ms=elapsed())
        finally:
            try:
                os.unlink(report_path)
            except OSError:
                log.debug("Could not remove %s", report_path)

        try:
            findings = _parse_output(raw, path)
        except ValueError as e:
            log.warning("Failed to parse gitleaks JSON output")
            return ScanResult.failed(
                SCANNER_NAME, f"Failed to parse gitleaks report: {e}",
                duration_ms=elapsed(), files_scanned=1,
            )

        unique_files = {f.file for f in findings if f.file}
        return ScanResult(
            scanner_name=SCANNER_NAME,
            findings=findings,
            files_scanned=len(unique_files) or 1,
            duration_ms=elapsed(),
        )

    def rules(self) -> list[RuleInfo]:
        return [
            _rule("generic-api-key", "Detected a Generic API Key", REMEDIATION),
            _rule("aws-access-key", "Detected an AWS Access Key",
                  "Revoke the key immediately in AWS console"),
            _rule("github-pat", "Detected a GitHub Personal Access Token",
                  "Revoke the token in GitHub settings"),
            _rule("private-key", "Detected a Private Key (SSH, RSA, etc.)",
                  "Remove the key and rotate any credentials it protected"),
        ]


def _rule(id: str, message: str, remediation: str) -> RuleInfo:
    return RuleInfo(
        id=f"secrets/{id}", severity=Severity.ERROR, scanner=SCANNER_NAME,
        message=message, remediation=remediation,
    )


def _field(leak: dict[str, Any], name: str) -> Any:
    # gitleaks has used both PascalCase and camelCase keys across releases
    value = leak.get(name)
    if value is None:
        value = leak.get(name[0].lower() + name[1:])
    return value


def _parse_output(raw: str, root: str | Path) -> list[Finding]:
    """Normalize a gitleaks JSON report; raises ValueError on bad JSON."""
    if not raw.strip():
        return []
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("expected a JSON array")

    findings: list[Finding] = []
    for leak in data:
        if not isinstance(leak, dict):
            continue
        rule_id = _field(leak, "RuleID") or "unknown"
        file_path = _field(leak, "File")
        match = _field(leak, "Match")
        findings.append(Finding(
            rule_id=f"secrets/{rule_id}",
            message=_field(leak, "Description") or "Secret detected",
            severity=Severity.ERROR,
            scanner=SCANNER_NAME,
            file=relative_path(file_path, root) if file_path else None,
            line=_field(leak, "StartLine"),
            snippet=redact(match) if match else None,
            remediation=REMEDIATION,
        ))
    return findings
