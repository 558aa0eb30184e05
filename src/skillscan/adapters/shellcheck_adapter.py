"""ShellCheck linter adapter.

Runs ``shellcheck -f json --severity=style`` once per ``.sh``/``.bash`` file
and normalizes each comment into a ``shellcheck/SC<code>`` finding.
"""

from __future__ import annotations

import json
import logging
import subprocess
import time
from pathlib import Path
from typing import Any

from skillscan.config import Config
from skillscan.defaults import SHELLCHECK_EXTENSIONS
from skillscan.files import collect_files, relative_path, which_exists
from skillscan.models import Finding, ScanResult, Severity
from skillscan.rules import RuleInfo

log = logging.getLogger(__name__)

SCANNER_NAME = "shellcheck"
WIKI_URL = "https://www.shellcheck.net/wiki/SC{code}"

_LEVELS = {"error": Severity.ERROR, "warning": Severity.WARNING}


def _wiki(code: int | str) -> str:
    return f"See {WIKI_URL.format(code=code)}"


class ShellCheckScanner:
    scanner_name = SCANNER_NAME
    description = "Shell script linting via shellcheck (external tool)"

    def is_available(self) -> bool:
        return which_exists("shellcheck")

    def scan(self, path: Path, config: Config) -> ScanResult:
        start = time.monotonic()
        files = collect_files(path, SHELLCHECK_EXTENSIONS)
        findings: list[Finding] = []
        error: str | None = None

        for file in files:
            cmd = ["shellcheck", "-f", "json", "--severity=style", str(file)]
            try:
                result = subprocess.run(
                    cmd, capture_output=True, text=True, timeout=config.tool_timeout,
                )
            except subprocess.TimeoutExpired:
                log.error("shellcheck timed out on %s", file)
                error = f"shellcheck timed out after {config.tool_timeout:g}s on {relative_path(file, path)}"
                continue
            except OSError as e:
                error = f"Failed to run shellcheck: {e}"
                continue

            try:
                findings.extend(_parse_output(result.stdout, relative_path(file, path)))
            except ValueError as e:
                log.warning("Failed to parse shellcheck JSON for %s", file)
                error = f"Failed to parse shellcheck JSON: {e}"

        return ScanResult(
            scanner_name=SCANNER_NAME,
            findings=findings,
            files_scanned=len(files),
            error=error,
            duration_ms=int((time.monotonic() - start) * 1000),
        )

    def rules(self) -> list[RuleInfo]:
        return [
            _rule("SC2086", Severity.INFO, "Double quote to prevent globbing and word splitting"),
            _rule("SC2046", Severity.WARNING, "Quote this to prevent word splitting"),
            _rule("SC2006", Severity.WARNING, "Use $(...) instead of legacy `...`"),
            _rule("SC2039", Severity.WARNING, "In POSIX sh, something is undefined"),
            _rule("SC2059", Severity.INFO, "Don't use variables in the printf format string"),
        ]


def _rule(code: str, severity: Severity, message: str) -> RuleInfo:
    return RuleInfo(
        id=f"shellcheck/{code}", severity=severity, scanner=SCANNER_NAME,
        message=message, remediation=_wiki(code.removeprefix("SC")),
    )


def _parse_output(raw: str, file: str) -> list[Finding]:
    """Normalize shellcheck's JSON array; raises ValueError on bad JSON."""
    if not raw.strip():
        return []
    items: Any = json.loads(raw)
    if not isinstance(items, list):
        raise ValueError("expected a JSON array")

    findings: list[Finding] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        code = item.get("code")
        if not isinstance(code, int) or code <= 0:
            continue
        findings.append(Finding(
            rule_id=f"shellcheck/SC{code}",
            message=item.get("message") or "shellcheck finding",
            severity=_LEVELS.get(item.get("level", "warning"), Severity.INFO),
            scanner=SCANNER_NAME,
            file=file,
            line=item.get("line"),
            column=item.get("column"),
            snippet=_fix_snippet(item),
            remediation=_wiki(code),
        ))
    return findings


def _fix_snippet(item: dict[str, Any]) -> str | None:
    fix = item.get("fix") or {}
    replacements = fix.get("replacements") or []
    if replacements and isinstance(replacements[0], dict):
        return replacements[0].get("replacement")
    return None
