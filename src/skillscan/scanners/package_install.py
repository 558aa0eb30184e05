"""Unsafe package install detector (``pkg/*``).

| ID                | What it checks                                  |
|-------------------|-------------------------------------------------|
| ``pkg/F1-npm``    | ``npm install`` without ``--registry``          |
| ``pkg/F1-bun``    | ``bun add`` without ``--registry``              |
| ``pkg/F1-pip``    | ``pip install`` without ``--index-url``         |
| ``pkg/F2-unpinned`` | ``@latest`` unpinned version                  |
| ``pkg/F3-registry`` | ``--registry`` URL host not in the allowlist  |

All rules are warnings.  Registry hosts go through the same matcher as the
outbound-network shell rule.
"""

from __future__ import annotations

import re
import time
from dataclasses import replace
from pathlib import Path

from skillscan.config import AllowlistConfig, Config
from skillscan.defaults import SHELL_EXTENSIONS
from skillscan.engine import LineScanner
from skillscan.files import collect_files
from skillscan.hosts import all_hosts_allowed
from skillscan.models import Finding, ScanResult, Severity
from skillscan.rules import Rule, RuleInfo, rule

SCANNER_NAME = "package_install"
REGISTRY_RULE_ID = "pkg/F3-registry"

# Accepts both `--registry <url>` and `--registry=<url>`.
_HAS_REGISTRY = re.compile(r"(?i)--registry[=\s]")
_HAS_INDEX_URL = re.compile(r"(?i)(--index-url\s|-i\s)")
_REGISTRY_URL = re.compile(r"(?i)--registry[=\s](https?://\S+)")

WARN = Severity.WARNING

RULES: tuple[Rule, ...] = (
    rule("pkg/F1-npm", WARN, r"(?i)\bnpm\s+(install|i|add)\b",
         "npm install without --registry: may pull from unexpected source",
         "Specify --registry explicitly: npm install --registry https://registry.npmjs.org"),
    rule("pkg/F1-bun", WARN, r"(?i)\bbun\s+(add|install)\b",
         "bun add without --registry: may pull from unexpected source",
         "Specify --registry explicitly"),
    rule("pkg/F1-pip", WARN, r"(?i)\bpip3?\s+install\b",
         "pip install without --index-url: may pull from unexpected source",
         "Specify --index-url explicitly: pip install --index-url https://pypi.org/simple/"),
    rule("pkg/F2-unpinned", WARN, r"@latest\b",
         "@latest install: unpinned, supply chain risk on future runs",
         "Pin to an exact version: @1.2.3"),
    rule(REGISTRY_RULE_ID, WARN, _REGISTRY_URL.pattern,
         "Registry URL not in allowlist",
         "Add registry to skillscan.toml [allowlist.registries] or use an approved registry"),
)

# rule id -> pattern whose presence on the line vetoes the rule
_SOURCE_FLAGS = {
    "pkg/F1-npm": _HAS_REGISTRY,
    "pkg/F1-bun": _HAS_REGISTRY,
    "pkg/F1-pip": _HAS_INDEX_URL,
}


def registry_url(line: str) -> str | None:
    m = _REGISTRY_URL.search(line)
    return m.group(1) if m else None


def install_filter(allowlist: AllowlistConfig):
    registries = allowlist.registries

    def keep(r: Rule, line: str) -> bool:
        flag = _SOURCE_FLAGS.get(r.id)
        if flag is not None:
            return flag.search(line) is None
        if r.id == REGISTRY_RULE_ID:
            # Only the URL's host counts, so a path such as
            # https://evil.com/registry.npmjs.org/ cannot pass.
            return not all_hosts_allowed(registry_url(line) or "", registries)
        return True

    return keep


class _InstallLineScanner(LineScanner):
    def build_finding(self, r: Rule, line: str, line_num: int, file: str | None) -> Finding:
        finding = super().build_finding(r, line, line_num, file)
        if r.id == REGISTRY_RULE_ID:
            return replace(finding, message=f"Registry URL not in allowlist: {registry_url(line)}")
        return finding


class PackageInstallScanner:
    scanner_name = SCANNER_NAME
    description = "Package install audit: detects unregistered/unpinned installs"

    def is_available(self) -> bool:
        return True

    def scan(self, path: Path, config: Config) -> ScanResult:
        start = time.monotonic()
        files = collect_files(path, SHELL_EXTENSIONS)
        engine = _InstallLineScanner(
            SCANNER_NAME, RULES, line_filter=install_filter(config.allowlist),
        )
        findings = engine.scan_files(path, files)
        return ScanResult(
            scanner_name=SCANNER_NAME,
            findings=findings,
            files_scanned=len(files),
            duration_ms=int((time.monotonic() - start) * 1000),
        )

    def rules(self) -> list[RuleInfo]:
        return [r.info(SCANNER_NAME) for r in RULES]
