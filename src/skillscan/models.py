"""Core data types for skillscan: findings, per-scanner results, audit report."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class AuditStatus(str, Enum):
    PASSED = "passed"
    WARNING = "warning"
    FAILED = "failed"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# ---------------------------------------------------------------------------
# Finding
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Finding:
    rule_id: str
    message: str
    severity: Severity
    scanner: str
    file: str | None = None               # relative to the scanned root
    line: int | None = None               # 1-based
    column: int | None = None
    snippet: str | None = None
    suppressed: bool = False
    suppression_reason: str | None = None
    remediation: str | None = None

    def __post_init__(self) -> None:
        if self.suppressed and not self.suppression_reason:
            raise ValueError(f"suppressed finding {self.rule_id} requires a reason")

    def key(self) -> tuple[str, str | None, int | None]:
        return (self.rule_id, self.file, self.line)

    def suppress(self, reason: str) -> Finding:
        """Return a suppressed copy; the original is left untouched."""
        return replace(self, suppressed=True, suppression_reason=reason)

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule_id": self.rule_id,
            "message": self.message,
            "severity": self.severity.value,
            "file": self.file,
            "line": self.line,
            "column": self.column,
            "scanner": self.scanner,
            "snippet": self.snippet,
            "suppressed": self.suppressed,
            "suppression_reason": self.suppression_reason,
            "remediation": self.remediation,
        }


# ---------------------------------------------------------------------------
# Scan result
# ---------------------------------------------------------------------------

@dataclass
class ScanResult:
    scanner_name: str
    findings: list[Finding] = field(default_factory=list)
    files_scanned: int = 0
    skipped: bool = False
    skip_reason: str | None = None
    error: str | None = None
    duration_ms: int = 0

    @classmethod
    def skipped_result(cls, name: str, reason: str) -> ScanResult:
        return cls(scanner_name=name, skipped=True, skip_reason=reason)

    @classmethod
    def failed(cls, name: str, error: str, *, duration_ms: int = 0, files_scanned: int = 0) -> ScanResult:
        return cls(
            scanner_name=name, error=error,
            duration_ms=duration_ms, files_scanned=files_scanned,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "scanner_name": self.scanner_name,
            "findings": [f.to_dict() for f in self.findings],
            "files_scanned": self.files_scanned,
            "skipped": self.skipped,
            "skip_reason": self.skip_reason,
            "error": self.error,
            "duration_ms": self.duration_ms,
        }


# ---------------------------------------------------------------------------
# Audit report
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AuditReport:
    skill: str
    status: AuditStatus
    risk_level: RiskLevel
    files_scanned: int
    scanner_results: tuple[ScanResult, ...]
    findings: tuple[Finding, ...]           # active
    suppressed: tuple[Finding, ...]
    audit_timestamp: str = field(default_factory=now_iso)
    version: str | None = None

    @property
    def passed(self) -> bool:
        return self.status == AuditStatus.PASSED

    def count_by_severity(self) -> tuple[int, int, int]:
        """Count active (errors, warnings, info) in a single pass."""
        errors = warnings = info = 0
        for f in self.findings:
            if f.severity == Severity.ERROR:
                errors += 1
            elif f.severity == Severity.WARNING:
                warnings += 1
            else:
                info += 1
        return errors, warnings, info

    def to_dict(self) -> dict[str, Any]:
        return {
            "skill": self.skill,
            "version": self.version,
            "audit_timestamp": self.audit_timestamp,
            "status": self.status.value,
            "risk_level": self.risk_level.value,
            "files_scanned": self.files_scanned,
            "scanner_results": [r.to_dict() for r in self.scanner_results],
            "findings": [f.to_dict() for f in self.findings],
            "suppressed": [f.to_dict() for f in self.suppressed],
            "passed": self.passed,
        }
