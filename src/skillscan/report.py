"""Aggregation: partition findings, derive status and risk tier."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from skillscan.defaults import CRITICAL_RULE_PREFIXES
from skillscan.models import AuditReport, AuditStatus, Finding, RiskLevel, ScanResult, Severity
from skillscan.suppression import Suppression, find_suppression


def is_critical_rule(rule_id: str) -> bool:
    return rule_id.startswith(CRITICAL_RULE_PREFIXES)


def _scan_active(active: Iterable[Finding]) -> tuple[bool, bool, bool]:
    """One pass: (any error, any warning, any critical-family error)."""
    has_error = has_warning = has_critical = False
    for f in active:
        if f.severity == Severity.ERROR:
            has_error = True
            if is_critical_rule(f.rule_id):
                has_critical = True
                break  # nothing can raise the tier further
        elif f.severity == Severity.WARNING:
            has_warning = True
    return has_error, has_warning, has_critical


def compute_status(active: Iterable[Finding], strict: bool) -> AuditStatus:
    has_error, has_warning, _ = _scan_active(active)
    return _status(has_error, has_warning, strict)


def compute_risk_level(active: Iterable[Finding]) -> RiskLevel:
    has_error, has_warning, has_critical = _scan_active(active)
    return _risk(has_error, has_warning, has_critical)


def _status(has_error: bool, has_warning: bool, strict: bool) -> AuditStatus:
    if has_error or (has_warning and strict):
        return AuditStatus.FAILED
    if has_warning:
        return AuditStatus.WARNING
    return AuditStatus.PASSED


def _risk(has_error: bool, has_warning: bool, has_critical: bool) -> RiskLevel:
    if has_critical:
        return RiskLevel.CRITICAL
    if has_error:
        return RiskLevel.HIGH
    if has_warning:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def partition(
    results: Iterable[ScanResult], suppressions: Sequence[Suppression],
) -> tuple[list[Finding], list[Finding]]:
    """Split every finding into (active, suppressed).

    Findings already marked suppressed by their producer keep their own
    reason and bypass the policy.
    """
    active: list[Finding] = []
    suppressed: list[Finding] = []
    for result in results:
        for finding in result.findings:
            if finding.suppressed:
                suppressed.append(finding)
                continue
            s = find_suppression(finding, suppressions)
            if s is not None:
                suppressed.append(finding.suppress(s.reason))
            else:
                active.append(finding)
    return active, suppressed


def build_report(
    skill: str,
    results: Sequence[ScanResult],
    suppressions: Sequence[Suppression],
    strict: bool,
    *,
    version: str | None = None,
) -> AuditReport:
    active, suppressed = partition(results, suppressions)
    has_error, has_warning, has_critical = _scan_active(active)
    return AuditReport(
        skill=skill,
        status=_status(has_error, has_warning, strict),
        risk_level=_risk(has_error, has_warning, has_critical),
        files_scanned=sum(r.files_scanned for r in results),
        scanner_results=tuple(results),
        findings=tuple(active),
        suppressed=tuple(suppressed),
        version=version,
    )
