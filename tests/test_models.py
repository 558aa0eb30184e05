"""Tests for skillscan.models: findings, scan results, reports."""

import pytest

from skillscan.models import (
    AuditReport,
    AuditStatus,
    Finding,
    RiskLevel,
    ScanResult,
    Severity,
)


def _finding(rule_id="bash/CAT-A1", severity=Severity.ERROR, **kw):
    return Finding(rule_id=rule_id, message="m", severity=severity, scanner="bash_patterns", **kw)


class TestFinding:
    def test_defaults(self):
        f = _finding()
        assert f.file is None
        assert f.line is None
        assert f.suppressed is False
        assert f.suppression_reason is None

    def test_suppressed_requires_reason(self):
        with pytest.raises(ValueError):
            _finding(suppressed=True)

    def test_suppress_returns_copy(self):
        f = _finding(file="a.sh", line=3)
        s = f.suppress("reviewed")
        assert s.suppressed is True
        assert s.suppression_reason == "reviewed"
        assert f.suppressed is False
        assert s.key() == f.key() == ("bash/CAT-A1", "a.sh", 3)

    def test_to_dict_uses_enum_values(self):
        d = _finding(severity=Severity.WARNING).to_dict()
        assert d["severity"] == "warning"
        assert d["scanner"] == "bash_patterns"
        assert set(d) >= {"rule_id", "file", "line", "column", "snippet", "remediation"}


class TestScanResult:
    def test_skipped_result(self):
        r = ScanResult.skipped_result("semgrep", "semgrep not found on PATH")
        assert r.skipped is True
        assert r.findings == []
        assert r.skip_reason == "semgrep not found on PATH"

    def test_failed_result(self):
        r = ScanResult.failed("secrets", "boom", files_scanned=1)
        assert r.error == "boom"
        assert r.skipped is False
        assert r.files_scanned == 1

    def test_to_dict(self):
        r = ScanResult("prompt", findings=[_finding()], files_scanned=2)
        d = r.to_dict()
        assert d["scanner_name"] == "prompt"
        assert len(d["findings"]) == 1
        assert d["files_scanned"] == 2


class TestAuditReport:
    def _report(self, findings, status=AuditStatus.FAILED):
        return AuditReport(
            skill="s", status=status, risk_level=RiskLevel.HIGH, files_scanned=1,
            scanner_results=(), findings=tuple(findings), suppressed=(),
        )

    def test_count_by_severity(self):
        report = self._report([
            _finding(), _finding(severity=Severity.WARNING),
            _finding(severity=Severity.WARNING), _finding(severity=Severity.INFO),
        ])
        assert report.count_by_severity() == (1, 2, 1)

    def test_passed_only_when_status_passed(self):
        assert self._report([], AuditStatus.PASSED).passed is True
        assert self._report([], AuditStatus.WARNING).passed is False
        assert self._report([], AuditStatus.FAILED).passed is False

    def test_timestamp_is_set(self):
        assert self._report([]).audit_timestamp
