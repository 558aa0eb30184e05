"""Human-readable terminal report."""

from __future__ import annotations

from rich.color import ColorSystem
from rich.style import Style

from skillscan.models import AuditReport, AuditStatus, ScanResult, Severity

_STYLES = {
    "bold": "bold",
    "dim": "dim",
    "underline": "underline",
    "red": "red",
    "green": "green",
    "yellow": "yellow",
    "blue": "blue",
    "white_on_blue": "white on blue",
}

SEPARATOR_WIDTH = 54


class Styler:
    """Wrap text in terminal styles; a no-op when color is off."""

    def __init__(self, color: bool) -> None:
        self.color = color

    def __call__(self, text: str, *styles: str) -> str:
        if not self.color or not styles:
            return text
        style = Style.parse(" ".join(_STYLES[s] for s in styles))
        return style.render(text, color_system=ColorSystem.STANDARD)


def _scanner_badge(result: ScanResult, s: Styler) -> str:
    if result.skipped:
        return s("SKIP", "dim")
    has_error = has_warning = False
    for f in result.findings:
        if f.severity == Severity.ERROR:
            has_error = True
        elif f.severity == Severity.WARNING:
            has_warning = True
    if result.error or has_error:
        return s("FAIL", "bold", "red")
    if has_warning:
        return s("WARN", "bold", "yellow")
    return s("PASS", "bold", "green")


def _scanner_detail(result: ScanResult, s: Styler) -> str:
    if result.skipped:
        return s(result.skip_reason or "skipped", "dim")
    detail = f"{len(result.findings)} findings, {result.files_scanned} files scanned"
    if result.error:
        detail += f"  {s('error: ' + result.error, 'red')}"
    return detail


def severity_label(severity: Severity, s: Styler) -> str:
    if severity == Severity.ERROR:
        return s("ERROR", "bold", "red")
    if severity == Severity.WARNING:
        return s(" WARN", "bold", "yellow")
    return s(" INFO", "blue")


def status_label(status: AuditStatus, s: Styler) -> str:
    if status == AuditStatus.PASSED:
        return s("PASSED", "bold", "green")
    if status == AuditStatus.WARNING:
        return s("WARNING", "bold", "yellow")
    return s("FAILED", "bold", "red")


def format_pretty(report: AuditReport, *, color: bool = False) -> str:
    s = Styler(color)
    out: list[str] = [""]
    out.append(s(f"  Skill Audit: {report.skill}  ", "bold", "white_on_blue"))
    out.append(f"  Timestamp: {report.audit_timestamp}")
    out.append(f"  Risk: {report.risk_level.value}")
    out.append("")

    out.append(s("Scanners", "bold", "underline"))
    for result in report.scanner_results:
        out.append(
            f"  [{_scanner_badge(result, s)}] {result.scanner_name:<20} {_scanner_detail(result, s)}"
        )
    out.append("")

    if report.findings:
        out.append(s("Findings", "bold", "underline"))
        for f in report.findings:
            out.append(f"  [{severity_label(f.severity, s)}] {s(f'{f.rule_id:<25}', 'dim')} {f.message}")
            if f.file:
                location = f"{f.file}:{f.line}" if f.line is not None else f.file
                out.append(f"         {s(location, 'dim')}")
            if f.snippet:
                out.append(f"         > {s(f.snippet, 'dim')}")
        out.append("")

    if report.suppressed:
        out.append(f"{s('Suppressed', 'bold', 'underline')} ({len(report.suppressed)} suppressed)")
        for f in report.suppressed:
            reason = f.suppression_reason or "no reason given"
            out.append(f"  [SKIP] {s(f'{f.rule_id:<25}', 'dim')} {s(reason, 'dim')}")
        out.append("")

    errors, warnings, info = report.count_by_severity()
    out.append(
        f"Result: {status_label(report.status, s)}  |  "
        f"{errors} errors, {warnings} warnings, {info} info, {len(report.suppressed)} suppressed"
    )
    return "\n".join(out) + "\n"


def format_collection_summary(
    collection: str, reports: list[AuditReport], *, color: bool = False,
) -> str:
    """Compact table printed after every skill in a collection was audited."""
    s = Styler(color)
    separator = s("-" * SEPARATOR_WIDTH, "dim")
    out: list[str] = ["", s(f"  Collection Summary: {collection}  ({len(reports)} skills)", "bold", "underline"), separator]

    counts = {AuditStatus.FAILED: 0, AuditStatus.WARNING: 0, AuditStatus.PASSED: 0}
    for r in reports:
        counts[r.status] += 1
        errors, warnings, info = r.count_by_severity()
        out.append(
            f"  {status_label(r.status, s):<7}  {r.skill:<22} {errors}e {warnings}w {info}i"
        )
    out.append(separator)
    out.append(
        f"  Total: {s(f'{counts[AuditStatus.FAILED]} failed', 'bold', 'red')}  "
        f"{s(f'{counts[AuditStatus.WARNING]} warnings', 'bold', 'yellow')}  "
        f"{s(f'{counts[AuditStatus.PASSED]} passed', 'bold', 'green')}"
    )
    return "\n".join(out) + "\n"
