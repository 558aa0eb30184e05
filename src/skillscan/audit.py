"""Audit orchestrator.

Runs every registered detector against a skill directory on a bounded
thread pool, applies the directory's suppression policy, and builds the
final report.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from skillscan.adapters import GitleaksScanner, SemgrepScanner, ShellCheckScanner
from skillscan.config import Config
from skillscan.defaults import SKILL_FILENAME
from skillscan.models import AuditReport, ScanResult
from skillscan.ports import ScannerPort
from skillscan.report import build_report
from skillscan.scanners import (
    BashPatternsScanner,
    FrontmatterScanner,
    PackageInstallScanner,
    PromptScanner,
)
from skillscan.suppression import load_suppressions

log = logging.getLogger("skillscan.audit")

DISABLED_REASON = "disabled in config"


def all_scanners() -> list[ScannerPort]:
    """Every detector, in registration order."""
    return [
        PromptScanner(),
        BashPatternsScanner(),
        PackageInstallScanner(),
        FrontmatterScanner(),
        ShellCheckScanner(),
        GitleaksScanner(),
        SemgrepScanner(),
    ]


def not_found_reason(name: str) -> str:
    return f"{name} not found on PATH"


def _run_one(scanner: ScannerPort, path: Path, config: Config) -> ScanResult:
    name = scanner.scanner_name
    if not config.is_scanner_enabled(name):
        return ScanResult.skipped_result(name, DISABLED_REASON)
    if not scanner.is_available():
        return ScanResult.skipped_result(name, not_found_reason(name))

    start = time.monotonic()
    result = scanner.scan(path, config)
    log.debug(
        "%s finished: %d finding(s)", name, len(result.findings),
        extra={"scanner": name, "duration_ms": int((time.monotonic() - start) * 1000)},
    )
    return result


def run_scanners(
    path: str | Path,
    config: Config,
    scanners: Sequence[ScannerPort] | None = None,
) -> list[ScanResult]:
    """Run each scanner once, concurrently; results keep registration order.

    A scanner that raises only loses its own result: the exception is
    recorded in that scanner's ``ScanResult.error``.
    """
    if scanners is None:
        scanners = all_scanners()
    root = Path(path)
    if not scanners:
        return []

    workers = min(config.max_workers, len(scanners))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="skillscan") as pool:
        futures = [pool.submit(_run_one, s, root, config) for s in scanners]
        results: list[ScanResult] = []
        for scanner, future in zip(scanners, futures):
            try:
                results.append(future.result())
            except Exception as e:
                log.exception("Scanner %s crashed", scanner.scanner_name,
                              extra={"scanner": scanner.scanner_name})
                results.append(ScanResult.failed(
                    scanner.scanner_name, f"{type(e).__name__}: {e}",
                ))
    return results


def run_audit(
    path: str | Path,
    config: Config,
    scanners: Sequence[ScannerPort] | None = None,
) -> AuditReport:
    root = Path(path)
    skill = extract_skill_name(root)
    start = time.monotonic()

    results = run_scanners(root, config, scanners)
    suppressions = load_suppressions(root)
    report = build_report(skill, results, suppressions, config.strict.enabled)

    log.info(
        "Audit of %s: %s (%s risk)", skill, report.status.value, report.risk_level.value,
        extra={"skill": skill, "duration_ms": int((time.monotonic() - start) * 1000)},
    )
    return report


def active_scanner_count(config: Config, scanners: Sequence[ScannerPort] | None = None) -> tuple[int, int]:
    """(enabled, disabled) counts for progress output."""
    if scanners is None:
        scanners = all_scanners()
    enabled = sum(1 for s in scanners if config.is_scanner_enabled(s.scanner_name))
    return enabled, len(scanners) - enabled


def extract_skill_name(path: str | Path) -> str:
    """Last path component, or ``unknown`` for a root-like path."""
    p = Path(path)
    name = p.name or p.resolve().name
    return name or "unknown"


def find_skill_dirs(path: str | Path) -> list[Path]:
    """Immediate child directories containing a SKILL.md, sorted."""
    root = Path(path)
    try:
        children = list(root.iterdir())
    except OSError:
        return []
    return sorted(c for c in children if c.is_dir() and (c / SKILL_FILENAME).exists())


def is_collection(path: str | Path) -> bool:
    """A directory of skills rather than a single skill."""
    root = Path(path)
    return not (root / SKILL_FILENAME).exists() and bool(find_skill_dirs(root))
