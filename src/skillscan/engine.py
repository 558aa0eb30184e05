"""Line scanning engine shared by every built-in pattern detector.

For each line of each file the engine applies two skips before any pattern
is tried:

* comment lines (``#`` but not a ``#!`` interpreter line), when the detector
  honors shell comments;
* lines ending in a trailing ``# audit:ignore`` / ``# skillscan:ignore``
  marker, when the detector honors inline suppression.  The marker must be
  the end of the line; one embedded in a string earlier on the line does not
  count.

Every rule is then tried against the line; each match produces its own
finding, optionally vetoed by a per-detector ``line_filter``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

from skillscan.defaults import (
    INLINE_MARKERS,
    SNIPPET_CUT_CHARS,
    SNIPPET_ELLIPSIS,
    SNIPPET_MAX_CHARS,
)
from skillscan.files import relative_path
from skillscan.models import Finding, Severity
from skillscan.rules import Rule

log = logging.getLogger("skillscan.engine")

_INLINE_SUPPRESS = re.compile(
    r"\s*#\s*(?:" + "|".join(re.escape(m) for m in INLINE_MARKERS) + r"):ignore\s*$",
    re.IGNORECASE,
)

# (rule, line) -> keep the match?
LineFilter = Callable[[Rule, str], bool]


def is_comment_line(line: str) -> bool:
    trimmed = line.strip()
    return trimmed.startswith("#") and not trimmed.startswith("#!")


def is_suppressed_inline(line: str) -> bool:
    return _INLINE_SUPPRESS.search(line) is not None


def make_snippet(line: str) -> str:
    """Trimmed line, capped for display.

    ``str`` indexing is by code point, so the cut never splits a character.
    """
    trimmed = line.strip()
    if len(trimmed) > SNIPPET_MAX_CHARS:
        return trimmed[:SNIPPET_CUT_CHARS] + SNIPPET_ELLIPSIS
    return trimmed


def split_lines(text: str) -> list[str]:
    """Split on LF only (CRLF tolerated); form feeds and other separators
    recognized by ``str.splitlines`` would shift line numbers."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


def read_text(path: Path) -> str:
    """Read a UTF-8 file; raises OSError or UnicodeDecodeError."""
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


class LineScanner:
    """Apply a rule catalog line by line.

    Parameters
    ----------
    scanner_name:
        Id stamped on every finding.
    rules:
        Compiled catalog, shared read-only.
    honor_comments:
        Skip shell comment lines.
    honor_inline:
        Skip lines carrying a trailing inline suppression marker.
    line_filter:
        Optional veto called for each match; return False to drop it.
    read_error_rule:
        Rule id for unreadable files.  ``None`` skips them silently.
    """

    def __init__(
        self,
        scanner_name: str,
        rules: Sequence[Rule],
        *,
        honor_comments: bool = True,
        honor_inline: bool = True,
        line_filter: LineFilter | None = None,
        read_error_rule: str | None = None,
    ) -> None:
        self.scanner_name = scanner_name
        self.rules = rules
        self.honor_comments = honor_comments
        self.honor_inline = honor_inline
        self.line_filter = line_filter
        self.read_error_rule = read_error_rule

    def should_skip(self, line: str) -> bool:
        if self.honor_comments and is_comment_line(line):
            return True
        return self.honor_inline and is_suppressed_inline(line)

    def scan_text(self, text: str, file: str | None) -> list[Finding]:
        findings: list[Finding] = []
        for line_num, line in enumerate(split_lines(text), start=1):
            if self.should_skip(line):
                continue
            for r in self.rules:
                if not r.matches(line):
                    continue
                if self.line_filter is not None and not self.line_filter(r, line):
                    continue
                findings.append(self.build_finding(r, line, line_num, file))
        return findings

    def build_finding(self, r: Rule, line: str, line_num: int, file: str | None) -> Finding:
        return Finding(
            rule_id=r.id,
            message=r.message,
            severity=r.severity,
            scanner=self.scanner_name,
            file=file,
            line=line_num,
            snippet=make_snippet(line),
            remediation=r.remediation,
        )

    def scan_files(self, root: str | Path, files: Iterable[Path]) -> list[Finding]:
        findings: list[Finding] = []
        for path in files:
            rel = relative_path(path, root)
            try:
                text = read_text(path)
            except (OSError, UnicodeDecodeError) as e:
                log.debug("%s: cannot read %s: %s", self.scanner_name, rel, e)
                if self.read_error_rule is not None:
                    findings.append(self._read_error(rel, e))
                continue
            findings.extend(self.scan_text(text, rel))
        return findings

    def _read_error(self, file: str, exc: Exception) -> Finding:
        return Finding(
            rule_id=self.read_error_rule or f"{self.scanner_name}/read-error",
            message=f"Could not read file: {exc}",
            severity=Severity.INFO,
            scanner=self.scanner_name,
            file=file,
            remediation="Check file permissions and ensure the file is valid UTF-8",
        )
