"""SKILL.md metadata validator (``frontmatter/*``).

Checks that a skill root carries a well-formed ``SKILL.md``: the file exists,
``name``/``description``/``allowed-tools`` follow the skill authoring
guidelines, and the body stays short, portable, and free of dated
conditions.  Unlike the line families, most rules here are evaluated once
per field rather than once per line.
"""

from __future__ import annotations

import logging
import re
import time
from pathlib import Path

from skillscan.config import Config
from skillscan.defaults import (
    DESCRIPTION_MAX_CHARS,
    NAME_MAX_CHARS,
    README_FILENAME,
    SKILL_BODY_MAX_LINES,
    SKILL_FILENAME,
)
from skillscan.engine import read_text, split_lines
from skillscan.frontmatter import Frontmatter, parse_frontmatter
from skillscan.models import Finding, ScanResult, Severity
from skillscan.rules import RuleInfo

log = logging.getLogger("skillscan.scanners.frontmatter")

SCANNER_NAME = "frontmatter"

VAGUE_NAME_TERMS = frozenset({"helper", "utils", "tools", "data", "files", "documents"})

TRIGGER_PHRASES = (
    "use when",
    "when the user",
    "when working with",
    "when asked",
    "when you need",
    "trigger",
    "invoke when",
)

_FIRST_PERSON = re.compile(
    r"(?i)\b(I can|I will|I'll|I am|I'm|you can|you should|you will|you'll)\b"
)
_WINDOWS_PATH = re.compile(r"[a-zA-Z]:\\|[a-zA-Z0-9_][\\][a-zA-Z0-9_]")
_TIME_SENSITIVE = re.compile(
    r"(?i)\b(before|after|until|since|as of|by)\s+\w*\s*"
    r"(january|february|march|april|may|june|july|august|september|october|november|december)?"
    r"\s*\d{4}\b"
)
_XML_MARKERS = ("<", ">", "&lt;", "&gt;", "&#")


def _info(id: str, severity: Severity, message: str, remediation: str) -> RuleInfo:
    return RuleInfo(
        id=f"frontmatter/{id}", severity=severity, scanner=SCANNER_NAME,
        message=message, remediation=remediation,
    )


RULES: tuple[RuleInfo, ...] = (
    _info("missing-skill-md", Severity.ERROR,
          "SKILL.md not found in skill root",
          "Create a SKILL.md file in the skill root with required frontmatter fields"),
    _info("readme-in-skill", Severity.WARNING,
          "README.md found in skill folder: use the description field in SKILL.md instead",
          "Remove README.md and move documentation into the SKILL.md description field; "
          "README.md is not used by the agent runtime"),
    _info("xml-in-frontmatter", Severity.ERROR,
          "XML/HTML angle brackets in frontmatter field: potential prompt injection vector",
          "Remove angle brackets from the name or description fields"),
    _info("name-reserved-word", Severity.ERROR,
          "Skill name contains reserved word 'claude' or 'anthropic'",
          "Choose a name that does not reference Claude or Anthropic brand names"),
    _info("invalid-name-format", Severity.WARNING,
          "Skill name contains uppercase letters, spaces, or underscores: use lowercase-kebab-case",
          "Rename to lowercase-kebab-case (e.g. 'my-skill' not 'My_Skill')"),
    _info("name-too-long", Severity.WARNING,
          f"Skill name exceeds {NAME_MAX_CHARS} characters",
          f"Shorten the skill name to {NAME_MAX_CHARS} characters or fewer"),
    _info("name-too-vague", Severity.WARNING,
          "Skill name uses a vague generic term: choose a descriptive name",
          "Rename to something specific (e.g. 'github-pr-creator' not 'tools')"),
    _info("description-missing", Severity.WARNING,
          "Skill description is missing or empty",
          "Add a meaningful description field to SKILL.md frontmatter"),
    _info("description-too-long", Severity.WARNING,
          f"Description exceeds {DESCRIPTION_MAX_CHARS} characters",
          f"Shorten the description to {DESCRIPTION_MAX_CHARS} characters or fewer"),
    _info("description-not-third-person", Severity.WARNING,
          "Description uses first or second person: use third person (e.g. 'This skill...')",
          "Rewrite the description in third person"),
    _info("description-no-trigger", Severity.INFO,
          "Description doesn't include 'when to use' context: add trigger phrases (e.g. 'Use when...')",
          "Append: 'Use when <specific trigger condition>.' to the description"),
    _info("bare-bash-tool", Severity.WARNING,
          "Unscoped 'Bash' in allowed-tools grants unrestricted shell access",
          "Scope Bash to specific commands: e.g., Bash(find,ls,cat,grep)"),
    _info("skill-body-too-long", Severity.WARNING,
          f"SKILL.md exceeds {SKILL_BODY_MAX_LINES} lines",
          f"Trim SKILL.md to {SKILL_BODY_MAX_LINES} lines or fewer"),
    _info("windows-path", Severity.WARNING,
          "Windows-style backslash path in SKILL.md: use forward slashes",
          "Replace backslash paths with forward slashes (e.g. path/to/file)"),
    _info("time-sensitive-content", Severity.WARNING,
          "SKILL.md contains time-sensitive date condition: this will become stale",
          "Move dated content into an 'Old patterns' collapsible section instead"),
)

_BY_ID = {r.id: r for r in RULES}


def _finding(
    short_id: str, file: str, line: int | None = None, message: str | None = None,
) -> Finding:
    info = _BY_ID[f"frontmatter/{short_id}"]
    return Finding(
        rule_id=info.id,
        message=message or info.message,
        severity=info.severity,
        scanner=SCANNER_NAME,
        file=file,
        line=line,
        remediation=info.remediation,
    )


def has_xml(value: str) -> bool:
    """Literal angle brackets or their common entity encodings."""
    return any(m in value for m in _XML_MARKERS)


# ---------------------------------------------------------------------------
# Field validators
# ---------------------------------------------------------------------------

def validate_name(name: str, line: int) -> list[Finding]:
    findings: list[Finding] = []
    if has_xml(name):
        findings.append(_finding(
            "xml-in-frontmatter", SKILL_FILENAME, line,
            "XML/HTML angle brackets in 'name' field: potential prompt injection vector",
        ))
    lower = name.lower()
    if "claude" in lower or "anthropic" in lower:
        findings.append(_finding("name-reserved-word", SKILL_FILENAME, line))
    if any(c.isupper() for c in name) or " " in name or "_" in name:
        findings.append(_finding("invalid-name-format", SKILL_FILENAME, line))
    if len(name) > NAME_MAX_CHARS:
        findings.append(_finding(
            "name-too-long", SKILL_FILENAME, line,
            f"Skill name is {len(name)} chars: maximum is {NAME_MAX_CHARS}",
        ))
    if any(seg in VAGUE_NAME_TERMS for seg in lower.split("-")):
        findings.append(_finding("name-too-vague", SKILL_FILENAME, line))
    return findings


def validate_description(description: tuple[str, int] | None) -> list[Finding]:
    if description is None or not description[0].strip():
        line = description[1] if description is not None else None
        return [_finding("description-missing", SKILL_FILENAME, line)]

    value, line = description
    findings: list[Finding] = []
    if has_xml(value):
        findings.append(_finding(
            "xml-in-frontmatter", SKILL_FILENAME, line,
            "XML/HTML angle brackets in 'description' field: potential prompt injection vector",
        ))
    if len(value) > DESCRIPTION_MAX_CHARS:
        findings.append(_finding(
            "description-too-long", SKILL_FILENAME, line,
            f"Description is {len(value)} chars: maximum is {DESCRIPTION_MAX_CHARS}",
        ))
    if _FIRST_PERSON.search(value):
        findings.append(_finding("description-not-third-person", SKILL_FILENAME, line))
    lower = value.lower()
    if not any(p in lower for p in TRIGGER_PHRASES):
        findings.append(_finding("description-no-trigger", SKILL_FILENAME, line))
    return findings


def validate_allowed_tools(tools: list[tuple[str, int]]) -> list[Finding]:
    findings: list[Finding] = []
    for tool, line in tools:
        # Bash(...) is scoped; bare Bash grants a full shell.
        if tool.strip().lower() == "bash":
            findings.append(_finding("bare-bash-tool", SKILL_FILENAME, line))
    return findings


def validate_body(content: str) -> list[Finding]:
    findings: list[Finding] = []
    lines = split_lines(content)
    if len(lines) > SKILL_BODY_MAX_LINES:
        findings.append(_finding(
            "skill-body-too-long", SKILL_FILENAME, None,
            f"SKILL.md is {len(lines)} lines: maximum is {SKILL_BODY_MAX_LINES}",
        ))
    # first occurrence only
    for short_id, pattern in (("windows-path", _WINDOWS_PATH),
                              ("time-sensitive-content", _TIME_SENSITIVE)):
        for num, line in enumerate(lines, start=1):
            if pattern.search(line):
                findings.append(_finding(short_id, SKILL_FILENAME, num))
                break
    return findings


def validate_skill_md(content: str) -> list[Finding]:
    """All content checks for an already-read SKILL.md."""
    fm: Frontmatter | None = parse_frontmatter(content)
    findings: list[Finding] = []
    if fm is not None:
        if fm.name is not None:
            findings.extend(validate_name(*fm.name))
        findings.extend(validate_allowed_tools(fm.allowed_tools))
    # runs even without a frontmatter block
    findings.extend(validate_description(fm.description if fm else None))
    findings.extend(validate_body(content))
    return findings


class FrontmatterScanner:
    scanner_name = SCANNER_NAME
    description = "SKILL.md frontmatter and allowed-tools audit"

    def is_available(self) -> bool:
        return True

    def scan(self, path: Path, config: Config) -> ScanResult:
        start = time.monotonic()
        root = Path(path)
        skill_md = root / SKILL_FILENAME

        def elapsed() -> int:
            return int((time.monotonic() - start) * 1000)

        if not skill_md.exists():
            return ScanResult(
                scanner_name=SCANNER_NAME,
                findings=[_finding("missing-skill-md", SKILL_FILENAME)],
                duration_ms=elapsed(),
            )

        findings: list[Finding] = []
        if (root / README_FILENAME).exists():
            findings.append(_finding("readme-in-skill", README_FILENAME))

        try:
            content = read_text(skill_md)
        except (OSError, UnicodeDecodeError) as e:
            log.warning("Failed to read %s: %s", skill_md, e)
            return ScanResult(
                scanner_name=SCANNER_NAME,
                findings=findings,
                files_scanned=1,
                error=f"Failed to read SKILL.md: {e}",
                duration_ms=elapsed(),
            )

        findings.extend(validate_skill_md(content))
        return ScanResult(
            scanner_name=SCANNER_NAME,
            findings=findings,
            files_scanned=1,
            duration_ms=elapsed(),
        )

    def rules(self) -> list[RuleInfo]:
        return list(RULES)
