"""Rule catalog types and the aggregated catalog of every scanner.

Built-in families compile their patterns once, at import time, into
module-level tuples of :class:`Rule`.  External adapters contribute a
representative :class:`RuleInfo` list; at runtime they emit whatever ids the
tool reports, namespaced by the adapter (``shellcheck/SC2086``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from skillscan.models import Severity


@dataclass(frozen=True)
class Rule:
    id: str
    severity: Severity
    pattern: re.Pattern[str]
    message: str
    remediation: str

    def matches(self, line: str) -> bool:
        return self.pattern.search(line) is not None

    def info(self, scanner: str) -> RuleInfo:
        return RuleInfo(
            id=self.id, severity=self.severity, scanner=scanner,
            message=self.message, remediation=self.remediation,
        )


@dataclass(frozen=True)
class RuleInfo:
    id: str
    severity: Severity
    scanner: str
    message: str
    remediation: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "severity": self.severity.value,
            "scanner": self.scanner,
            "message": self.message,
            "remediation": self.remediation,
        }


def rule(id: str, severity: Severity, pattern: str, message: str, remediation: str) -> Rule:
    return Rule(id, severity, re.compile(pattern), message, remediation)


def all_rules() -> list[RuleInfo]:
    """Every rule, grouped by scanner in registration order."""
    from skillscan.audit import all_scanners

    rules: list[RuleInfo] = []
    for scanner in all_scanners():
        rules.extend(scanner.rules())
    return rules


def find_rule(rule_id: str) -> RuleInfo | None:
    for info in all_rules():
        if info.id == rule_id:
            return info
    return None
