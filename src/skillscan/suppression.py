"""Suppression policy: ``.skillscan-ignore`` entries that silence findings.

File format (TOML)::

    [[suppress]]
    rule = "bash/CAT-A1"
    file = "scripts/install.sh"
    lines = "10-20"
    reason = "Installer is pinned and checksum-verified"
    ticket = "SEC-142"

A suppression matches a finding when all of the following hold:

* ``rule`` equals the finding's rule id exactly;
* ``file`` is empty (wildcard), or the finding has a file and ``file`` is a
  path-component suffix of it: ``test.sh`` matches ``a/b/test.sh`` but not
  ``a/b/maltest.sh``.  A fileless finding only matches an empty ``file``;
* ``lines``, when both it and the finding's line are present, parses to a
  valid inclusive range containing the line.  An unparsable or inverted
  range never matches.

Entries are tried in file order; the first match wins.
"""

from __future__ import annotations

import logging
import re
import tomllib
from collections.abc import Iterable
from pathlib import Path, PurePosixPath

from pydantic import BaseModel, Field, ValidationError, field_validator

from skillscan.defaults import SUPPRESSION_FILENAME
from skillscan.models import Finding

log = logging.getLogger("skillscan.suppression")

_LINE_RANGE = re.compile(r"^\s*(\d+)\s*(?:-\s*(\d+)\s*)?$")


class Suppression(BaseModel):
    rule: str
    file: str = ""
    lines: str | None = None
    reason: str = Field(min_length=1)
    ticket: str | None = None

    model_config = {"frozen": True}

    @field_validator("lines", mode="before")
    @classmethod
    def _lines_as_text(cls, value: object) -> object:
        # `lines = 15` is as natural in TOML as `lines = "15"`
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    def matches(self, finding: Finding) -> bool:
        if self.rule != finding.rule_id:
            return False

        if finding.file is not None:
            if self.file and not path_ends_with(finding.file, self.file):
                return False
        elif self.file:
            return False

        if self.lines is not None:
            bounds = parse_line_range(self.lines)
            if bounds is None:
                return False
            start, end = bounds
            if finding.line is not None and not start <= finding.line <= end:
                return False
        return True


class SuppressionFile(BaseModel):
    suppress: list[Suppression] = Field(default_factory=list)


def parse_line_range(lines: str) -> tuple[int, int] | None:
    """``"a-b"`` or ``"n"`` to an inclusive ``(start, end)``; None if invalid or inverted."""
    m = _LINE_RANGE.match(lines)
    if m is None:
        return None
    start = int(m.group(1))
    end = int(m.group(2)) if m.group(2) is not None else start
    if start > end:
        return None
    return start, end


def path_ends_with(file: str, suffix: str) -> bool:
    """Component-wise suffix test; never a raw string suffix."""
    file_parts = PurePosixPath(file.replace("\\", "/")).parts
    suffix_parts = PurePosixPath(suffix.replace("\\", "/")).parts
    if len(suffix_parts) > len(file_parts):
        return False
    return file_parts[len(file_parts) - len(suffix_parts):] == suffix_parts


def find_suppression(finding: Finding, suppressions: Iterable[Suppression]) -> Suppression | None:
    for s in suppressions:
        if s.matches(finding):
            return s
    return None


def load_suppressions(root: str | Path) -> list[Suppression]:
    """Entries from ``<root>/.skillscan-ignore``.

    A missing file yields no entries.  An unreadable or malformed file is
    logged and also yields no entries, so the audit still runs, only without
    suppressions.
    """
    path = Path(root) / SUPPRESSION_FILENAME
    if not path.exists():
        return []
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
        entries = SuppressionFile.model_validate(data).suppress
    except (OSError, tomllib.TOMLDecodeError, ValidationError) as e:
        log.warning("Ignoring %s: %s", path, e)
        return []
    log.debug("Loaded %d suppression(s) from %s", len(entries), path)
    return entries
