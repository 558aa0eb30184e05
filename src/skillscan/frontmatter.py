"""Lightweight SKILL.md frontmatter parser.

Covers the subset of YAML skill metadata uses: top-level ``key: value``
scalars, block sequences (``- item``) and flow sequences (``[a, b]``).  Only
``name``, ``description`` and ``allowed-tools`` are kept, each with its
1-based line number.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from skillscan.engine import split_lines

DELIMITER = "---"


@dataclass
class Frontmatter:
    name: tuple[str, int] | None = None
    description: tuple[str, int] | None = None
    allowed_tools: list[tuple[str, int]] = field(default_factory=list)


def split_flow_sequence(inner: str) -> list[str]:
    """Split on commas outside parentheses.

    ``Bash(find,ls), Write`` -> ``["Bash(find,ls)", "Write"]``
    """
    items: list[str] = []
    depth = 0
    start = 0
    for i, c in enumerate(inner):
        if c == "(":
            depth += 1
        elif c == ")":
            depth = max(depth - 1, 0)
        elif c == "," and depth == 0:
            items.append(inner[start:i].strip())
            start = i + 1
    last = inner[start:].strip()
    if last:
        items.append(last)
    return items


def parse_kv(line: str) -> tuple[str, str] | None:
    """Split a top-level ``key: value`` line; indented lines are not keys."""
    if not line or line[0].isspace():
        return None
    key, sep, after = line.partition(":")
    if not sep:
        return None
    key = key.strip()
    if not key:
        return None
    return key, after.removeprefix(" ")


def parse_frontmatter(content: str) -> Frontmatter | None:
    """Parse the leading ``---`` block; None when the file does not open one.

    An unterminated block runs to end of file.
    """
    lines = split_lines(content)
    if not lines or lines[0].strip() != DELIMITER:
        return None

    fm = Frontmatter()
    current_key: str | None = None

    for line_num, line in enumerate(lines[1:], start=2):
        if line.strip() == DELIMITER:
            break

        is_item = (
            line.startswith("  - ")
            or line.startswith("\t- ")
            or (line.startswith("- ") and current_key is not None)
        )
        if is_item:
            item = line.lstrip().removeprefix("- ").strip()
            if current_key == "allowed-tools" and item:
                fm.allowed_tools.append((item, line_num))
            continue

        kv = parse_kv(line)
        if kv is None:
            continue
        key, value = kv
        current_key = key
        value = value.strip()
        if key == "name" and value:
            fm.name = (value, line_num)
        elif key == "description" and value:
            fm.description = (value, line_num)
        elif key == "allowed-tools":
            if value.startswith("[") and value.endswith("]"):
                for tool in split_flow_sequence(value[1:-1]):
                    fm.allowed_tools.append((tool, line_num))
            elif value:
                fm.allowed_tools.append((value, line_num))
            # empty value: a block sequence follows

    return fm
