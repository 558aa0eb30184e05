"""Argparse parser definition for the skillscan CLI."""

from __future__ import annotations

import argparse

from skillscan import __version__
from skillscan.defaults import DEFAULT_HOST, DEFAULT_PORT
from skillscan.output import OutputFormat

_FORMATS = [f.value for f in OutputFormat]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skillscan",
        description="Security and quality audits for agent skill directories",
    )
    parser.add_argument("--version", action="version", version=f"skillscan {__version__}")
    parser.add_argument(
        "--log-level", default=None,
        help="Logging level (default: $SKILLSCAN_LOG_LEVEL or WARNING)",
    )
    sub = parser.add_subparsers(dest="command")

    _register_audit_commands(sub)
    _register_rule_commands(sub)
    _register_server_commands(sub)

    return parser


def _add_audit_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--format", choices=_FORMATS, default=OutputFormat.PRETTY.value,
                   help="Output format")
    p.add_argument("--strict", action="store_true",
                   help="Treat warnings as failures")
    p.add_argument("--config", default=None,
                   help="Path to skillscan.toml")


def _register_audit_commands(sub: argparse._SubParsersAction) -> None:
    # -- audit --
    p = sub.add_parser("audit", help="Audit a single skill directory")
    p.add_argument("path", help="Skill directory (contains SKILL.md)")
    _add_audit_options(p)
    p.add_argument("--output", "-o", default=None,
                   help="Write the report to FILE instead of stdout")

    # -- audit-all --
    p = sub.add_parser("audit-all", help="Audit every skill in a collection directory")
    p.add_argument("path", help="Directory whose children are skill directories")
    _add_audit_options(p)

    # -- check-tools --
    sub.add_parser("check-tools", help="Show which scanners are available")


def _register_rule_commands(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("list-rules", help="List every rule grouped by scanner")
    p.add_argument("--json", action="store_true", help="Emit the catalog as JSON")

    p = sub.add_parser("explain", help="Show details and remediation for a rule")
    p.add_argument("rule", help="Rule id, e.g. bash/CAT-A1")
    p.add_argument("--json", action="store_true", help="Emit the rule as JSON")


def _register_server_commands(sub: argparse._SubParsersAction) -> None:
    # -- serve --
    p = sub.add_parser("serve", help="Start HTTP API server")
    p.add_argument("--host", default=DEFAULT_HOST)
    p.add_argument("--port", type=int, default=DEFAULT_PORT)
    p.add_argument("--config", default=None, help="Path to skillscan.toml")
