"""Command handlers: each returns a process exit code.

0 means every audited skill passed, 1 means at least one warned or failed,
2 is a usage or environment problem (bad path, bad config, unknown rule).
"""

from __future__ import annotations

import argparse
from pathlib import Path

from skillscan.audit import (
    active_scanner_count,
    all_scanners,
    find_skill_dirs,
    is_collection,
    run_audit,
)
from skillscan.cli._helpers import _color_enabled, _err, _out
from skillscan.config import Config, load_config
from skillscan.defaults import SKILL_FILENAME
from skillscan.errors import ConfigError
from skillscan.output import OutputFormat, format_collection_summary, format_report
from skillscan.output.pretty import Styler, severity_label
from skillscan.rules import all_rules, find_rule

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_USAGE = 2


def _load(args: argparse.Namespace) -> Config | None:
    try:
        config = load_config(getattr(args, "config", None))
    except ConfigError as e:
        _err(f"Error: {e}")
        return None
    if getattr(args, "strict", False):
        config = config.with_strict(True)
    return config


def _progress(config: Config) -> None:
    enabled, disabled = active_scanner_count(config)
    plural = "" if enabled == 1 else "s"
    line = f"Running {enabled} scanner{plural}..."
    if disabled:
        line += f" ({disabled} disabled)"
    _err(line)


# ---------------------------------------------------------------------------
# audit / audit-all
# ---------------------------------------------------------------------------

def cmd_audit(args: argparse.Namespace) -> int:
    path = Path(args.path)
    if not path.exists():
        _err(f"Error: path does not exist: {path}")
        return EXIT_USAGE

    if is_collection(path):
        children = find_skill_dirs(path)
        _err(f"Error: '{path}' looks like a skills collection directory, not a single skill.")
        _err("")
        _err("To audit all skills at once:")
        _err(f"  skillscan audit-all {path}")
        _err("")
        _err("To audit a specific skill:")
        for child in children:
            _err(f"  skillscan audit {child}")
        return EXIT_USAGE

    config = _load(args)
    if config is None:
        return EXIT_USAGE

    _progress(config)
    report = run_audit(path, config)
    fmt = OutputFormat(args.format)

    if args.output:
        formatted = format_report(report, fmt)
        try:
            Path(args.output).write_text(formatted, encoding="utf-8")
        except OSError as e:
            _err(f"Error writing output: {e}")
            return EXIT_USAGE
        _err(f"Output written to {args.output}")
    else:
        print(format_report(report, fmt, color=_color_enabled()), end="")

    return EXIT_OK if report.passed else EXIT_FINDINGS


def cmd_audit_all(args: argparse.Namespace) -> int:
    path = Path(args.path)
    if not path.exists():
        _err(f"Error: path does not exist: {path}")
        return EXIT_USAGE

    skill_dirs = find_skill_dirs(path)
    if not skill_dirs:
        _err(
            f"Error: no skill directories found in '{path}' "
            f"(no subdirectory contains a {SKILL_FILENAME})"
        )
        return EXIT_USAGE

    config = _load(args)
    if config is None:
        return EXIT_USAGE

    fmt = OutputFormat(args.format)
    color = _color_enabled()
    reports = []
    for skill_dir in skill_dirs:
        _progress(config)
        report = run_audit(skill_dir, config)
        print(format_report(report, fmt, color=color), end="")
        reports.append(report)

    if fmt == OutputFormat.PRETTY:
        print(format_collection_summary(str(path), reports, color=color), end="")

    return EXIT_OK if all(r.passed for r in reports) else EXIT_FINDINGS


# ---------------------------------------------------------------------------
# Introspection
# ---------------------------------------------------------------------------

def cmd_check_tools(args: argparse.Namespace) -> int:
    s = Styler(_color_enabled())
    print(s("Scanner Availability", "bold", "underline"))
    print()
    for scanner in all_scanners():
        if scanner.is_available():
            status = s("READY", "bold", "green")
        else:
            status = s("NOT AVAILABLE", "red")
        print(f"  [{status}] {scanner.scanner_name:<20} {scanner.description}")
    print()
    print("Note: Core scanners (bash_patterns, prompt, package_install, frontmatter) "
          "require no external tools.")
    return EXIT_OK


def cmd_list_rules(args: argparse.Namespace) -> int:
    s = Styler(_color_enabled())
    rules = all_rules()
    if args.json:
        return _out({"rules": [r.to_dict() for r in rules], "total": len(rules)})

    print(s("Built-in Rules", "bold", "underline"))
    print()

    current = ""
    for info in rules:
        if info.scanner != current:
            if current:
                print()
            print(f"  {s(info.scanner, 'bold')}")
            current = info.scanner
        print(f"    [{severity_label(info.severity, s)}] {info.id:<30} {info.message}")

    print()
    print(f"  Total: {len(rules)} rules")
    return EXIT_OK


def cmd_explain(args: argparse.Namespace) -> int:
    info = find_rule(args.rule)
    if info is None:
        _err(f"Unknown rule: {args.rule}")
        _err("Use 'skillscan list-rules' to see all available rules.")
        return EXIT_USAGE

    if args.json:
        return _out(info.to_dict())

    s = Styler(_color_enabled())
    print(s(info.id, "bold"))
    print()
    print(f"  Scanner:      {info.scanner}")
    print(f"  Severity:     {info.severity.value}")
    print(f"  Description:  {info.message}")
    print(f"  Remediation:  {info.remediation}")
    return EXIT_OK


# ---------------------------------------------------------------------------
# serve
# ---------------------------------------------------------------------------

def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from skillscan.api import create_app

    config = _load(args)
    if config is None:
        return EXIT_USAGE
    uvicorn.run(create_app(config), host=args.host, port=args.port)
    return EXIT_OK
