"""CLI for skillscan.

Commands:
  skillscan audit PATH
  skillscan audit-all PATH
  skillscan check-tools
  skillscan list-rules
  skillscan explain RULE
  skillscan serve
"""

from __future__ import annotations

import os
import sys

from skillscan.cli._parser import build_parser
from skillscan.cli.commands import (
    EXIT_USAGE,
    cmd_audit,
    cmd_audit_all,
    cmd_check_tools,
    cmd_explain,
    cmd_list_rules,
    cmd_serve,
)
from skillscan.observability import setup_logging


# ===================================================================
# Dispatch
# ===================================================================

_DISPATCH = {
    "audit": cmd_audit,
    "audit-all": cmd_audit_all,
    "check-tools": cmd_check_tools,
    "list-rules": cmd_list_rules,
    "explain": cmd_explain,
    "serve": cmd_serve,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    if not args.command:
        parser.print_help()
        return EXIT_USAGE

    setup_logging(args.log_level or os.environ.get("SKILLSCAN_LOG_LEVEL", "WARNING"))

    handler = _DISPATCH.get(args.command)
    if handler is None:
        parser.print_help()
        return EXIT_USAGE

    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
