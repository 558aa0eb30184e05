"""Dangerous shell construct detector (``bash/CAT-*``).

Categories:

* A  remote code execution
* B  credential exfiltration
* C  destructive operations
* D  reverse shells and backdoors
* E  privilege escalation
* G  unsafe variable expansion
* H  outbound network (informational, subject to the domain allowlist)
"""

from __future__ import annotations

import time
from pathlib import Path

from skillscan.config import AllowlistConfig, Config
from skillscan.defaults import SHELL_EXTENSIONS
from skillscan.engine import LineScanner
from skillscan.files import collect_files
from skillscan.hosts import all_hosts_allowed, has_host
from skillscan.models import ScanResult, Severity
from skillscan.rules import Rule, RuleInfo, rule

SCANNER_NAME = "bash_patterns"
NETWORK_RULE_ID = "bash/CAT-H1"

ERR, WARN, INFO = Severity.ERROR, Severity.WARNING, Severity.INFO

RULES: tuple[Rule, ...] = (
    # A: remote code execution
    rule("bash/CAT-A1", ERR, r"(?i)\|\s*(bash|sh|zsh|fish|ksh)\b",
         "Pipe to shell: potential remote code execution",
         "Download to a temp file, verify checksum, then execute explicitly"),
    rule("bash/CAT-A2", ERR, r"""(?i)\beval\s*["'`\$\(]""",
         "eval of dynamic content: arbitrary code execution risk",
         "Avoid eval; use explicit function calls or case statements"),
    rule("bash/CAT-A3", ERR, r"(?i)\bsource\s*<\s*\(\s*(curl|wget|fetch)",
         "Source from URL: executes arbitrary remote shell code",
         "Download to a file, review content, then source explicitly"),
    rule("bash/CAT-A4", ERR, r"(?i)(curl|wget).+/tmp/.+&&\s*(bash|sh|exec)",
         "Download to temp file then execute: two-step RCE vector",
         "Use package manager or verified binary download with checksum"),
    # B: credential exfiltration. The $ sigil is required so HOSTNAME or
    # REMOTE_HOME never match.
    rule("bash/CAT-B1", ERR, r"(\$\{?HOME\}?|~)/\.ssh/",
         "Access to ~/.ssh/: SSH key exfiltration risk",
         "SSH keys should never be read by skill scripts"),
    rule("bash/CAT-B2", ERR, r"(\$\{?HOME\}?|~)/\.aws/",
         "Access to ~/.aws/: AWS credential exfiltration risk",
         "AWS credentials should never be read by skill scripts"),
    rule("bash/CAT-B3", ERR, r"(\$\{?HOME\}?|~)/\.kube/config",
         "Access to ~/.kube/config: Kubernetes credential exfiltration risk",
         "Kubeconfig should never be read by skill scripts"),
    rule("bash/CAT-B4", ERR, r"""(?i)(curl|wget).+\-d\s+["']?\$""",
         "Environment variable sent as HTTP POST body: exfiltration risk",
         "Never send environment variables to external endpoints"),
    rule("bash/CAT-B5", ERR, r"(?i)\benv\b.+\|\s*(curl|wget|nc)",
         "env output piped to network tool: full environment exfiltration",
         "Never pipe env output to outbound network tools"),
    # C: destructive
    rule("bash/CAT-C1", ERR, r"(?i)\brm\s+(-[rRfF]+\s+){0,3}(\$HOME|~/|/\s*$|\$\{HOME\})",
         "rm -rf on home or root directory: potentially irreversible destruction",
         "Scope rm operations to specific subdirectories with validated paths"),
    rule("bash/CAT-C2", ERR, r"(?i)\bdd\s+if=/dev/(urandom|zero|random)\s+of=/dev/",
         "dd disk wipe: overwrites storage device",
         "dd to block devices should never appear in skill scripts"),
    # D: reverse shells
    rule("bash/CAT-D1", ERR, r"(?i)\bnc\s+(-[a-z]+\s+)*-e\s+/bin/",
         "Netcat reverse shell: opens interactive shell to remote host",
         "Netcat with -e flag is a reverse shell. Remove immediately."),
    rule("bash/CAT-D2", ERR, r"bash\s+-i\s+>&\s*/dev/tcp/",
         "Bash TCP reverse shell: /dev/tcp backdoor",
         "Bash /dev/tcp redirection is a reverse shell. Remove immediately."),
    rule("bash/CAT-D3", ERR, r"(?i)python\S*\s+-c\s+.*socket.*connect",
         "Python socket-based reverse shell pattern",
         "Python socket connect pattern is a known reverse shell. Remove immediately."),
    # E: privilege escalation
    rule("bash/CAT-E1", WARN, r"(?i)\bsudo\s+(su|bash|sh)\b",
         "sudo shell: unintended privilege escalation",
         "Skills should not require root. Specify exact sudo commands if unavoidable."),
    rule("bash/CAT-E2", WARN, r"\bchmod\s+[+u]s\b",
         "SUID bit: persistent privilege escalation vector",
         "Setting SUID bit on binaries is a privilege escalation risk"),
    # G: unsafe expansion. The trailing group also accepts end of line so
    # `rm -rf $TMPDIR` is caught.
    rule("bash/CAT-G1", WARN, r"""(?i)\brm\s+-[rRfF]+\s+\$[a-zA-Z_][a-zA-Z0-9_]*(?:[^/"\{]|$)""",
         "rm -rf with unquoted variable: empty variable may delete current directory",
         'Quote the variable: rm -rf "$VARNAME" and validate it is non-empty first'),
    rule("bash/CAT-G2", WARN, r"""(?i)(bash|sh)\s+-c\s+["']?\$[a-zA-Z_]""",
         "Shell invoked with variable argument: command injection risk",
         "Avoid bash -c with variable content. Use functions or explicit commands."),
    # H: outbound network
    rule(NETWORK_RULE_ID, INFO, r"(?i)(curl|wget)\s+https?://",
         "Outbound HTTP call detected: verify domain is in allowed list",
         "Ensure domain is in skillscan.toml [allowlist.domains]"),
)


def network_filter(allowlist: AllowlistConfig):
    """Line filter dropping CAT-H1 when every host on the line is allowlisted.

    A line mixing allowed and disallowed hosts still fires.  A line with no
    extractable host has no target to judge, so the rule does not fire.
    """
    domains = allowlist.domains

    def keep(r: Rule, line: str) -> bool:
        if r.id != NETWORK_RULE_ID:
            return True
        return has_host(line) and not all_hosts_allowed(line, domains)

    return keep


class BashPatternsScanner:
    scanner_name = SCANNER_NAME
    description = "Dangerous shell pattern scanner (RCE, exfiltration, reverse shells)"

    def is_available(self) -> bool:
        return True

    def scan(self, path: Path, config: Config) -> ScanResult:
        start = time.monotonic()
        files = collect_files(path, SHELL_EXTENSIONS)
        engine = LineScanner(
            SCANNER_NAME, RULES,
            line_filter=network_filter(config.allowlist),
            read_error_rule="bash/read-error",
        )
        findings = engine.scan_files(path, files)
        return ScanResult(
            scanner_name=SCANNER_NAME,
            findings=findings,
            files_scanned=len(files),
            duration_ms=int((time.monotonic() - start) * 1000),
        )

    def rules(self) -> list[RuleInfo]:
        return [r.info(SCANNER_NAME) for r in RULES]
