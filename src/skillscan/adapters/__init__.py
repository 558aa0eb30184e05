"""External tool adapters: normalize tool output into Finding."""

from skillscan.adapters.gitleaks_adapter import GitleaksScanner
from skillscan.adapters.semgrep_adapter import SemgrepScanner
from skillscan.adapters.shellcheck_adapter import ShellCheckScanner

__all__ = ["GitleaksScanner", "SemgrepScanner", "ShellCheckScanner"]
