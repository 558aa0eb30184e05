"""Single source of truth for shared constants and configuration defaults.

Constants used by more than one module live here.  Patterns that belong to a
single rule family stay in that scanner module.
"""

from __future__ import annotations


# ---------------------------------------------------------------------------
# File names
# ---------------------------------------------------------------------------

CONFIG_FILENAME = "skillscan.toml"
SUPPRESSION_FILENAME = ".skillscan-ignore"
SKILL_FILENAME = "SKILL.md"
README_FILENAME = "README.md"

# ---------------------------------------------------------------------------
# Scanned extensions per detector family
# ---------------------------------------------------------------------------

SHELL_EXTENSIONS = ("sh", "bash", "zsh")
SHELLCHECK_EXTENSIONS = ("sh", "bash")
PROMPT_EXTENSIONS = ("md", "txt", "yaml", "yml")

# ---------------------------------------------------------------------------
# Snippets
# ---------------------------------------------------------------------------

SNIPPET_MAX_CHARS = 120
SNIPPET_CUT_CHARS = 117
SNIPPET_ELLIPSIS = "..."

# ---------------------------------------------------------------------------
# Inline suppression markers (trailing comment, case-insensitive)
# ---------------------------------------------------------------------------

INLINE_MARKERS = ("audit", "skillscan")

# ---------------------------------------------------------------------------
# Allowlists
# ---------------------------------------------------------------------------

DEFAULT_REGISTRIES: tuple[str, ...] = (
    "registry.npmjs.org",
    "pypi.org",
    "files.pythonhosted.org",
)

DEFAULT_DOMAINS: tuple[str, ...] = (
    "registry.npmjs.org",
    "npmjs.org",
    "github.com",
    "githubusercontent.com",
    "pypi.org",
)

# ---------------------------------------------------------------------------
# Risk classification
# ---------------------------------------------------------------------------

# Rule-id prefixes whose error-severity findings make an audit critical:
# remote code execution, reverse shells/backdoors, prompt injection.
CRITICAL_RULE_PREFIXES: tuple[str, ...] = (
    "bash/CAT-A",
    "bash/CAT-D",
    "prompt/",
)

# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------

DEFAULT_MAX_WORKERS = 8
TOOL_TIMEOUT_SECONDS = 120
SEMGREP_TIMEOUT_SECONDS = 30
STDERR_EXCERPT_LIMIT = 500

# ---------------------------------------------------------------------------
# Frontmatter limits
# ---------------------------------------------------------------------------

NAME_MAX_CHARS = 64
DESCRIPTION_MAX_CHARS = 1024
SKILL_BODY_MAX_LINES = 500

# ---------------------------------------------------------------------------
# HTTP service
# ---------------------------------------------------------------------------

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8765
