"""Prompt-injection language detector (``prompt/*``).

Scans documentation and metadata files.  Markdown headings start with ``#``,
so this family applies neither the comment skip nor the inline marker.
"""

from __future__ import annotations

import time
from pathlib import Path

from skillscan.config import Config
from skillscan.defaults import PROMPT_EXTENSIONS
from skillscan.engine import LineScanner
from skillscan.files import collect_files
from skillscan.models import ScanResult, Severity
from skillscan.rules import Rule, RuleInfo, rule

SCANNER_NAME = "prompt"

# Legal boilerplate and attribution files, matched by lowercased stem.
BENIGN_STEMS = frozenset({
    "license", "licence", "changelog", "notice", "authors",
    "contributors", "copying", "patents", "version", "history",
})

ERR, WARN = Severity.ERROR, Severity.WARNING

_OVERRIDE_FIX = "Remove instruction override language from skill description"

RULES: tuple[Rule, ...] = (
    # instruction override
    rule("prompt/override-ignore", ERR,
         r"(?i)ignore\s+(all\s+)?(previous|prior|above)\s+(instructions?|prompts?|rules?)",
         "Prompt injection: instruction override, 'ignore previous instructions'",
         _OVERRIDE_FIX),
    rule("prompt/override-disregard", ERR,
         r"(?i)disregard\s+(all\s+)?(previous|prior|above|your)\s+(instructions?|prompts?|rules?|guidelines?)",
         "Prompt injection: instruction override, 'disregard previous instructions'",
         _OVERRIDE_FIX),
    rule("prompt/override-forget", ERR,
         r"(?i)forget\s+(everything|all|what)\s+(you|i)\s+(told|said|know)",
         "Prompt injection: instruction override, 'forget everything'",
         _OVERRIDE_FIX),
    # role manipulation
    rule("prompt/role-escalation", ERR,
         r"(?i)you\s+are\s+(now\s+)?(a|an|the)\s+(root|admin|system|super)\s*(user|administrator)?",
         "Prompt injection: role escalation, assigns admin/root identity",
         "Remove role escalation language from skill description"),
    rule("prompt/role-impersonation", WARN,
         r"(?i)pretend\s+(to\s+be|you('re| are))\s+(a\s+)?(different|another|new)\s+(ai|assistant|system)",
         "Prompt injection: role impersonation, 'pretend to be different AI'",
         "Remove role impersonation language from skill description"),
    rule("prompt/restrictions-bypass", ERR,
         r"(?i)act\s+as\s+(if\s+)?(you\s+)?(have\s+)?(no|without)\s+(restrictions?|limits?|rules?)",
         "Prompt injection: restrictions bypass, 'act without restrictions'",
         "Remove restrictions bypass language from skill description"),
    # jailbreak keywords
    rule("prompt/jailbreak-dan", ERR,
         r"(?i)(DAN|do\s+anything\s+now)\s+mode",
         "Prompt injection: DAN (Do Anything Now) jailbreak attempt",
         "Remove jailbreak keywords from skill description"),
    rule("prompt/jailbreak-devmode", ERR,
         r"(?i)developer\s+mode\s+(enabled?|activate|on)",
         "Prompt injection: developer mode activation attempt",
         "Remove developer mode activation language from skill description"),
    rule("prompt/jailbreak-bypass", ERR,
         r"(?i)bypass\s+(safety|security|content)\s+(filter|check|restriction)s?",
         "Prompt injection: safety/security bypass attempt",
         "Remove safety bypass language from skill description"),
    # data exfiltration
    rule("prompt/exfil-send", WARN,
         r"(?i)(send|post|transmit|exfiltrate)\s+.{0,30}(to|via)\s+(http|https|webhook|url|endpoint)",
         "Prompt injection: data exfiltration, send data to external endpoint",
         "Remove data exfiltration instructions from skill description"),
    rule("prompt/exfil-read", WARN,
         r"(?i)(read|access|get|extract)\s+.{0,20}(password|secret|key|token|credential)s?",
         "Prompt injection: credential access, read passwords/secrets/tokens",
         "Remove credential access instructions from skill description"),
    # code injection
    rule("prompt/inject-execute", ERR,
         r"(?i)execute\s+(any|arbitrary|untrusted)\s+(code|command|script)s?",
         "Prompt injection: arbitrary code execution instruction",
         "Remove arbitrary code execution instructions from skill description"),
    rule("prompt/inject-unvalidated", ERR,
         r"(?i)run\s+.{0,20}without\s+(checking|validation|sanitiz)",
         "Prompt injection: run without validation instruction",
         "Remove unvalidated execution instructions from skill description"),
    # excessive permissions. A filesystem-like target is required so prose
    # such as "remove ... all" in a LICENSE does not match.
    rule("prompt/perm-delete-all", WARN,
         r"(?i)\b(delete|remove|rm)\s+(-[rfRF]{1,4}\s+)?(/|~/|\.\./|\*|all\b|everything\b)",
         "Prompt injection: mass deletion instruction",
         "Remove mass deletion instructions from skill description"),
    rule("prompt/perm-sudo", WARN,
         r"(?i)\bsudo\b|as\s+root|with\s+(elevated|admin)\s+priv",
         "Prompt injection: privilege escalation instruction (sudo/root)",
         "Remove privilege escalation instructions from skill description"),
    # system prompt extraction
    rule("prompt/exfil-sysPrompt", ERR,
         r"(?i)(repeat|print|show|reveal|output|display)\s+(your\s+)?(system\s+prompt|initial\s+instructions?|prompt\s+template|base\s+instructions?)",
         "Prompt injection: system prompt extraction attempt",
         "Remove instructions that attempt to reveal the system prompt or base instructions"),
    # delimiter injection
    rule("prompt/inject-delimiter", ERR,
         r"(?i)(</?(?:instructions?|system|prompt)>|\[/?INST\]|<\|im_start\|>|<\|im_end\|>|<\|endoftext\|>)",
         "Prompt injection: model context delimiter, attempts to break instruction boundary",
         "Remove model-specific delimiter tokens from skill description"),
    # fictional framing
    rule("prompt/jailbreak-fiction", WARN,
         r"(?i)(for\s+a\s+fictional\s+(story|scenario)|hypothetically\s+speaking|in\s+a\s+(simulation|hypothetical|fictional)\s+(scenario|world|context)|let('s|\s+us)\s+pretend|imagine\s+(you\s+are|that\s+you\b))",
         "Prompt injection: fictional/hypothetical framing, common jailbreak technique",
         "Remove fictional framing language that may be used to bypass content policies"),
    # priority override
    rule("prompt/override-priority", WARN,
         r"(?i)\b(OVERRIDE|NEW\s+TASK|SYSTEM\s+OVERRIDE):\s*",
         "Prompt injection: priority override keyword, attempts to hijack AI attention",
         "Remove priority override keywords (OVERRIDE:, NEW TASK:) from skill description"),
)


def is_benign_file(path: Path) -> bool:
    return path.stem.lower() in BENIGN_STEMS


class PromptScanner:
    scanner_name = SCANNER_NAME
    description = "Prompt injection pattern scanner"

    def is_available(self) -> bool:
        return True

    def scan(self, path: Path, config: Config) -> ScanResult:
        start = time.monotonic()
        files = collect_files(path, PROMPT_EXTENSIONS)
        engine = LineScanner(
            SCANNER_NAME, RULES, honor_comments=False, honor_inline=False,
        )
        findings = engine.scan_files(path, [f for f in files if not is_benign_file(f)])
        return ScanResult(
            scanner_name=SCANNER_NAME,
            findings=findings,
            files_scanned=len(files),
            duration_ms=int((time.monotonic() - start) * 1000),
        )

    def rules(self) -> list[RuleInfo]:
        return [r.info(SCANNER_NAME) for r in RULES]
