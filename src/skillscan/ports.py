"""Detector port interface.

Every detector (built-in pattern family or external-tool adapter) satisfies
``ScannerPort``.  The orchestrator depends only on this protocol.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from skillscan.config import Config
from skillscan.models import ScanResult
from skillscan.rules import RuleInfo


@runtime_checkable
class ScannerPort(Protocol):
    scanner_name: str
    description: str

    def is_available(self) -> bool: ...
    def scan(self, path: Path, config: Config) -> ScanResult: ...
    def rules(self) -> list[RuleInfo]: ...
