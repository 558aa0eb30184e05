"""Shared CLI helpers."""

from __future__ import annotations

import json
import sys
from typing import Any

from rich.console import Console


def _out(data: Any) -> int:
    print(json.dumps(data, indent=2, default=str))
    return 0


def _err(message: str) -> None:
    print(message, file=sys.stderr)


def _color_enabled() -> bool:
    """Color only on an interactive stdout; rich also honors NO_COLOR."""
    console = Console()
    return console.is_terminal and not console.no_color
