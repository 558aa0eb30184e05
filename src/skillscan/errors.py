"""Exceptions raised outside the scanning core."""

from __future__ import annotations


class ConfigError(Exception):
    """Raised when a configuration file is missing, unreadable, or invalid."""
    pass
