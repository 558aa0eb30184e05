"""Configuration: allowlists, strict mode, per-scanner toggles.

Loaded from ``skillscan.toml`` (or an explicit path).  Every field has a
default, so the file can be omitted entirely::

    [allowlist]
    domains = ["github.com", "internal.example.com"]

    [strict]
    enabled = true

    [scanners]
    semgrep = false
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from skillscan.defaults import (
    CONFIG_FILENAME,
    DEFAULT_DOMAINS,
    DEFAULT_MAX_WORKERS,
    DEFAULT_REGISTRIES,
    SEMGREP_TIMEOUT_SECONDS,
    TOOL_TIMEOUT_SECONDS,
)
from skillscan.errors import ConfigError

log = logging.getLogger("skillscan.config")


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

class AllowlistConfig(BaseModel):
    """Trusted registries and download domains.

    Entries are lowercased and stripped once, at validation time, so the
    matchers never normalize per comparison.
    """
    registries: tuple[str, ...] = DEFAULT_REGISTRIES
    domains: tuple[str, ...] = DEFAULT_DOMAINS

    model_config = {"frozen": True}

    @field_validator("registries", "domains", mode="before")
    @classmethod
    def _normalize(cls, value: object) -> tuple[str, ...]:
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple)):
            raise ValueError("expected a list of hostnames")
        return tuple(str(v).strip().lower() for v in value)


class StrictConfig(BaseModel):
    enabled: bool = False

    model_config = {"frozen": True}


class ScannersConfig(BaseModel):
    prompt: bool = True
    bash_patterns: bool = True
    package_install: bool = True
    frontmatter: bool = True
    shellcheck: bool = True
    secrets: bool = True
    semgrep: bool = True

    model_config = {"frozen": True}


class Config(BaseModel):
    allowlist: AllowlistConfig = Field(default_factory=AllowlistConfig)
    strict: StrictConfig = Field(default_factory=StrictConfig)
    scanners: ScannersConfig = Field(default_factory=ScannersConfig)
    tool_timeout: float = Field(default=TOOL_TIMEOUT_SECONDS, gt=0)
    semgrep_timeout: float = Field(default=SEMGREP_TIMEOUT_SECONDS, gt=0)
    max_workers: int = Field(default=DEFAULT_MAX_WORKERS, ge=1)

    model_config = {"frozen": True}

    def is_scanner_enabled(self, name: str) -> bool:
        """Unknown scanner names are treated as enabled."""
        return bool(getattr(self.scanners, name, True))

    def with_strict(self, enabled: bool = True) -> Config:
        return self.model_copy(update={"strict": StrictConfig(enabled=enabled)})


# ---------------------------------------------------------------------------
# Load
# ---------------------------------------------------------------------------

def load_config(config_path: str | Path | None = None) -> Config:
    """Resolve and load configuration.

    An explicit ``config_path`` must exist.  Otherwise ``skillscan.toml`` in
    the working directory is used when present, else built-in defaults.
    ``SKILLSCAN_STRICT=1`` forces strict mode on.
    """
    if config_path is not None:
        path: Path | None = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
    else:
        candidate = Path(CONFIG_FILENAME)
        path = candidate if candidate.exists() else None

    config = _parse_config_file(path) if path is not None else Config()

    if os.environ.get("SKILLSCAN_STRICT", "").lower() in ("1", "true", "yes", "on"):
        config = config.with_strict(True)
    return config


def _parse_config_file(path: Path) -> Config:
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"Failed to read config {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Failed to parse config {path}: {e}") from e

    try:
        config = Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e
    log.debug("Loaded config from %s", path)
    return config
