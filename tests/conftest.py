"""Shared fixtures for skillscan tests."""

from pathlib import Path

import pytest

from skillscan.config import Config

GOOD_SKILL_MD = """\
---
name: pdf-form-filler
description: Fills PDF forms from structured data. Use when the user asks to complete a PDF form.
allowed-tools: [Read, Write, Bash(python3)]
---

# PDF form filler

Run `scripts/fill.sh` with the form path.
"""


def write_skill(root: Path, files: dict[str, str]) -> Path:
    """Create a skill directory tree from a {relative path: content} map."""
    root.mkdir(parents=True, exist_ok=True)
    for rel, content in files.items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def make_skill(tmp_path):
    """Factory: make_skill({"SKILL.md": ..., "scripts/x.sh": ...}, name="my-skill")."""
    def _make(files: dict[str, str] | None = None, name: str = "my-skill") -> Path:
        contents = {"SKILL.md": GOOD_SKILL_MD}
        if files:
            contents.update(files)
        return write_skill(tmp_path / name, contents)
    return _make


@pytest.fixture
def clean_skill(make_skill):
    return make_skill({"scripts/fill.sh": "#!/bin/bash\nset -euo pipefail\necho \"filling $1\"\n"})


@pytest.fixture
def chdir_tmp(tmp_path, monkeypatch):
    """Run with an empty working directory so no stray skillscan.toml is picked up."""
    work = tmp_path / "cwd"
    work.mkdir()
    monkeypatch.chdir(work)
    monkeypatch.delenv("SKILLSCAN_STRICT", raising=False)
    return work
