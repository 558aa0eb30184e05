"""Tests for the .skillscan-ignore suppression policy."""

import logging

import pytest
from pydantic import ValidationError

from skillscan.models import Finding, Severity
from skillscan.suppression import (
    Suppression,
    find_suppression,
    load_suppressions,
    parse_line_range,
    path_ends_with,
)


def _finding(rule_id="bash/CAT-A1", file="scripts/test.sh", line=75):
    return Finding(rule_id=rule_id, message="m", severity=Severity.ERROR,
                   scanner="bash_patterns", file=file, line=line)


def _sup(**kw):
    kw.setdefault("rule", "bash/CAT-A1")
    kw.setdefault("reason", "reviewed")
    return Suppression(**kw)


class TestLineRange:
    @pytest.mark.parametrize("text, expected", [
        ("10", (10, 10)),
        ("10-20", (10, 20)),
        (" 5 - 7 ", (5, 7)),
        ("100-50", None),
        ("abc", None),
        ("1-2-3", None),
    ])
    def test_parse(self, text, expected):
        assert parse_line_range(text) == expected


class TestPathSuffix:
    def test_component_suffix(self):
        assert path_ends_with("a/b/test.sh", "test.sh")
        assert path_ends_with("a/b/test.sh", "b/test.sh")

    def test_partial_name_rejected(self):
        assert not path_ends_with("a/b/maltest.sh", "test.sh")

    def test_backslashes(self):
        assert path_ends_with("a\\b\\test.sh", "b/test.sh")

    def test_longer_suffix(self):
        assert not path_ends_with("test.sh", "x/test.sh")


class TestMatching:
    def test_rule_must_match_exactly(self):
        assert not _sup(rule="bash/CAT-A").matches(_finding())

    def test_empty_file_is_wildcard(self):
        assert _sup().matches(_finding())

    def test_file_suffix(self):
        assert _sup(file="test.sh").matches(_finding())
        assert not _sup(file="test.sh").matches(_finding(file="scripts/maltest.sh"))

    def test_fileless_finding(self):
        assert _sup().matches(_finding(file=None))
        assert not _sup(file="test.sh").matches(_finding(file=None))

    def test_line_range(self):
        s = _sup(lines="50-100")
        assert s.matches(_finding(line=75))
        assert not s.matches(_finding(line=101))

    def test_inverted_range_never_matches(self):
        assert not _sup(lines="100-50").matches(_finding(line=75))

    def test_range_ignored_without_finding_line(self):
        assert _sup(lines="1-2").matches(_finding(line=None))

    def test_invalid_range_never_matches_lineless_finding(self):
        lineless = _finding(rule_id="frontmatter/readme-in-skill", file=None, line=None)
        assert not _sup(rule=lineless.rule_id, lines="100-50").matches(lineless)
        assert not _sup(rule=lineless.rule_id, lines="abc").matches(lineless)

    def test_integer_lines(self):
        assert _sup(lines=75).matches(_finding(line=75))

    def test_reason_required(self):
        with pytest.raises(ValidationError):
            Suppression(rule="bash/CAT-A1", reason="")

    def test_first_match_wins(self):
        first = _sup(reason="first")
        second = _sup(reason="second")
        assert find_suppression(_finding(), [first, second]) is first


class TestLoad:
    def test_missing_file(self, tmp_path):
        assert load_suppressions(tmp_path) == []

    def test_valid_file(self, tmp_path):
        (tmp_path / ".skillscan-ignore").write_text(
            '[[suppress]]\nrule = "bash/CAT-A1"\nfile = "install.sh"\n'
            'lines = "1-5"\nreason = "pinned installer"\nticket = "SEC-1"\n',
            encoding="utf-8",
        )
        entries = load_suppressions(tmp_path)
        assert len(entries) == 1
        assert entries[0].ticket == "SEC-1"
        assert entries[0].lines == "1-5"

    def test_malformed_toml_logged(self, tmp_path, caplog):
        (tmp_path / ".skillscan-ignore").write_text("[[suppress]\nrule=", encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="skillscan.suppression"):
            assert load_suppressions(tmp_path) == []
        assert "Ignoring" in caplog.text

    def test_missing_reason_rejects_file(self, tmp_path):
        (tmp_path / ".skillscan-ignore").write_text(
            '[[suppress]]\nrule = "a"\nreason = "ok"\n\n[[suppress]]\nrule = "b"\n',
            encoding="utf-8",
        )
        assert load_suppressions(tmp_path) == []
