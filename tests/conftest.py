"""
Shared fixtures for the AuditBot test suite.

The ``toolchain`` fixture replaces every git and npm call made by the
workflow nodes with an in-memory fake, so workflow and fleet tests never
touch the network or need npm installed.
"""

import json
from pathlib import Path

import pytest
from loguru import logger

from auditbot.config import settings
from auditbot.errors import AcquireError, InstallError, PublishError
from auditbot.tools.npm_tools import parse_audit_output


def audit_json(critical=0, high=0, moderate=0, low=0) -> str:
    """Minimal `npm audit --json` document with the given counts."""
    return json.dumps({
        "auditReportVersion": 2,
        "vulnerabilities": {},
        "metadata": {
            "vulnerabilities": {
                "info": 0,
                "low": low,
                "moderate": moderate,
                "high": high,
                "critical": critical,
                "total": critical + high + moderate + low,
            },
        },
    })


class FakeToolchain:
    """Scriptable stand-in for git and npm, keyed by repository name."""

    def __init__(self):
        self.calls = []
        self.clone_failures = {}
        self.partial_clones = set()
        self.install_failures = {}
        self.audit_outputs = {}
        self.default_audit = audit_json()
        self.fix_failures = {}
        self.changed_paths = {}
        self.push_failures = {}
        self.commits = []
        self.workspaces = []

    def steps_for(self, name):
        return [step for step, repo in self.calls if repo == name]

    # ── git ──

    def clone_repository(self, url, destination, timeout=None):
        dest = Path(destination)
        self.workspaces.append(dest)
        self.calls.append(("clone", dest.name))
        if dest.name in self.clone_failures:
            if dest.name in self.partial_clones:
                (dest / ".git").mkdir(parents=True)
            raise AcquireError(self.clone_failures[dest.name])
        dest.mkdir(parents=True)
        (dest / "package.json").write_text("{}", encoding="utf-8")

    def get_changed_paths(self, repo_path):
        name = Path(repo_path).name
        self.calls.append(("status", name))
        return set(self.changed_paths.get(name, set()))

    def configure_identity(self, repo_path, name, email):
        self.calls.append(("identity", Path(repo_path).name))

    def commit(self, repo_path, files, message):
        name = Path(repo_path).name
        self.calls.append(("commit", name))
        self.commits.append((name, list(files), message))
        return "0123456789abcdef0123456789abcdef01234567"

    def push(self, repo_path, branch=None, timeout=None):
        name = Path(repo_path).name
        self.calls.append(("push", name))
        if name in self.push_failures:
            raise PublishError(self.push_failures[name])
        return "main"

    # ── npm ──

    def run_npm_install(self, repo_path, timeout=None):
        name = Path(repo_path).name
        self.calls.append(("install", name))
        if name in self.install_failures:
            raise InstallError(self.install_failures[name])

    def run_npm_audit(self, repo_path, timeout=None):
        name = Path(repo_path).name
        self.calls.append(("audit", name))
        outputs = self.audit_outputs.get(name)
        raw = outputs.pop(0) if outputs else self.default_audit
        if isinstance(raw, Exception):
            raise raw
        return parse_audit_output(raw)

    def run_npm_audit_fix(self, repo_path, timeout=None):
        name = Path(repo_path).name
        self.calls.append(("fix", name))
        return self.fix_failures.get(name)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point workspace and report at tmp_path and restore settings after each test."""
    monkeypatch.setattr(settings, "WORKSPACE_ROOT", str(tmp_path / "workspace"))
    monkeypatch.setattr(settings, "OUTPUT_FILE", str(tmp_path / "audit-summary.txt"))
    monkeypatch.setattr(settings, "PUSH_CHANGES", True)
    monkeypatch.setattr(settings, "REPOS", list(settings.REPOS))
    monkeypatch.setattr(settings, "MANIFEST_FILES", ["package.json", "package-lock.json"])
    monkeypatch.setattr(settings, "COMMIT_MESSAGE", "Fix: updated library versions")
    yield settings
    # CLI and MCP entry points bind a sink to the captured stderr of their test
    logger.remove()


@pytest.fixture
def toolchain(monkeypatch):
    fake = FakeToolchain()

    monkeypatch.setattr("auditbot.agents.repo_fetcher.clone_repository", fake.clone_repository)
    monkeypatch.setattr("auditbot.agents.repo_fetcher.run_npm_install", fake.run_npm_install)
    monkeypatch.setattr("auditbot.agents.vulnerability_auditor.run_npm_audit", fake.run_npm_audit)
    monkeypatch.setattr("auditbot.agents.vulnerability_auditor.run_npm_audit_fix", fake.run_npm_audit_fix)
    monkeypatch.setattr("auditbot.agents.publisher.get_changed_paths", fake.get_changed_paths)
    monkeypatch.setattr("auditbot.agents.publisher.configure_identity", fake.configure_identity)
    monkeypatch.setattr("auditbot.agents.publisher.commit", fake.commit)
    monkeypatch.setattr("auditbot.agents.publisher.push", fake.push)

    return fake


@pytest.fixture
def workspace_root(tmp_path):
    root = tmp_path / "workspace"
    root.mkdir()
    return root
