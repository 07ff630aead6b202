# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.02
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/conftest.py

"""
Shared test fixtures for the pm-tool test suite.

FakeGit stands in for git: it answers by argument prefix, records every
call, and can be used both as an executor (run_local/run_git) and as a
replacement for subprocess.run.
"""

import subprocess
from pathlib import Path
from typing import Optional

import pytest

from pmtool.system.exceptions import CommandError
from pmtool.system.execution import CommandResult


class FakeGit:
    """Scripted git: responses are matched on argument prefix and cwd."""

    def __init__(self) -> None:
        self.calls: list[tuple[Optional[Path], list[str]]] = []
        self._rules: list[tuple[tuple[str, ...], Optional[Path], CommandResult]] = []

    def on(self, *args: str, cwd=None, returncode: int = 0, stdout: str = "", stderr: str = "") -> "FakeGit":
        """Answer git calls starting with ``args`` (optionally only in ``cwd``)."""
        self._rules.append((args, Path(cwd) if cwd is not None else None, CommandResult(returncode, stdout, stderr)))
        return self

    def _lookup(self, cmd: list[str], cwd: Optional[Path]) -> CommandResult:
        args = tuple(cmd[1:])
        for prefix, rule_cwd, result in reversed(self._rules):
            if args[:len(prefix)] != prefix:
                continue
            if rule_cwd is not None and rule_cwd != cwd:
                continue
            return result
        return CommandResult(0, "", "")

    # executor interface
    def run_local(self, cmd, timeout=None, check=True, cwd=None) -> CommandResult:
        cwd = Path(cwd) if cwd is not None else None
        self.calls.append((cwd, list(cmd)))
        result = self._lookup(list(cmd), cwd)
        if check and not result.success:
            raise CommandError(f"Local command failed: {result.stderr}", command=list(cmd),
                               returncode=result.returncode, stderr=result.stderr)
        return result

    def run_git(self, repo_dir, args, timeout=None, check=True) -> CommandResult:
        return self.run_local(["git", *args], timeout=timeout, check=check, cwd=repo_dir)

    # subprocess.run replacement
    def subprocess_run(self, cmd, capture_output=True, text=True, encoding=None, errors=None, timeout=None, cwd=None):
        cwd = Path(cwd) if cwd is not None else None
        self.calls.append((cwd, list(cmd)))
        result = self._lookup(list(cmd), cwd)
        return subprocess.CompletedProcess(cmd, result.returncode, result.stdout, result.stderr)

    def git_calls(self, subcommand: str) -> list[tuple[Optional[Path], list[str]]]:
        return [(cwd, cmd) for cwd, cmd in self.calls if len(cmd) > 1 and cmd[1] == subcommand]


@pytest.fixture
def fake_git() -> FakeGit:
    return FakeGit()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Keep every test away from the real home directory and user config."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".xdg"))
    monkeypatch.delenv("PMTOOL_CONFIG_HOME", raising=False)
    for var in ("GIT_AUTHOR_NAME", "GIT_COMMITTER_NAME"):
        monkeypatch.setenv(var, "Test User")
    for var in ("GIT_AUTHOR_EMAIL", "GIT_COMMITTER_EMAIL"):
        monkeypatch.setenv(var, "test@example.org")
    return home


@pytest.fixture
def repo_tree(tmp_path):
    """A directory tree with three working trees (one nested) and noise.

    workspace/
      alpha/.git
      group/beta/.git
      group/beta/vendor/gamma/.git
      plain/
    """
    root = tmp_path / "workspace"
    for rel in ("alpha", "group/beta", "group/beta/vendor/gamma"):
        (root / rel / ".git").mkdir(parents=True)
    (root / "plain" / "docs").mkdir(parents=True)
    (root / "plain" / "README").write_text("not a repo")
    return root


def git(cwd: Path, *args: str) -> str:
    """Run real git for integration fixtures."""
    return subprocess.run(["git", *args], cwd=cwd, check=True, capture_output=True, text=True).stdout


@pytest.fixture
def git_cmd():
    return git


@pytest.fixture
def make_git_repo(tmp_path):
    """Create a real git repository with one commit on master."""

    def _make(rel: str, files: Optional[dict] = None, remote: Optional[str] = None) -> Path:
        repo = tmp_path / rel
        repo.mkdir(parents=True)
        git(repo, "init", "--quiet")
        git(repo, "symbolic-ref", "HEAD", "refs/heads/master")
        for name, content in (files or {"README.md": "hello\n"}).items():
            path = repo / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        git(repo, "add", "--all")
        git(repo, "commit", "--quiet", "-m", "initial")
        if remote:
            git(repo, "remote", "add", "origin", remote)
        return repo

    return _make
