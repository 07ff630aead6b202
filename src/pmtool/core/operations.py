# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.10
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/pmtool/core/operations.py

"""
Batch operations over discovered repositories: scan, clone, grep, pull.

Each operation runs git through a CommandExecutor with an explicit
working directory and returns typed outcomes. Per-repository failures
are captured in the outcome and never stop the batch; only precondition
failures (raised before the loop starts) abort a command.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from loguru import logger

from pmtool.core.catalog import RemoteRecord, build_catalog, write_catalog
from pmtool.core.discovery import find_repositories
from pmtool.core.remotes import resolve_repository_path
from pmtool.system.exceptions import CommandError, RemoteParseError
from pmtool.system.execution import CommandExecutor, CommandResult

STASH_MESSAGE = "pm-tool: auto-stash before pull"


# ---- Result types ----

@dataclass(frozen=True)
class StepResult:
    """Outcome of one git invocation within a repository operation."""
    name: str
    success: bool
    message: str = ""


@dataclass
class ScanResult:
    repositories: list[Path]
    records: list[RemoteRecord]
    catalog_path: Path

    @property
    def skipped(self) -> int:
        return len(self.repositories) - len(self.records)


class CloneStatus(str, Enum):
    CLONED = "cloned"
    EXISTS = "exists"
    UNPARSED = "unparsed"
    FAILED = "failed"


@dataclass(frozen=True)
class CloneOutcome:
    remote: str
    status: CloneStatus
    path: Optional[Path] = None
    message: str = ""


@dataclass
class GrepOutcome:
    repo: Path
    revisions: int = 0
    matched: bool = False
    output: str = ""
    error: str = ""

    @property
    def success(self) -> bool:
        return not self.error


@dataclass
class SyncOutcome:
    repo: Path
    stashed: bool = False
    steps: list[StepResult] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return all(step.success for step in self.steps)

    @property
    def failed_step(self) -> Optional[StepResult]:
        return next((step for step in self.steps if not step.success), None)


def _step_message(result: CommandResult) -> str:
    return (result.stderr or "").strip() or (result.stdout or "").strip()


def _run_step(executor, repo: Path, name: str, args: list[str]) -> tuple[StepResult, Optional[CommandResult]]:
    """Run one git step, turning every failure into a failed StepResult."""
    try:
        result = executor.run_git(repo, args, check=False)
    except CommandError as e:
        logger.warning(f"{repo}: git {name} could not run: {e}")
        return StepResult(name=name, success=False, message=str(e)), None

    if not result.success:
        message = _step_message(result) or f"git {name} exited with {result.returncode}"
        logger.warning(f"{repo}: git {name} failed: {message}")
        return StepResult(name=name, success=False, message=message), result

    return StepResult(name=name, success=True, message=_step_message(result)), result


# ---- scan ----

def scan_repositories(
    root: Union[str, Path],
    catalog_path: Path,
    remote_name: str = "origin",
    executor=CommandExecutor,
) -> ScanResult:
    """Discover repositories under ``root`` and rewrite the catalog."""
    repos = find_repositories(root)
    records = build_catalog(repos, remote_name=remote_name, executor=executor)
    written = write_catalog(catalog_path, records)
    logger.debug(f"Scan: {len(repos)} repositories, {len(records)} with remote '{remote_name}'")
    return ScanResult(repositories=repos, records=records, catalog_path=written)


# ---- clone ----

def clone_record(record: RemoteRecord, dest_root: Path, executor=CommandExecutor,
                 on_clone_start: Optional[Callable[[str, Path], None]] = None) -> CloneOutcome:
    """Clone one catalog entry beneath ``dest_root`` unless it is already there."""
    try:
        relative = Path(resolve_repository_path(record.remote))
    except RemoteParseError as e:
        logger.warning(str(e))
        return CloneOutcome(remote=record.remote, status=CloneStatus.UNPARSED, message=str(e))

    target = dest_root / relative
    if target.exists() or target.is_symlink():
        return CloneOutcome(remote=record.remote, status=CloneStatus.EXISTS, path=relative,
                            message=f"{relative} already exists, skipping")

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.warning(f"Cannot create {target.parent}: {e}")
        return CloneOutcome(remote=record.remote, status=CloneStatus.FAILED, path=relative, message=str(e))

    if on_clone_start is not None:
        on_clone_start(record.remote, relative)

    try:
        result = executor.run_local(["git", "clone", record.remote, str(relative)], check=False, cwd=dest_root)
    except CommandError as e:
        return CloneOutcome(remote=record.remote, status=CloneStatus.FAILED, path=relative, message=str(e))

    if not result.success:
        message = _step_message(result) or f"git clone exited with {result.returncode}"
        logger.warning(f"git clone {record.remote} failed: {message}")
        return CloneOutcome(remote=record.remote, status=CloneStatus.FAILED, path=relative, message=message)

    return CloneOutcome(remote=record.remote, status=CloneStatus.CLONED, path=relative)


def clone_from_catalog(
    records: Iterable[RemoteRecord],
    dest_root: Union[str, Path] = ".",
    executor=CommandExecutor,
    on_clone_start: Optional[Callable[[str, Path], None]] = None,
    on_outcome: Optional[Callable[[CloneOutcome], None]] = None,
) -> list[CloneOutcome]:
    """Clone every catalog entry that is not already present locally."""
    dest_root = Path(dest_root)
    outcomes = []
    for record in records:
        outcome = clone_record(record, dest_root, executor=executor, on_clone_start=on_clone_start)
        outcomes.append(outcome)
        if on_outcome is not None:
            on_outcome(outcome)
    return outcomes


# ---- grep ----

def list_revisions(repo: Path, executor=CommandExecutor) -> list[str]:
    """Every commit reachable from any ref, newest first."""
    result = executor.run_git(repo, ["rev-list", "--all"])
    return result.stdout.split()


def grep_history(
    repo: Path,
    pattern: str,
    executor=CommandExecutor,
    batch_size: int = 256,
    max_revisions: Optional[int] = None,
    fixed_strings: bool = False,
    ignore_case: bool = False,
    on_output: Optional[Callable[[str], None]] = None,
) -> GrepOutcome:
    """Search tracked file contents at every revision of ``repo``.

    Revisions are handed to ``git grep`` ``batch_size`` at a time. Each
    revision is searched on its own, so a line that never changes is
    reported once per revision. When ``on_output`` is given, output is
    passed to it per batch instead of being kept on the outcome.
    """
    outcome = GrepOutcome(repo=repo)
    try:
        revisions = list_revisions(repo, executor=executor)
    except CommandError as e:
        outcome.error = str(e)
        return outcome

    if max_revisions is not None:
        revisions = revisions[:max_revisions]
    outcome.revisions = len(revisions)
    if not revisions:
        return outcome

    args = ["grep", "--break", "--heading", "--line-number"]
    if fixed_strings:
        args.append("--fixed-strings")
    if ignore_case:
        args.append("--ignore-case")
    args += ["-e", pattern]

    chunks = []
    for start in range(0, len(revisions), batch_size):
        batch = revisions[start:start + batch_size]
        try:
            result = executor.run_git(repo, args + batch, check=False)
        except CommandError as e:
            outcome.error = str(e)
            break

        # git grep exits 1 when nothing matched
        if result.returncode == 1:
            continue
        if not result.success:
            outcome.error = _step_message(result) or f"git grep exited with {result.returncode}"
            break

        outcome.matched = True
        if on_output is not None:
            on_output(result.stdout)
        else:
            chunks.append(result.stdout)

    outcome.output = "\n".join(chunks)
    return outcome


# ---- pull ----

def sync_repository(
    repo: Path,
    executor=CommandExecutor,
    branch: str = "master",
    remote_name: str = "origin",
) -> SyncOutcome:
    """Stash local changes, check out ``branch`` and merge it from the remote.

    Steps run in order and stop at the first failure. Stashed changes are
    left on the stash; they are not re-applied after the pull.
    """
    outcome = SyncOutcome(repo=repo)

    step, status = _run_step(executor, repo, "status", ["status", "--porcelain"])
    outcome.steps.append(step)
    if not step.success:
        return outcome

    if status.stdout.strip():
        step, _ = _run_step(executor, repo, "add", ["add", "--all"])
        outcome.steps.append(step)
        if not step.success:
            return outcome

        step, _ = _run_step(executor, repo, "stash", ["stash", "push", "--message", STASH_MESSAGE])
        outcome.steps.append(step)
        if not step.success:
            return outcome
        outcome.stashed = True
        logger.debug(f"{repo}: stashed local changes")

    for name, args in (
        ("checkout", ["checkout", branch]),
        ("pull", ["pull", "--no-rebase", remote_name, branch]),
    ):
        step, _ = _run_step(executor, repo, name, args)
        outcome.steps.append(step)
        if not step.success:
            break

    return outcome
