# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.05.17
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/test_display.py

from io import StringIO
from pathlib import Path

from rich.console import Console

from pmtool.core.catalog import RemoteRecord
from pmtool.core.operations import (
    CloneOutcome,
    CloneStatus,
    GrepOutcome,
    ScanResult,
    StepResult,
    SyncOutcome,
)
from pmtool.system.display import (
    display_clone_outcome,
    display_clone_summary,
    display_grep_outcome,
    display_scan_result,
    display_sync_outcome,
    display_sync_steps,
    display_sync_summary,
    format_elapsed,
)


def _console():
    buf = StringIO()
    return Console(file=buf, width=200, color_system=None), buf


def test_scan_result_names_catalog():
    console, buf = _console()
    result = ScanResult(
        repositories=[Path("a"), Path("b")],
        records=[RemoteRecord(remote="git@h:x/a.git")],
        catalog_path=Path("/home/u/.git_projects.json"),
    )

    display_scan_result(console, result)

    out = buf.getvalue()
    assert "Generated /home/u/.git_projects.json" in out
    assert "2 repositories, 1 with a remote, 1 skipped" in out


def test_scan_result_quiet():
    console, buf = _console()
    display_scan_result(console, ScanResult([], [], Path("c.json")), quiet=True)
    assert buf.getvalue() == ""


def test_clone_outcomes():
    console, buf = _console()
    display_clone_outcome(console, CloneOutcome("r1", CloneStatus.EXISTS, Path("acme/widgets")))
    display_clone_outcome(console, CloneOutcome("weird[remote]", CloneStatus.UNPARSED))
    display_clone_outcome(console, CloneOutcome("r3", CloneStatus.FAILED, Path("a/b"), "auth failed"))

    out = buf.getvalue()
    assert "Directory acme/widgets already exists, skipping" in out
    assert "Cannot parse repository path from remote: weird[remote]" in out
    assert "Clone of r3 failed: auth failed" in out


def test_clone_failures_shown_when_quiet():
    console, buf = _console()
    display_clone_outcome(console, CloneOutcome("r", CloneStatus.CLONED, Path("a/b")), quiet=True)
    display_clone_outcome(console, CloneOutcome("r", CloneStatus.FAILED, Path("a/b"), "x"), quiet=True)
    assert "Cloned" not in buf.getvalue()
    assert "failed" in buf.getvalue()


def test_clone_summary_counts():
    console, buf = _console()
    outcomes = [
        CloneOutcome("a", CloneStatus.CLONED),
        CloneOutcome("b", CloneStatus.EXISTS),
        CloneOutcome("c", CloneStatus.EXISTS),
    ]
    display_clone_summary(console, outcomes, 1.0)
    assert "1 cloned, 2 already present, 0 unparsed, 0 failed" in buf.getvalue()


def test_grep_output_printed_verbatim():
    console, buf = _console()
    display_grep_outcome(console, GrepOutcome(repo=Path("r"), revisions=1, matched=True,
                                              output="c1:src/[main].py\n3:x = [1]\n"))
    assert "c1:src/[main].py\n3:x = [1]\n" in buf.getvalue()


def test_sync_outcomes_and_summary():
    console, buf = _console()
    ok = SyncOutcome(repo=Path("ok"), stashed=True, steps=[StepResult("status", True), StepResult("pull", True)])
    bad = SyncOutcome(repo=Path("bad"), steps=[StepResult("checkout", False, "no master")])

    display_sync_outcome(console, ok)
    display_sync_outcome(console, bad)
    display_sync_summary(console, [ok, bad], 2.0)

    out = buf.getvalue()
    assert "Updated ok" in out
    assert "Local changes stashed" in out
    assert "Update of bad failed at git checkout: no master" in out
    assert "Updated bad" not in out
    assert "1 updated, 1 failed, 1 stashed" in out
    assert "Failed repositories" in out


def test_sync_steps_marks_each_step():
    console, buf = _console()
    outcome = SyncOutcome(repo=Path("r"), steps=[StepResult("status", True), StepResult("checkout", False, "no master")])

    display_sync_steps(console, outcome)

    assert buf.getvalue().splitlines() == ["  ✓ git status", "  ✗ git checkout"]


def test_format_elapsed():
    assert format_elapsed(2) == "2 seconds"
