# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.05.17
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/pmtool/system/display.py

# Standard library imports
from datetime import timedelta
from pathlib import Path

# Third-party imports
import humanize
from rich.console import Console
from rich.markup import escape
from rich.table import Table

# Local imports
from pmtool.core.operations import (
    CloneOutcome,
    CloneStatus,
    GrepOutcome,
    ScanResult,
    SyncOutcome,
)


def format_elapsed(seconds: float) -> str:
    """Human readable duration, e.g. '2 seconds'."""
    return humanize.naturaldelta(timedelta(seconds=seconds))


def display_repository_header(console: Console, repo: Path) -> None:
    console.print(f"Processing Git repository in {escape(str(repo))}")


def display_scan_result(console: Console, result: ScanResult, verbose: bool = False, quiet: bool = False) -> None:
    """Report the catalog written by scan.

    Args:
        console: Rich console for output
        result: Scan result with discovered repositories and records
        verbose: List every recorded remote
        quiet: Print nothing
    """
    if quiet:
        return

    if verbose and result.records:
        table = Table(title="Recorded remotes")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Remote", style="cyan")
        for i, record in enumerate(result.records, start=1):
            table.add_row(str(i), escape(record.remote))
        console.print(table)

    console.print(
        f"[dim]Found {len(result.repositories)} repositories, "
        f"{len(result.records)} with a remote, {result.skipped} skipped[/dim]"
    )
    console.print(f"[green]✓[/green] Generated {escape(str(result.catalog_path))}")


def display_clone_start(console: Console, remote: str, path: Path) -> None:
    console.print(f"Cloning {escape(remote)} into {escape(str(path))}")


def display_clone_outcome(console: Console, outcome: CloneOutcome, quiet: bool = False) -> None:
    """One line per catalog record; failures are shown even when quiet."""
    if outcome.status == CloneStatus.CLONED:
        if not quiet:
            console.print(f"[green]✓[/green] Cloned {escape(str(outcome.path))}")
    elif outcome.status == CloneStatus.EXISTS:
        if not quiet:
            console.print(f"[yellow]-[/yellow] Directory {escape(str(outcome.path))} already exists, skipping")
    elif outcome.status == CloneStatus.UNPARSED:
        console.print(f"[red]✗[/red] Cannot parse repository path from remote: {escape(outcome.remote)}")
    else:
        console.print(f"[red]✗[/red] Clone of {escape(outcome.remote)} failed: {escape(outcome.message)}")


def display_clone_summary(console: Console, outcomes: list[CloneOutcome], elapsed: float, quiet: bool = False) -> None:
    if quiet:
        return
    counts = {status: 0 for status in CloneStatus}
    for outcome in outcomes:
        counts[outcome.status] += 1
    console.print(
        f"\n[bold]Clone completed[/bold] in {format_elapsed(elapsed)}: "
        f"{counts[CloneStatus.CLONED]} cloned, {counts[CloneStatus.EXISTS]} already present, "
        f"{counts[CloneStatus.UNPARSED]} unparsed, {counts[CloneStatus.FAILED]} failed"
    )


def display_grep_output(console: Console, text: str) -> None:
    """Print raw git grep output without rich markup or highlighting."""
    if not text:
        return
    console.out(text, highlight=False, end="" if text.endswith("\n") else "\n")


def display_grep_outcome(console: Console, outcome: GrepOutcome, verbose: bool = False) -> None:
    if outcome.error:
        console.print(f"[red]✗[/red] grep failed in {escape(str(outcome.repo))}: {escape(outcome.error)}")
        return
    display_grep_output(console, outcome.output)
    if verbose:
        status = "matches found" if outcome.matched else "no matches"
        console.print(f"[dim]{outcome.revisions} revisions searched, {status}[/dim]")


def display_grep_summary(console: Console, outcomes: list[GrepOutcome], elapsed: float, quiet: bool = False) -> None:
    if quiet:
        return
    matched = sum(1 for o in outcomes if o.matched)
    failed = sum(1 for o in outcomes if not o.success)
    revisions = sum(o.revisions for o in outcomes)
    console.print(
        f"\n[bold]Searched {len(outcomes)} repositories[/bold] "
        f"({revisions} revisions) in {format_elapsed(elapsed)}: "
        f"{matched} with matches, {failed} failed"
    )


def display_sync_steps(console: Console, outcome: SyncOutcome) -> None:
    """One line per git step that ran, marked with its result."""
    for step in outcome.steps:
        mark = "[green]✓[/green]" if step.success else "[red]✗[/red]"
        console.print(f"  {mark} git {escape(step.name)}", highlight=False)


def display_sync_outcome(console: Console, outcome: SyncOutcome, quiet: bool = False) -> None:
    if outcome.stashed and not quiet:
        console.print("[yellow]![/yellow] Local changes stashed (restore with 'git stash pop')")
    if outcome.success:
        if not quiet:
            console.print(f"[green]✓[/green] Updated {escape(str(outcome.repo))}")
        return
    step = outcome.failed_step
    console.print(
        f"[red]✗[/red] Update of {escape(str(outcome.repo))} failed at "
        f"git {step.name}: {escape(step.message)}"
    )


def display_sync_summary(console: Console, outcomes: list[SyncOutcome], elapsed: float, quiet: bool = False) -> None:
    failures = [o for o in outcomes if not o.success]
    if quiet and not failures:
        return

    if not quiet:
        stashed = sum(1 for o in outcomes if o.stashed)
        console.print(
            f"\n[bold]Pull completed[/bold] in {format_elapsed(elapsed)}: "
            f"{len(outcomes) - len(failures)} updated, {len(failures)} failed, {stashed} stashed"
        )

    if failures:
        table = Table(title="Failed repositories")
        table.add_column("Repository", style="cyan")
        table.add_column("Step", style="magenta")
        table.add_column("Message", style="red")
        for outcome in failures:
            step = outcome.failed_step
            table.add_row(escape(str(outcome.repo)), step.name, escape(step.message))
        console.print(table)


# done.
