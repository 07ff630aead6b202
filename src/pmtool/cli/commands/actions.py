# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.07
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/pmtool/cli/commands/actions.py

"""
Per-repository action handlers.

Handles: grep, pull
"""

import time
from pathlib import Path
from typing import Any, Optional

from rich.console import Console

from pmtool.core.discovery import find_repositories
from pmtool.core.operations import grep_history, sync_repository
from pmtool.system.display import (
    display_grep_outcome,
    display_grep_output,
    display_grep_summary,
    display_repository_header,
    display_sync_outcome,
    display_sync_steps,
    display_sync_summary,
)


def grep(
    console: Console,
    root: Path,
    pattern: str,
    batch_size: int = 256,
    max_revisions: Optional[int] = None,
    fixed_strings: bool = False,
    ignore_case: bool = False,
    to_json: bool = False,
    verbose: bool = False,
    quiet: bool = False,
) -> dict[str, Any]:
    """Search the full history of every repository under root.

    Matches are streamed batch by batch; in JSON mode they are kept on the
    outcomes instead.
    """
    outcomes = []
    started = time.monotonic()
    for repo in find_repositories(root):
        if not quiet:
            display_repository_header(console, repo)
        outcome = grep_history(
            repo,
            pattern,
            batch_size=batch_size,
            max_revisions=max_revisions,
            fixed_strings=fixed_strings,
            ignore_case=ignore_case,
            on_output=None if to_json else lambda text: display_grep_output(console, text),
        )
        display_grep_outcome(console, outcome, verbose=verbose)
        outcomes.append(outcome)

    display_grep_summary(console, outcomes, time.monotonic() - started, quiet=quiet)
    return {
        'operation': 'grep',
        'pattern': pattern,
        'outcomes': outcomes,
    }


def pull(
    console: Console,
    root: Path,
    branch: str = "master",
    remote_name: str = "origin",
    verbose: bool = False,
    quiet: bool = False,
) -> dict[str, Any]:
    """Stash, check out branch and merge it from remote in every repository.

    A failure in one repository is reported and the next one is processed.
    """
    outcomes = []
    started = time.monotonic()
    for repo in find_repositories(root):
        if not quiet:
            display_repository_header(console, repo)
        outcome = sync_repository(repo, branch=branch, remote_name=remote_name)
        if verbose:
            display_sync_steps(console, outcome)
        display_sync_outcome(console, outcome, quiet=quiet)
        outcomes.append(outcome)

    display_sync_summary(console, outcomes, time.monotonic() - started, quiet=quiet)
    return {
        'operation': 'pull',
        'branch': branch,
        'remote': remote_name,
        'outcomes': outcomes,
    }
