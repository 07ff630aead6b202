# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.07
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/pmtool/cli/commands/catalog.py

"""
Catalog command handlers.

Handles: scan, clone
"""

import time
from pathlib import Path
from typing import Any

from rich.console import Console

from pmtool.core.catalog import load_catalog
from pmtool.core.operations import clone_from_catalog, scan_repositories
from pmtool.system.display import (
    display_clone_outcome,
    display_clone_start,
    display_clone_summary,
    display_scan_result,
)


def scan(
    console: Console,
    root: Path,
    catalog_path: Path,
    remote_name: str = "origin",
    verbose: bool = False,
    quiet: bool = False,
) -> dict[str, Any]:
    """Record the remote of every repository under root into the catalog.

    Args:
        console: Rich console for output
        root: Directory to search for repositories
        catalog_path: Catalog file to (over)write
        remote_name: Remote whose URL is recorded
        verbose: List every recorded remote
        quiet: Suppress output

    Returns:
        Scan result for JSON output
    """
    result = scan_repositories(root, catalog_path, remote_name=remote_name)
    display_scan_result(console, result, verbose=verbose, quiet=quiet)

    return {
        'operation': 'scan',
        'catalog_path': result.catalog_path,
        'repositories': result.repositories,
        'records': result.records,
    }


def clone(
    console: Console,
    catalog_path: Path,
    dest_root: Path,
    verbose: bool = False,
    quiet: bool = False,
) -> dict[str, Any]:
    """Clone every catalog remote that is not already present under dest_root.

    Raises:
        CatalogError: If the catalog is missing or malformed (before any clone)
    """
    records = load_catalog(catalog_path)
    if verbose:
        console.print(f"[dim]Loaded {len(records)} remotes from {catalog_path}[/dim]")

    started = time.monotonic()
    outcomes = clone_from_catalog(
        records,
        dest_root,
        on_clone_start=None if quiet else lambda remote, path: display_clone_start(console, remote, path),
        on_outcome=lambda outcome: display_clone_outcome(console, outcome, quiet=quiet),
    )
    display_clone_summary(console, outcomes, time.monotonic() - started, quiet=quiet)

    return {
        'operation': 'clone',
        'catalog_path': catalog_path,
        'outcomes': outcomes,
    }
