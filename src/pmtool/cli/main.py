# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.05.10
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/pmtool/cli/main.py

"""
CLI dispatcher routing pm-tool commands to their handlers.

Each command checks its preconditions (git on PATH, configuration, and for
clone the catalog) before touching any repository, then hands off to a
handler in pmtool.cli.commands.
"""

# Standard library imports
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any, Optional

# Third-party imports
import typer

# Local imports
from pmtool.cli.commands import actions as action_commands
from pmtool.cli.commands import catalog as catalog_commands
from pmtool.cli.utils import (
    ensure_tool_available,
    load_config_with_console,
    make_console,
    run_handler,
)
from pmtool.system.logging_setup import setup_logging

# Initialize Typer app
app = typer.Typer(
    help="""pm-tool - Batch management of the git repositories under a directory

[bold blue]Catalog:[/bold blue] scan, clone
[bold green]Repositories:[/bold green] grep, pull
""",
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        try:
            pkg_version = version("pm-tool")
        except PackageNotFoundError:
            pkg_version = "unknown"
        typer.echo(f"pm-tool version {pkg_version}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_callback, is_eager=True,
        help="Show version and exit"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """pm-tool - scan, clone, grep and pull many git repositories at once."""
    ctx.obj = {"debug": debug}
    setup_logging(debug=debug)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(2)


def _debug(ctx: typer.Context) -> bool:
    return bool(ctx.obj and ctx.obj.get("debug"))


# =============================================================================
# CATALOG COMMANDS
# =============================================================================

@app.command()
def scan(
    ctx: typer.Context,
    root: Path = typer.Option(Path("."), "--root", help="Directory to search for repositories"),
    catalog: Optional[Path] = typer.Option(None, "--catalog", help="Catalog file (default: ~/.git_projects.json)"),
    remote: Optional[str] = typer.Option(None, "--remote", help="Remote to record (default: origin)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="List every recorded remote"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress output"),
    to_json: bool = typer.Option(False, "--json", help="Output results as JSON"),
) -> Any:
    """[bold blue]Catalog[/bold blue]: Record the remote URL of every repository into the catalog."""
    console = make_console(to_json)
    config = load_config_with_console(console, debug=_debug(ctx), verbose=verbose)
    ensure_tool_available(console, "git")
    return run_handler(
        console, "scanning repositories",
        lambda: catalog_commands.scan(
            console, root,
            catalog_path=catalog or config.catalog_path,
            remote_name=remote or config.remote_name,
            verbose=verbose, quiet=quiet,
        ),
        to_json=to_json,
    )


@app.command()
def clone(
    ctx: typer.Context,
    dest: Path = typer.Option(Path("."), "--dest", help="Directory to clone beneath"),
    catalog: Optional[Path] = typer.Option(None, "--catalog", help="Catalog file (default: ~/.git_projects.json)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress output"),
    to_json: bool = typer.Option(False, "--json", help="Output results as JSON"),
) -> Any:
    """[bold blue]Catalog[/bold blue]: Clone every catalog remote that is not present yet."""
    console = make_console(to_json)
    config = load_config_with_console(console, debug=_debug(ctx), verbose=verbose)
    ensure_tool_available(console, "git")
    return run_handler(
        console, "cloning from catalog",
        lambda: catalog_commands.clone(
            console,
            catalog_path=catalog or config.catalog_path,
            dest_root=dest,
            verbose=verbose, quiet=quiet,
        ),
        to_json=to_json,
    )


# =============================================================================
# REPOSITORY COMMANDS
# =============================================================================

@app.command()
def grep(
    ctx: typer.Context,
    pattern: str = typer.Argument(..., help="Pattern to search for (git grep syntax)"),
    root: Path = typer.Option(Path("."), "--root", help="Directory to search for repositories"),
    max_revisions: Optional[int] = typer.Option(
        None, "--max-revisions", min=1, help="Only search the newest N revisions of each repository"
    ),
    fixed_strings: bool = typer.Option(False, "--fixed-strings", "-F", help="Treat the pattern as a literal string"),
    ignore_case: bool = typer.Option(False, "--ignore-case", "-i", help="Case-insensitive match"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show revision counts per repository"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print matches"),
    to_json: bool = typer.Option(False, "--json", help="Output results as JSON"),
) -> Any:
    """[bold green]Repositories[/bold green]: Search every revision of every repository."""
    console = make_console(to_json)
    config = load_config_with_console(console, debug=_debug(ctx))
    ensure_tool_available(console, "git")
    return run_handler(
        console, "searching history",
        lambda: action_commands.grep(
            console, root, pattern,
            batch_size=config.grep_batch_size,
            max_revisions=max_revisions,
            fixed_strings=fixed_strings,
            ignore_case=ignore_case,
            to_json=to_json,
            verbose=verbose, quiet=quiet,
        ),
        to_json=to_json,
    )


@app.command()
def pull(
    ctx: typer.Context,
    root: Path = typer.Option(Path("."), "--root", help="Directory to search for repositories"),
    branch: Optional[str] = typer.Option(None, "--branch", help="Branch to check out and pull (default: master)"),
    remote: Optional[str] = typer.Option(None, "--remote", help="Remote to pull from (default: origin)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show every git step"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only report failures"),
    to_json: bool = typer.Option(False, "--json", help="Output results as JSON"),
) -> Any:
    """[bold green]Repositories[/bold green]: Stash local changes, check out the primary branch and pull it."""
    console = make_console(to_json)
    config = load_config_with_console(console, debug=_debug(ctx), verbose=verbose)
    ensure_tool_available(console, "git")
    return run_handler(
        console, "pulling repositories",
        lambda: action_commands.pull(
            console, root,
            branch=branch or config.primary_branch,
            remote_name=remote or config.remote_name,
            verbose=verbose, quiet=quiet,
        ),
        to_json=to_json,
    )


if __name__ == "__main__":
    app()
