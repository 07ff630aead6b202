# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.01
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/pmtool/cli/utils.py

"""
CLI utility functions shared by the pm-tool commands.

This module provides standardized functions for:
- Precondition checks (required tools, configuration)
- Running a command handler with JSON capture
- Error handling with typer exits

All functions handle console output and typer exits consistently.
"""

from typing import Any, Callable, Optional

import typer
from rich.console import Console
from rich.markup import escape

from pmtool.config.manager import UserConfig, load_merged_user_config
from pmtool.data.json_collector import JSONCollector
from pmtool.system.exceptions import ConfigError, PMError, ToolNotFoundError
from pmtool.system.execution import require_tool
from pmtool.system.logging_setup import setup_logging


def make_console(to_json: bool = False) -> Console:
    """Console for human output; silenced in --json mode so stdout stays parseable."""
    return Console(quiet=to_json, soft_wrap=True)


def ensure_tool_available(console: Console, tool: str = "git") -> str:
    """
    Check that an external tool is on PATH.

    Raises:
        typer.Exit: If the tool cannot be found
    """
    try:
        return require_tool(tool)
    except ToolNotFoundError as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        console.print(f"Install {tool} or add it to PATH, then retry")
        raise typer.Exit(1)


def load_config_with_console(console: Console, debug: bool = False, verbose: bool = False) -> UserConfig:
    """
    Load the user configuration and configure logging from it.

    Args:
        console: Rich console for output
        debug: Enable debug logging on stderr
        verbose: Show loading message if True

    Returns:
        Loaded configuration object

    Raises:
        typer.Exit: If configuration loading fails
    """
    if verbose:
        console.print("[dim]Loading configuration...[/dim]")

    try:
        config = load_merged_user_config()
    except ConfigError as e:
        console.print(f"[red]✗[/red] Configuration error: {escape(str(e))}")
        raise typer.Exit(1)

    setup_logging(debug=debug, local_log=config.local_log)
    return config


def handle_operation_error(console: Console, operation: str, error: Exception) -> None:
    """Handle operation errors with consistent formatting."""
    console.print(f"[red]✗[/red] Error {operation}: {escape(str(error))}")
    raise typer.Exit(1)


def run_handler(
    console: Console,
    operation: str,
    handler: Callable[[], Optional[dict[str, Any]]],
    to_json: bool = False,
) -> Optional[dict[str, Any]]:
    """Run a command handler, capturing its result (or error) for --json.

    Precondition failures raised as PMError end the command with exit 1.
    """
    collector = JSONCollector(enabled=to_json)
    try:
        result = handler()
    except PMError as e:
        collector.capture_error(e)
        collector.output()
        handle_operation_error(console, operation, e)

    collector.capture_success(result)
    collector.output()
    return result
