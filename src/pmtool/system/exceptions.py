# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.08
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/pmtool/system/exceptions.py

"""
pm-tool exception classes.

Precondition failures (missing tool, unreadable catalog, bad config) abort
a whole command. Per-record problems (unparsable remote, failed clone) are
caught by the batch loops and reported without stopping the batch.
"""


class PMError(Exception):
    """Base exception for all pm-tool errors."""
    pass


class ConfigError(PMError):
    """Raised when the user configuration cannot be loaded or validated."""
    pass


class CatalogError(PMError):
    """Raised when the remote catalog is missing, unreadable or malformed."""

    def __init__(self, message: str, path: str = None):
        self.path = path
        super().__init__(message)


class ToolNotFoundError(PMError):
    """Raised when a required external tool is not on PATH."""

    def __init__(self, message: str, tool: str = None):
        self.tool = tool
        super().__init__(message)


class CommandError(PMError):
    """Raised when an external command exits non-zero (with check=True)."""

    def __init__(self, message: str, command: list[str] = None, returncode: int = None, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


class RemoteParseError(PMError):
    """Raised when a remote URL matches neither supported shape."""

    def __init__(self, message: str, remote: str = None):
        self.remote = remote
        super().__init__(message)
