# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.01.08
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/pmtool/system/execution.py

"""Subprocess execution for git and other external tools.

Every call takes an explicit ``cwd`` instead of changing the process
working directory, so per-repository operations never share state.
"""

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from loguru import logger

from pmtool.system.exceptions import CommandError, ToolNotFoundError


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a finished external command."""
    returncode: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.returncode == 0


def require_tool(name: str) -> str:
    """Return the resolved path of ``name`` or raise ToolNotFoundError."""
    resolved = shutil.which(name)
    if resolved is None:
        raise ToolNotFoundError(f"Required tool '{name}' not found on PATH", tool=name)
    return resolved


class CommandExecutor:
    """Thin wrapper around subprocess.run with consistent error handling."""

    @staticmethod
    def run_local(
        cmd: list[str],
        timeout: Optional[float] = None,
        check: bool = True,
        cwd: Optional[Union[str, Path]] = None,
    ) -> CommandResult:
        """Run a command locally and capture its output.

        Args:
            cmd: Command and arguments
            timeout: Seconds before subprocess.TimeoutExpired is raised
            check: Raise CommandError on non-zero exit
            cwd: Directory to run in (process cwd is left untouched)

        Returns:
            CommandResult with exit status and decoded output

        Raises:
            CommandError: If check is True and the command fails, or if the
                executable cannot be started
        """
        # git output may carry bytes from non-UTF-8 files in any revision
        kwargs = {"capture_output": True, "text": True, "encoding": "utf-8", "errors": "replace", "timeout": timeout}
        if cwd is not None:
            kwargs["cwd"] = str(cwd)

        logger.debug(f"Running {' '.join(cmd)}" + (f" in {cwd}" if cwd is not None else ""))
        try:
            proc = subprocess.run(cmd, **kwargs)
        except OSError as e:
            raise CommandError(f"Could not start {cmd[0]}: {e}", command=cmd) from e

        result = CommandResult(returncode=proc.returncode, stdout=proc.stdout, stderr=proc.stderr)

        if check and not result.success:
            stderr = (result.stderr or "").strip()
            if stderr:
                message = f"Local command failed: {stderr}"
            else:
                message = f"Command failed with exit code {result.returncode}"
            raise CommandError(message, command=cmd, returncode=result.returncode, stderr=stderr)

        return result

    @classmethod
    def run_git(
        cls,
        repo_dir: Union[str, Path],
        args: list[str],
        timeout: Optional[float] = None,
        check: bool = True,
    ) -> CommandResult:
        """Run ``git <args>`` inside ``repo_dir``."""
        return cls.run_local(["git", *args], timeout=timeout, check=check, cwd=repo_dir)
