# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.05.30
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/pmtool/core/discovery.py

"""Find git working trees under a directory."""

import os
from pathlib import Path
from typing import Union

from loguru import logger

GIT_DIR = ".git"


def is_repository(path: Path) -> bool:
    """A working tree has a .git directory as an immediate child."""
    return (path / GIT_DIR).is_dir()


def find_repositories(root: Union[str, Path] = ".") -> list[Path]:
    """Return every working tree under ``root``, depth-first.

    Siblings are visited in sorted order so the result is stable for a
    given tree. Directories that cannot be listed are skipped without
    error, symlinked directories are not followed, and ``.git`` itself is
    never entered. Nested working trees are reported as well.

    Args:
        root: Directory to walk

    Returns:
        Repository paths, each built as ``root / <relative path>``
    """
    root = Path(root)
    repos = []

    # os.walk reports unreadable directories to onerror; ignore them
    for dirpath, dirnames, _filenames in os.walk(root, onerror=lambda e: None, followlinks=False):
        dirnames.sort()
        if GIT_DIR in dirnames:
            current = Path(dirpath)
            if is_repository(current):
                repos.append(current)
            dirnames.remove(GIT_DIR)

    logger.debug(f"Found {len(repos)} repositories under {root}")
    return repos
