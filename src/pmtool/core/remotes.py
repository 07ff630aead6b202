# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.10
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/pmtool/core/remotes.py

"""
Remote URL shapes and the relative clone path derived from them.

Two shapes are recognized:
- SSH shorthand: ``git@github.com:acme/widgets.git`` -> ``acme/widgets``
- HTTP(S):       ``https://github.com/acme/widgets.git`` -> ``acme/widgets``

Both forms of the same repository resolve to the same path.
"""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath
from typing import Optional

from pmtool.system.exceptions import RemoteParseError

# host part has no colon or slash; the rest must not look like "//host"
SSH_SHORTHAND_RE = re.compile(r"^[^:/]+:(?!//)(?P<path>.*)\.git$")
HTTPS_RE = re.compile(r"^https?://[^/]+/(?P<path>.*)\.git$")


class RemoteForm(str, Enum):
    SSH = "ssh"
    HTTPS = "https"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class ParsedRemote:
    """A remote URL together with the shape it matched."""
    remote: str
    form: RemoteForm
    path: Optional[PurePosixPath] = None

    @property
    def recognized(self) -> bool:
        return self.path is not None


def _clean_path(raw: str) -> Optional[PurePosixPath]:
    """Normalize a matched path; None if it is empty or escapes the root."""
    stripped = raw.strip("/")
    if not stripped:
        return None
    parts = stripped.split("/")
    if any(part in ("", ".", "..") for part in parts):
        return None
    return PurePosixPath(*parts)


def match_ssh_shorthand(remote: str) -> Optional[PurePosixPath]:
    """Path of an SSH shorthand remote (everything after the first colon, minus .git)."""
    m = SSH_SHORTHAND_RE.match(remote)
    if not m:
        return None
    return _clean_path(m.group("path"))


def match_https(remote: str) -> Optional[PurePosixPath]:
    """Path of an http(s) remote (everything after the host, minus .git)."""
    m = HTTPS_RE.match(remote)
    if not m:
        return None
    return _clean_path(m.group("path"))


def parse_remote(remote: str) -> ParsedRemote:
    """Classify ``remote`` and derive its repository path."""
    remote = remote.strip()

    path = match_ssh_shorthand(remote)
    if path is not None:
        return ParsedRemote(remote=remote, form=RemoteForm.SSH, path=path)

    path = match_https(remote)
    if path is not None:
        return ParsedRemote(remote=remote, form=RemoteForm.HTTPS, path=path)

    return ParsedRemote(remote=remote, form=RemoteForm.UNRECOGNIZED)


def resolve_repository_path(remote: str) -> PurePosixPath:
    """Return the relative clone path for ``remote``.

    Raises:
        RemoteParseError: If the remote matches neither shape
    """
    parsed = parse_remote(remote)
    if not parsed.recognized:
        raise RemoteParseError(f"Cannot parse repository path from remote: {remote}", remote=remote)
    return parsed.path
