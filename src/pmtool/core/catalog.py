# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.10
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/pmtool/core/catalog.py

"""
The remote catalog: a JSON list of ``{"remote": <url>}`` objects.

scan writes it (always replacing the whole file); clone reads it. Files
written by other tools are accepted as long as they have the same shape.
"""

import json
import os
from pathlib import Path
from typing import Iterable, Optional

import orjson
from loguru import logger
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from pmtool.system.exceptions import CatalogError, CommandError
from pmtool.system.execution import CommandExecutor


class RemoteRecord(BaseModel):
    """One catalog entry."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    remote: str


_CATALOG_ADAPTER = TypeAdapter(list[RemoteRecord])


def get_remote_url(repo_dir: Path, remote_name: str = "origin", executor=CommandExecutor) -> Optional[str]:
    """Return the configured URL of ``remote_name`` in ``repo_dir``, or None."""
    try:
        result = executor.run_git(repo_dir, ["remote", "get-url", remote_name], check=False)
    except CommandError as e:
        logger.debug(f"git remote get-url failed in {repo_dir}: {e}")
        return None

    if not result.success:
        logger.debug(f"No remote '{remote_name}' in {repo_dir}")
        return None

    url = result.stdout.strip()
    return url or None


def build_catalog(
    repos: Iterable[Path],
    remote_name: str = "origin",
    executor=CommandExecutor,
) -> list[RemoteRecord]:
    """One record per repository with a configured remote, in walk order.

    Repositories without the remote are left out. Duplicate URLs are kept.
    """
    records = []
    for repo_dir in repos:
        url = get_remote_url(repo_dir, remote_name, executor=executor)
        if url is None:
            continue
        records.append(RemoteRecord(remote=url))
    return records


def format_catalog(records: Iterable[RemoteRecord]) -> str:
    """Serialize records one per line; an empty catalog is ``[\\n]``."""
    # stdlib json keeps the `{"remote": "<url>"}` spacing; orjson emits compact separators only
    entries = [f"  {json.dumps({'remote': r.remote}, ensure_ascii=False)}" for r in records]
    if not entries:
        return "[\n]\n"
    return "[\n" + ",\n".join(entries) + "\n]\n"


def write_catalog(path: Path, records: Iterable[RemoteRecord]) -> Path:
    """Replace the catalog at ``path`` with ``records``."""
    path = Path(path).expanduser()
    text = format_catalog(records)

    tmp_path = path.with_name(f".{path.name}.tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_text(text, encoding="utf-8")
        os.replace(tmp_path, path)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        raise CatalogError(f"Cannot write catalog {path}: {e}", path=str(path)) from e

    logger.debug(f"Wrote catalog {path}")
    return path


def load_catalog(path: Path) -> list[RemoteRecord]:
    """Read and validate the catalog.

    Raises:
        CatalogError: If the file is missing, is not JSON, or does not
            have the list-of-remote-objects shape
    """
    path = Path(path).expanduser()
    try:
        raw = path.read_bytes()
    except FileNotFoundError as e:
        raise CatalogError(f"Catalog {path} not found; run 'pm-tool scan' first", path=str(path)) from e
    except OSError as e:
        raise CatalogError(f"Cannot read catalog {path}: {e}", path=str(path)) from e

    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise CatalogError(f"Catalog {path} is not valid JSON: {e}", path=str(path)) from e

    try:
        return _CATALOG_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise CatalogError(
            f"Catalog {path} must be a list of {{\"remote\": \"<url>\"}} objects: {e}",
            path=str(path)
        ) from e
