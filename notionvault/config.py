"""
Environment and command-line configuration helpers.

Environment variables:
  NOTION_TOKEN              integration token
  NOTION_DATABASE_ID        database id spec (see parse_database_spec)
  OBSIDIAN_VAULT_PATH       output vault directory
  NOTIONVAULT_MAX_WORKERS   worker threads (default 4)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from .exceptions import ConfigurationError
from .rendering.options import DEFAULT_MAX_WORKERS, ExportConfig, PropertyFilter

LOGGER = logging.getLogger(__name__)

ENV_TOKEN = "NOTION_TOKEN"
ENV_DATABASE_ID = "NOTION_DATABASE_ID"
ENV_VAULT_PATH = "OBSIDIAN_VAULT_PATH"
ENV_MAX_WORKERS = "NOTIONVAULT_MAX_WORKERS"


@dataclass(frozen=True)
class DatabaseSpec:
    database_id: str
    property_filter: PropertyFilter


def _names(raw: str):
    return frozenset(n.strip().lower() for n in raw.split(",") if n.strip())


def parse_database_spec(spec: str) -> DatabaseSpec:
    """
    Parse `ID`, `ID:a,b` (front matter includes only a, b) or `ID>a,b`
    (front matter includes everything except a, b).
    """
    head, _, skip_raw = (spec or "").strip().partition(">")
    head, _, include_raw = head.partition(":")
    head = head.strip()
    include, skip = _names(include_raw), _names(skip_raw)
    if not head:
        raise ConfigurationError("a Notion database id is required")
    if include and skip:
        raise ConfigurationError(
            "You can not provide both skip list and include list for DB properties"
        )
    return DatabaseSpec(head, PropertyFilter(include=include, skip=skip))


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    return value if value else default


def env_max_workers() -> int:
    raw = env(ENV_MAX_WORKERS)
    if raw is None:
        return DEFAULT_MAX_WORKERS
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{ENV_MAX_WORKERS} must be an integer, got {raw!r}") from e


def build_export_config(
    *,
    database: str,
    vault: str,
    path_spec: str = "",
    max_workers: Optional[int] = None,
    show_progress: bool = True,
) -> ExportConfig:
    if not vault:
        raise ConfigurationError("an Obsidian vault path is required")
    db = parse_database_spec(database)
    workers = max_workers if max_workers is not None else env_max_workers()
    LOGGER.debug(
        "Export config: database=%s vault=%s path=%r workers=%d",
        db.database_id,
        vault,
        path_spec,
        workers,
    )
    return ExportConfig(
        vault_path=vault,
        root_database_id=db.database_id,
        property_filter=db.property_filter,
        path_spec=path_spec,
        max_workers=workers,
        show_progress=show_progress,
    )
