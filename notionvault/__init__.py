"""Export Notion pages and databases to Obsidian-flavoured Markdown."""

from .client import NotionClient
from .exceptions import (
    ConfigurationError,
    FetchFailure,
    NotionVaultError,
    UnsupportedBlockKind,
    WriteFailure,
)
from .rendering.options import ExportConfig, PropertyFilter
from .service import VaultExporter, render_batch

__all__ = [
    "ConfigurationError",
    "ExportConfig",
    "FetchFailure",
    "NotionClient",
    "NotionVaultError",
    "PropertyFilter",
    "UnsupportedBlockKind",
    "VaultExporter",
    "WriteFailure",
    "render_batch",
]
