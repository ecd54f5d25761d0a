"""Library exceptions."""

from __future__ import annotations

from typing import Optional


class NotionVaultError(Exception):
    """Generic notionvault exception."""


# ------------------------------- Fetch ---------------------------------------


class FetchFailure(NotionVaultError):
    """A page, block or database could not be fetched from Notion."""


# ------------------------------- Render --------------------------------------


class UnsupportedBlockKind(NotionVaultError):
    """A block kind with no markdown rule was found; the whole page fails."""

    def __init__(self, block_type: str, block_id: Optional[str] = None):
        message = f"block not supported: {block_type}"
        if block_id:
            message += f" (id={block_id})"
        super().__init__(message)
        self.block_type = block_type
        self.block_id = block_id


class WriteFailure(NotionVaultError):
    """The rendered markdown could not be written to the vault."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"failed to write {path}: {reason}")
        self.path = path


# ------------------------------- Config --------------------------------------


class ConfigurationError(NotionVaultError):
    """Invalid command line or environment configuration."""
