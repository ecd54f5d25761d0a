"""Command modules for the notionvault CLI."""

# Import all command modules here for easy access
from notionvault.cli.commands import migrate

__all__ = ["migrate"]
