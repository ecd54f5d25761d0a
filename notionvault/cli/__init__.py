"""Command line interface for notionvault."""
