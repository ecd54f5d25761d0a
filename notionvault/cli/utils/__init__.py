"""Shared helpers for the notionvault CLI."""
