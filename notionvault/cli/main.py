#!/usr/bin/env python
"""Command line interface for notionvault."""

import typer

from notionvault.cli.commands import migrate

app = typer.Typer(help="Export Notion databases into an Obsidian vault")

# Add command groups
app.add_typer(migrate.app, name="migrate")


@app.callback()
def callback():
    """Notion to Obsidian Markdown exporter."""
    pass


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
