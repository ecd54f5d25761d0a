"""Migrate command for the notionvault CLI."""

from typing import Optional

import typer
from rich.table import Table

from notionvault.cli.utils.console import console, setup_logging
from notionvault.client import NotionClient
from notionvault.config import (
    ENV_DATABASE_ID,
    ENV_TOKEN,
    ENV_VAULT_PATH,
    build_export_config,
)
from notionvault.exceptions import ConfigurationError, FetchFailure
from notionvault.service import VaultExporter

app = typer.Typer(help="Migrate a Notion database into an Obsidian vault")

DATABASE_HELP = (
    "Notion database ID to migrate. Add a colon and a comma separated list to "
    "choose the properties written as front matter (ID:name,date), or a '>' "
    "and a list to skip properties instead (ID>day of the week,date)."
)


@app.callback(invoke_without_command=True)
def main(
    token: Optional[str] = typer.Option(None, envvar=ENV_TOKEN, help="Notion token"),
    database: Optional[str] = typer.Option(
        None, "--id", envvar=ENV_DATABASE_ID, help=DATABASE_HELP
    ),
    vault: Optional[str] = typer.Option(
        None, envvar=ENV_VAULT_PATH, help="Obsidian vault location"
    ),
    path: str = typer.Option(
        "",
        help="Page file name built from properties, e.g. 'Date:%Y-%m-%d,Name'",
    ),
    workers: Optional[int] = typer.Option(
        None, help="Pages rendered in parallel (default 4)"
    ),
    no_progress: bool = typer.Option(False, "--no-progress", help="Hide progress bar"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Migrate every page of a Notion database into the vault."""
    setup_logging(verbose)

    if not token:
        console.print(
            "[bold red]Error:[/bold red] You must provide the notion token to run the script"
        )
        raise typer.Exit(1)
    if not database:
        console.print(
            "[bold red]Error:[/bold red] You must provide the notion database id to run the script"
        )
        raise typer.Exit(1)

    try:
        config = build_export_config(
            database=database,
            vault=vault or "",
            path_spec=path,
            max_workers=workers,
            show_progress=not no_progress,
        )
    except ConfigurationError as e:
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        raise typer.Exit(1)

    exporter = VaultExporter(NotionClient(token), config)
    try:
        failed = exporter.migrate_database()
    except (ConfigurationError, FetchFailure) as e:
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        raise typer.Exit(1)

    console.print("Finish migrating pages")
    if not failed:
        return

    # partial failure still exits 0; the summary is the report
    table = Table("Page", "Error", title=f"{len(failed)} page(s) failed")
    for page, error in failed:
        table.add_row(page.title() or page.id, str(error))
    console.print(table)
