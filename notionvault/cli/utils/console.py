"""Console and logging setup for the notionvault CLI."""

import logging

from rich.console import Console
from rich.logging import RichHandler

console = Console()
err_console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Route library logs through rich; DEBUG for notionvault when verbose."""
    logging.basicConfig(
        level=logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
        force=True,
    )
    logging.getLogger("notionvault").setLevel(
        logging.DEBUG if verbose else logging.INFO
    )
