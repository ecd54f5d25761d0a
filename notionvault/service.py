"""
High-level export service.

Public API:
  - render_batch(pages, destination_for, property_filter, *, source, ...)
        -> list[(Page, Exception)]
  - VaultExporter(client, config).migrate_database(database_id=None)
        -> list[(Page, Exception)]
  - VaultExporter.resolver -> ReferenceResolver (shared per run)

Both return the failures only; an empty list means every page was written.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator, List, Optional, Protocol, Tuple

from .exceptions import ConfigurationError
from .models.pages import Page
from .rendering.exporter import DocumentRenderer
from .rendering.options import DEFAULT_MAX_WORKERS, ExportConfig, PropertyFilter
from .rendering.paths import page_destination, parse_path_spec
from .rendering.references import ReferenceResolver
from .rendering.renderer_iface import BlockSource, PageLinker
from .scheduler import JobScheduler, RenderJob, failures

LOGGER = logging.getLogger(__name__)

Failure = Tuple[Page, Exception]


class DatabaseSource(BlockSource, Protocol):
    def iter_database_pages(self, database_id: str) -> Iterator[Page]: ...


def render_batch(
    pages: Iterable[Page],
    destination_for: Callable[[Page], str],
    property_filter: PropertyFilter,
    *,
    source: BlockSource,
    linker: Optional[PageLinker] = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
    show_progress: bool = False,
) -> List[Failure]:
    """
    Render and write each database page to `destination_for(page)`.

    Pages are independent: a page that fails (fetch, unsupported block,
    write) is reported and the others still complete.
    """
    documents = DocumentRenderer(source, linker, property_filter)

    jobs: List[RenderJob] = []
    for page in pages:
        path = destination_for(page)

        def _run(page: Page = page, path: str = path) -> str:
            return documents.render_to_path(page, path, database_page=True)

        jobs.append(RenderJob(page=page, path=path, run=_run))

    scheduler = JobScheduler(max_workers, show_progress=show_progress)
    outcomes = scheduler.run(jobs)
    return [(o.job.page, o.error) for o in failures(outcomes) if o.error is not None]


class VaultExporter:
    """
    Migrate a Notion database into an Obsidian vault.

    One ReferenceResolver (and so one reference cache) is shared by every
    page of the run.
    """

    def __init__(self, client: DatabaseSource, config: ExportConfig):
        self._client = client
        self._config = config
        self._path_spec = parse_path_spec(config.path_spec)
        self.resolver = ReferenceResolver(
            client,
            config.vault_path,
            root_database_id=config.root_database_id,
        )

    def destination_for(self, page: Page) -> str:
        return page_destination(self._config.vault_path, page, self._path_spec)

    def migrate_database(self, database_id: Optional[str] = None) -> List[Failure]:
        database_id = database_id or self._config.root_database_id
        if not database_id:
            raise ConfigurationError("no database id to migrate")

        pages = list(self._client.iter_database_pages(database_id))
        LOGGER.info("Database %s has %d pages", database_id, len(pages))

        # resolve file names up front so a bad path spec fails before any I/O
        paths = {page.id: self.destination_for(page) for page in pages}

        return render_batch(
            pages,
            lambda page: paths[page.id],
            self._config.property_filter,
            source=self._client,
            linker=self.resolver,
            max_workers=self._config.max_workers,
            show_progress=self._config.show_progress,
        )


__all__ = ["Failure", "VaultExporter", "render_batch"]
