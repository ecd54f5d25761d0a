"""
Exporter for Notion pages to Obsidian Markdown files.

`DocumentRenderer` fetches a page's root blocks, renders front matter (for
database pages) and body, and writes the result atomically: content goes to
a temporary file in the destination directory and is moved into place with
`os.replace`, so a failed render never leaves a partial file behind.
"""

from __future__ import annotations

import logging
import os
import tempfile
from typing import Optional

from ..exceptions import WriteFailure
from ..models.pages import Page
from .frontmatter import render_front_matter
from .options import PropertyFilter
from .renderer import BlockRenderer
from .renderer_iface import BlockSource, PageLinker

LOGGER = logging.getLogger(__name__)


class DocumentRenderer:
    def __init__(
        self,
        source: BlockSource,
        linker: Optional[PageLinker] = None,
        property_filter: Optional[PropertyFilter] = None,
    ):
        self._source = source
        self._blocks = BlockRenderer(source, linker)
        self._filter = property_filter or PropertyFilter()

    def render(self, page: Page, *, database_page: bool) -> str:
        """Markdown for a whole page. Fetch and render errors propagate."""
        blocks = self._source.fetch_children(page.id)
        LOGGER.debug("Page %s has %d root blocks", page.id, len(blocks))
        head = render_front_matter(page.properties, self._filter) if database_page else ""
        return head + self._blocks.render(blocks)

    def render_to_path(self, page: Page, path: str, *, database_page: bool) -> str:
        content = self.render(page, database_page=database_page)
        write_markdown(path, content)
        LOGGER.info("Wrote %s", path)
        return path


def write_markdown(path: str, content: str) -> None:
    """Atomically replace `path` with `content`; raises WriteFailure."""
    directory = os.path.dirname(path) or "."
    tmp_path = None
    try:
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=directory, prefix=".notionvault-", suffix=".tmp"
        )
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_path, path)
        tmp_path = None
    except OSError as e:
        raise WriteFailure(path, str(e)) from e
    finally:
        if tmp_path is not None:
            try:
                os.remove(tmp_path)
            except OSError:
                LOGGER.debug("Could not remove temp file %s", tmp_path)


__all__ = ["DocumentRenderer", "write_markdown"]
