"""
Transport-agnostic source interface for the Markdown renderers.

Defines the minimal datasource seam (`BlockSource`) that the renderers
require to walk a Notion page tree:
  - the children of a block or page (all pages of results),
  - a page (document) by id, and
  - the title of a database (container).

`PageLinker` is the narrower seam used for inline page references; the
ReferenceResolver implements it.

`notionvault.client.NotionClient` implements it over HTTP; tests use an
in-memory fake. Every method may raise `FetchFailure`.
"""

from __future__ import annotations

from typing import List, Protocol

from ..models.blocks import Block
from ..models.pages import Page


class BlockSource(Protocol):
    """Minimal datasource required by the renderers."""

    def fetch_children(self, block_id: str) -> List[Block]: ...

    def fetch_document(self, page_id: str) -> Page: ...

    def fetch_container_title(self, container_id: str) -> str: ...


class PageLinker(Protocol):
    """Turns a page id into an inline link token (`[[title]]`), or ""."""

    def resolve(self, page_id: str) -> str: ...
