"""
Cross-page reference resolution.

When a page mentions or links another page, the referenced page is fetched,
rendered and written to the vault on first encounter, and the mention is
replaced by an Obsidian link token `[[title]]`. Every page id moves through
unseen -> IN_PROGRESS -> DONE exactly once per run:

  - unseen: claim it, work out its title and publish the token, then render
    and write it, then commit
  - IN_PROGRESS, claimed by the calling thread: a cycle (page mentions
    itself, directly or not); the reference renders as ""
  - IN_PROGRESS, claimed by another worker: wait until that worker publishes
    the token. Publishing only fetches the page and its parent, never a
    nested reference, so the wait is bounded.
  - DONE: the cached token, no I/O

Failures in nested work degrade to "" and are committed as such, so a broken
page is not retried within the same run. A worker that waited on a page whose
body later fails to render keeps the token it was handed.
"""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from ..exceptions import NotionVaultError
from ..models.pages import Page
from .exporter import DocumentRenderer
from .options import PropertyFilter
from .paths import note_path
from .renderer_iface import BlockSource

LOGGER = logging.getLogger(__name__)


class RefState(enum.Enum):
    IN_PROGRESS = "in_progress"
    DONE = "done"


@dataclass
class CacheEntry:
    state: RefState
    token: str = ""
    owner: Optional[int] = None
    # set once `token` is final enough for other threads to use
    published: threading.Event = field(default_factory=threading.Event, repr=False)


class ReferenceCache:
    """
    Thread-safe three-state cache keyed by page id.

    `claim` is an atomic check-and-mark under one lock and records the
    claiming thread; `publish` and `commit` store tokens under a second lock.
    Neither lock is held by callers while they do network or disk I/O.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, CacheEntry] = {}
        self._claim_lock = threading.Lock()
        self._commit_lock = threading.Lock()

    def claim(self, page_id: str) -> Tuple[bool, Optional[CacheEntry]]:
        """(True, None) if the caller now owns `page_id`, else (False, entry)."""
        with self._claim_lock:
            entry = self._entries.get(page_id)
            if entry is not None:
                return False, entry
            self._entries[page_id] = CacheEntry(
                RefState.IN_PROGRESS, owner=threading.get_ident()
            )
            return True, None

    def publish(self, page_id: str, token: str) -> None:
        """Hand `token` to waiting threads while the page is still rendering."""
        with self._commit_lock:
            entry = self._entries.get(page_id)
            if entry is None or entry.state is RefState.DONE:
                return
            entry.token = token
            entry.published.set()

    def commit(self, page_id: str, token: str) -> None:
        with self._commit_lock:
            entry = self._entries.get(page_id)
            if entry is None:
                entry = self._entries[page_id] = CacheEntry(RefState.IN_PROGRESS)
            elif entry.state is RefState.DONE:
                LOGGER.debug("Reference %s already committed", page_id)
                return
            entry.token = token
            entry.state = RefState.DONE
            entry.published.set()

    def get(self, page_id: str) -> Optional[CacheEntry]:
        return self._entries.get(page_id)

    def __len__(self) -> int:
        return len(self._entries)


def _normalize_id(value: Optional[str]) -> str:
    return (value or "").replace("-", "").lower()


class ReferenceResolver:
    """
    Resolve page ids to link tokens, materializing each page once.

    Nested pages are written below `vault_path`:
      - database parent: `<title>.md`, inside a folder named after the
        database unless it is `root_database_id`
      - page or block parent: `<parent title>/<title>.md` (the parent's title
        stands in when the page has none); no front matter
      - workspace parent: `<title>.md`
    """

    def __init__(
        self,
        source: BlockSource,
        vault_path: str,
        *,
        root_database_id: Optional[str] = None,
        property_filter: Optional[PropertyFilter] = None,
        cache: Optional[ReferenceCache] = None,
    ):
        self._source = source
        self._vault = vault_path
        self._root_db = _normalize_id(root_database_id)
        self.cache = cache or ReferenceCache()
        # nested pages get no front matter unless a filter is given
        self._documents = DocumentRenderer(source, self, property_filter)

    def resolve(self, page_id: str) -> str:
        claimed, entry = self.cache.claim(page_id)
        if not claimed:
            if entry.state is RefState.DONE:
                return entry.token
            if entry.owner == threading.get_ident():
                LOGGER.debug("Reference %s is a cycle; rendering empty", page_id)
                return ""
            LOGGER.debug("Waiting for another worker to publish %s", page_id)
            entry.published.wait()
            return entry.token

        token = ""
        try:
            token = self._materialize(page_id)
        except NotionVaultError as e:
            LOGGER.warning("Could not resolve page reference %s: %s", page_id, e)
        finally:
            self.cache.commit(page_id, token)
        return token

    def destination(self, page: Page) -> Tuple[str, str, bool]:
        """(title, file path, is database page) for a referenced page."""
        parent = page.parent
        if parent.type == "database_id":
            title = page.title()
            folder = None
            if _normalize_id(parent.database_id) != self._root_db:
                folder = self._source.fetch_container_title(parent.database_id or "")
            return title, note_path(self._vault, title, folder), True

        if parent.type in ("page_id", "block_id"):
            parent_page = self._source.fetch_document(parent.id or "")
            folder = parent_page.title()
            title = page.title() or folder
            return title, note_path(self._vault, title, folder), False

        if parent.type == "workspace":
            title = page.title()
            return title, note_path(self._vault, title), False

        raise NotionVaultError(f"unsupported parent type {parent.type!r} for {page.id}")

    def _materialize(self, page_id: str) -> str:
        page = self._source.fetch_document(page_id)
        title, path, database_page = self.destination(page)
        if not title:
            LOGGER.warning("Referenced page %s has no title; not written", page_id)
            return ""
        token = f"[[{title}]]"
        self.cache.publish(page_id, token)
        LOGGER.info("Materializing referenced page %r -> %s", title, path)
        self._documents.render_to_path(page, path, database_page=database_page)
        return token


__all__ = ["CacheEntry", "RefState", "ReferenceCache", "ReferenceResolver"]
