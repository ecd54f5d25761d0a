"""
Low-level client for the Notion REST API.

Used by the export service and the renderers as their `BlockSource`. Returns
typed Pydantic models from notionvault.models and hides HTTP details.
"""

from __future__ import annotations

import json
import logging
import os
import time
from typing import Any, Dict, Iterator, List, Optional

import requests
from pydantic import ValidationError

from .exceptions import FetchFailure
from .models.blocks import Block
from .models.pages import (
    BlockChildrenResponse,
    Database,
    DatabaseQueryResponse,
    Page,
)

LOGGER = logging.getLogger(__name__)

NOTION_API_URL = "https://api.notion.com/v1"
NOTION_VERSION = "2022-06-28"
PAGE_SIZE = 100


# ------------------------------- Errors --------------------------------------


class NotionError(FetchFailure):
    """Base Notion transport error."""


class NotionAuthError(NotionError):
    """Missing or invalid integration token (401/403)."""


class NotionNotFound(NotionError):
    """404: the object does not exist or is not shared with the integration."""


class NotionRateLimited(NotionError):
    """429 Too Many Requests."""

    def __init__(self, message: str, retry_after: Optional[float] = None):
        super().__init__(message)
        self.retry_after = retry_after


class NotionApiError(NotionError):
    """Catch-all API error."""

    def __init__(self, message: str, payload: Optional[object] = None):
        super().__init__(message)
        self.payload = payload


# ------------------------------- Transport -----------------------------------


class _NotionHTTPClient:
    """
    Minimal HTTP transport:
      - Bearer token + Notion-Version headers on every request
      - JSON requests via `json=payload`
      - Bounded debug dumps (NOTIONVAULT_DEBUG_MAX_BYTES)
    """

    def __init__(
        self,
        token: str,
        *,
        session: Optional[requests.Session] = None,
        base_url: str = NOTION_API_URL,
        notion_version: str = NOTION_VERSION,
    ):
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Notion-Version": notion_version,
                "Content-Type": "application/json",
            }
        )
        LOGGER.debug("Initialized _NotionHTTPClient with base_url: %s", self._base_url)

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict:
        url = f"{self._base_url}{path}"
        LOGGER.debug("GET %s params=%s", url, params)
        try:
            resp = self._session.get(url, params=params)
        except requests.RequestException as e:
            LOGGER.error("GET %s failed: %s", url, e)
            raise NotionApiError(f"GET {path} failed: {e}") from e
        return self._handle(path, url, params or {}, resp)

    def post(self, path: str, payload: Dict) -> Dict:
        url = f"{self._base_url}{path}"
        LOGGER.debug("POST %s", url)
        try:
            resp = self._session.post(url, json=payload)
        except requests.RequestException as e:
            LOGGER.error("POST %s failed: %s", url, e)
            raise NotionApiError(f"POST {path} failed: {e}") from e
        return self._handle(path, url, payload, resp)

    def _handle(self, path: str, url: str, payload: Dict, resp) -> Dict:
        code = getattr(resp, "status_code", 0)
        LOGGER.debug("%s returned status %d", url, code)
        if code >= 400:
            self._dump_http_debug(path.strip("/").replace("/", "_"), url, payload, resp)
            if code in (401, 403):
                LOGGER.error("Request to %s failed with auth error: %d", url, code)
                raise NotionAuthError(f"HTTP {code}: unauthorized")
            if code == 404:
                raise NotionNotFound(f"HTTP 404: {path} not found")
            if code == 429:
                retry_after = None
                hdr = resp.headers.get("Retry-After")
                if hdr:
                    try:
                        retry_after = float(hdr)
                    except ValueError:
                        retry_after = None
                LOGGER.warning(
                    "Request to %s was rate-limited. Retry after: %s", url, retry_after
                )
                raise NotionRateLimited(
                    "HTTP 429: rate limited", retry_after=retry_after
                )
            try:
                body = resp.json()
            except ValueError:
                body = getattr(resp, "text", None)
            LOGGER.error("Request to %s failed with code %d", url, code)
            raise NotionApiError(f"HTTP {code}", payload=body)
        try:
            return resp.json()
        except ValueError:
            self._dump_http_debug(path.strip("/").replace("/", "_"), url, payload, resp)
            LOGGER.error("Failed to parse JSON response from %s", url)
            raise NotionApiError(
                "Invalid JSON response", payload=getattr(resp, "text", None)
            )

    @staticmethod
    def _dump_http_debug(op: str, url: str, payload: Dict, resp) -> None:
        if not os.getenv("NOTIONVAULT_DEBUG"):
            return
        ts = time.strftime("%Y%m%d-%H%M%S")
        out_dir = os.path.join("workspace", "notionvault_debug")
        try:
            os.makedirs(out_dir, exist_ok=True)
            with open(
                os.path.join(out_dir, f"{ts}_{op}_http_request.json"),
                "w",
                encoding="utf-8",
            ) as f:
                json.dump(
                    {"url": url, "payload": payload}, f, ensure_ascii=False, indent=2
                )
            body_text = getattr(resp, "text", None) or ""
            max_bytes = int(os.getenv("NOTIONVAULT_DEBUG_MAX_BYTES", "524288"))
            with open(
                os.path.join(out_dir, f"{ts}_{op}_http_response.txt"),
                "w",
                encoding="utf-8",
            ) as f:
                f.write(f"status={getattr(resp, 'status_code', None)}\nurl={url}\n\n")
                if len(body_text) > max_bytes:
                    f.write(body_text[:max_bytes] + "\n[truncated]\n")
                else:
                    f.write(body_text)
        except OSError as e:
            LOGGER.debug("Could not write HTTP debug dump: %s", e)


# ------------------------------ Raw client -----------------------------------


class NotionClient:
    """
    Notion API client.

    Raw methods map 1:1 to endpoints:
      - GET  /pages/{id}
      - GET  /databases/{id}
      - GET  /blocks/{id}/children   (paged generator)
      - POST /databases/{id}/query   (paged generator)

    The `fetch_*` methods implement the renderer's BlockSource protocol.
    """

    def __init__(
        self,
        token: str,
        *,
        session: Optional[requests.Session] = None,
        base_url: str = NOTION_API_URL,
        notion_version: str = NOTION_VERSION,
    ):
        self._http = _NotionHTTPClient(
            token, session=session, base_url=base_url, notion_version=notion_version
        )
        LOGGER.info("NotionClient initialized.")

    # ----- Pages / databases -----

    def retrieve_page(self, page_id: str) -> Page:
        data = self._http.get(f"/pages/{page_id}")
        return self._validate(Page, "pages.retrieve", data)

    def retrieve_database(self, database_id: str) -> Database:
        data = self._http.get(f"/databases/{database_id}")
        return self._validate(Database, "databases.retrieve", data)

    # ----- Paged generators -----

    def list_block_children(self, block_id: str) -> Iterator[BlockChildrenResponse]:
        cursor: Optional[str] = None
        page_num = 1
        while True:
            params: Dict[str, Any] = {"page_size": PAGE_SIZE}
            if cursor:
                params["start_cursor"] = cursor
            LOGGER.debug("Fetching children of %s, page %d", block_id, page_num)
            data = self._http.get(f"/blocks/{block_id}/children", params)
            resp = self._validate(BlockChildrenResponse, "blocks.children", data)
            yield resp
            if not resp.has_more or not resp.next_cursor:
                return
            cursor = resp.next_cursor
            page_num += 1

    def query_database(self, database_id: str) -> Iterator[DatabaseQueryResponse]:
        payload: Dict[str, Any] = {"page_size": PAGE_SIZE}
        page_num = 1
        LOGGER.info("Start querying database: %s", database_id)
        while True:
            data = self._http.post(f"/databases/{database_id}/query", payload)
            resp = self._validate(DatabaseQueryResponse, "databases.query", data)
            LOGGER.info(
                "Query page %d returned %d pages.", page_num, len(resp.results)
            )
            yield resp
            if not resp.has_more or not resp.next_cursor:
                return
            payload = {**payload, "start_cursor": resp.next_cursor}
            page_num += 1

    def iter_database_pages(self, database_id: str) -> Iterator[Page]:
        for resp in self.query_database(database_id):
            yield from resp.results

    # ----- BlockSource -----

    def fetch_children(self, block_id: str) -> List[Block]:
        out: List[Block] = []
        for resp in self.list_block_children(block_id):
            out.extend(resp.results)
        return out

    def fetch_document(self, page_id: str) -> Page:
        return self.retrieve_page(page_id)

    def fetch_container_title(self, container_id: str) -> str:
        return self.retrieve_database(container_id).title_text()

    # ----- Validation -----

    @staticmethod
    def _validate(model, op: str, data: Dict):
        try:
            return model.model_validate(data)
        except ValidationError as e:
            NotionClient._log_validation(op, data, e)
            LOGGER.error("%s response validation failed.", op)
            raise NotionApiError(f"{op} response validation failed", payload=data)

    @staticmethod
    def _log_validation(op: str, data: Dict, err: ValidationError) -> None:
        if not os.getenv("NOTIONVAULT_DEBUG"):
            return
        ts = time.strftime("%Y%m%d-%H%M%S")
        out_dir = os.path.join("workspace", "notionvault_debug")
        try:
            os.makedirs(out_dir, exist_ok=True)
            with open(
                os.path.join(out_dir, f"{ts}_{op}_validation.json"),
                "w",
                encoding="utf-8",
            ) as f:
                json.dump(
                    {"op": op, "errors": err.errors(), "data": data},
                    f,
                    ensure_ascii=False,
                    indent=2,
                    default=str,
                )
        except OSError as e:
            LOGGER.debug("Could not write validation dump: %s", e)
