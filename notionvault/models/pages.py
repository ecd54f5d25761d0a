"""
Page, database and list-response models.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import Field, field_validator

from ._base import NotionModel
from .blocks import Block, parse_block
from .properties import PropertyValue, TitleProperty, parse_property
from .rich_text import RichText, plain_text


class Parent(NotionModel):
    """Where a page lives: a database, another page, a block, or the workspace."""

    type: str
    database_id: Optional[str] = None
    page_id: Optional[str] = None
    block_id: Optional[str] = None
    workspace: Optional[bool] = None

    @property
    def id(self) -> Optional[str]:
        if self.type == "database_id":
            return self.database_id
        if self.type == "page_id":
            return self.page_id
        if self.type == "block_id":
            return self.block_id
        return None


class Page(NotionModel):
    id: str
    parent: Parent = Field(default_factory=lambda: Parent(type="workspace"))
    properties: Dict[str, PropertyValue] = Field(default_factory=dict)
    url: Optional[str] = None
    archived: bool = False

    @field_validator("properties", mode="before")
    @classmethod
    def _coerce_properties(cls, v):
        if isinstance(v, dict):
            return {k: parse_property(val) for k, val in v.items()}
        return v

    @property
    def is_database_page(self) -> bool:
        return self.parent.type == "database_id"

    def title(self) -> str:
        """Plain text of the (single) title property, or "" when absent."""
        for value in self.properties.values():
            if isinstance(value, TitleProperty):
                return plain_text(value.title)
        return ""


class Database(NotionModel):
    id: str
    title: List[RichText] = Field(default_factory=list)

    def title_text(self) -> str:
        return plain_text(self.title)


class BlockChildrenResponse(NotionModel):
    results: List[Block] = Field(default_factory=list)
    has_more: bool = False
    next_cursor: Optional[str] = None

    @field_validator("results", mode="before")
    @classmethod
    def _coerce_results(cls, v):
        if isinstance(v, list):
            return [parse_block(item) for item in v]
        return v


class DatabaseQueryResponse(NotionModel):
    results: List[Page] = Field(default_factory=list)
    has_more: bool = False
    next_cursor: Optional[str] = None


__all__ = [
    "BlockChildrenResponse",
    "Database",
    "DatabaseQueryResponse",
    "Page",
    "Parent",
]
