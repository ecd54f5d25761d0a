"""Public exports for Notion wire models."""

from __future__ import annotations

from .blocks import Block, KnownBlock, UnknownBlock, parse_block, parse_blocks
from .pages import BlockChildrenResponse, Database, DatabaseQueryResponse, Page, Parent
from .properties import PropertyValue, parse_property
from .rich_text import Annotations, RichText, plain_text

__all__ = [
    "Annotations",
    "Block",
    "BlockChildrenResponse",
    "Database",
    "DatabaseQueryResponse",
    "KnownBlock",
    "Page",
    "Parent",
    "PropertyValue",
    "RichText",
    "UnknownBlock",
    "parse_block",
    "parse_blocks",
    "parse_property",
    "plain_text",
]
