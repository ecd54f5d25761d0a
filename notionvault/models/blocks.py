"""
Block wire models (GET /v1/blocks/{id}/children).

Every block is `{"id", "type", "has_children", <type>: {...payload}}`. Known
kinds form the closed `KnownBlock` union, discriminated on `type`. Anything
else is kept as an `UnknownBlock` so the renderer decides how to fail.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import ConfigDict, Field, JsonValue, TypeAdapter, model_validator

from ._base import NotionModel
from .rich_text import RichText

# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------


class TextPayload(NotionModel):
    rich_text: List[RichText] = Field(default_factory=list)
    color: str = "default"


class HeadingPayload(TextPayload):
    is_toggleable: bool = False


class ToDoPayload(TextPayload):
    checked: bool = False


class Icon(NotionModel):
    type: str = "emoji"
    emoji: Optional[str] = None


class CalloutPayload(TextPayload):
    icon: Optional[Icon] = None


class CodePayload(TextPayload):
    language: str = "plain text"
    caption: List[RichText] = Field(default_factory=list)


class FileUrl(NotionModel):
    url: str


class FilePayload(NotionModel):
    """Payload for image, video, file and pdf blocks."""

    type: str = "external"
    external: Optional[FileUrl] = None
    file: Optional[FileUrl] = None
    caption: List[RichText] = Field(default_factory=list)

    @property
    def url(self) -> Optional[str]:
        if self.type == "external" and self.external:
            return self.external.url
        if self.type == "file" and self.file:
            return self.file.url
        return None


class UrlPayload(NotionModel):
    url: str = ""
    caption: List[RichText] = Field(default_factory=list)


class EquationPayload(NotionModel):
    expression: str


class TablePayload(NotionModel):
    table_width: int
    has_column_header: bool = False
    has_row_header: bool = False


class TableRowPayload(NotionModel):
    cells: List[List[RichText]] = Field(default_factory=list)


class TitlePayload(NotionModel):
    title: str = ""


class LinkToPagePayload(NotionModel):
    type: str = "page_id"
    page_id: Optional[str] = None
    database_id: Optional[str] = None


class EmptyPayload(NotionModel):
    pass


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------


class _BlockBase(NotionModel):
    id: str
    has_children: bool = False


class Heading1Block(_BlockBase):
    type: Literal["heading_1"] = "heading_1"
    heading_1: HeadingPayload = Field(default_factory=HeadingPayload)


class Heading2Block(_BlockBase):
    type: Literal["heading_2"] = "heading_2"
    heading_2: HeadingPayload = Field(default_factory=HeadingPayload)


class Heading3Block(_BlockBase):
    type: Literal["heading_3"] = "heading_3"
    heading_3: HeadingPayload = Field(default_factory=HeadingPayload)


class ParagraphBlock(_BlockBase):
    type: Literal["paragraph"] = "paragraph"
    paragraph: TextPayload = Field(default_factory=TextPayload)


class ToDoBlock(_BlockBase):
    type: Literal["to_do"] = "to_do"
    to_do: ToDoPayload = Field(default_factory=ToDoPayload)


class BulletedListItemBlock(_BlockBase):
    type: Literal["bulleted_list_item"] = "bulleted_list_item"
    bulleted_list_item: TextPayload = Field(default_factory=TextPayload)


class NumberedListItemBlock(_BlockBase):
    type: Literal["numbered_list_item"] = "numbered_list_item"
    numbered_list_item: TextPayload = Field(default_factory=TextPayload)


class CalloutBlock(_BlockBase):
    type: Literal["callout"] = "callout"
    callout: CalloutPayload = Field(default_factory=CalloutPayload)


class ToggleBlock(_BlockBase):
    type: Literal["toggle"] = "toggle"
    toggle: TextPayload = Field(default_factory=TextPayload)


class QuoteBlock(_BlockBase):
    type: Literal["quote"] = "quote"
    quote: TextPayload = Field(default_factory=TextPayload)


class DividerBlock(_BlockBase):
    type: Literal["divider"] = "divider"
    divider: EmptyPayload = Field(default_factory=EmptyPayload)


class CodeBlock(_BlockBase):
    type: Literal["code"] = "code"
    code: CodePayload = Field(default_factory=CodePayload)


class ImageBlock(_BlockBase):
    type: Literal["image"] = "image"
    image: FilePayload = Field(default_factory=FilePayload)


class VideoBlock(_BlockBase):
    type: Literal["video"] = "video"
    video: FilePayload = Field(default_factory=FilePayload)


class FileBlock(_BlockBase):
    type: Literal["file"] = "file"
    file: FilePayload = Field(default_factory=FilePayload)


class PdfBlock(_BlockBase):
    type: Literal["pdf"] = "pdf"
    pdf: FilePayload = Field(default_factory=FilePayload)


class EmbedBlock(_BlockBase):
    type: Literal["embed"] = "embed"
    embed: UrlPayload = Field(default_factory=UrlPayload)


class BookmarkBlock(_BlockBase):
    type: Literal["bookmark"] = "bookmark"
    bookmark: UrlPayload = Field(default_factory=UrlPayload)


class EquationBlock(_BlockBase):
    type: Literal["equation"] = "equation"
    equation: EquationPayload


class TableBlock(_BlockBase):
    type: Literal["table"] = "table"
    table: TablePayload


class TableRowBlock(_BlockBase):
    type: Literal["table_row"] = "table_row"
    table_row: TableRowPayload = Field(default_factory=TableRowPayload)


class ChildPageBlock(_BlockBase):
    type: Literal["child_page"] = "child_page"
    child_page: TitlePayload = Field(default_factory=TitlePayload)


class ChildDatabaseBlock(_BlockBase):
    type: Literal["child_database"] = "child_database"
    child_database: TitlePayload = Field(default_factory=TitlePayload)


class ColumnListBlock(_BlockBase):
    type: Literal["column_list"] = "column_list"
    column_list: EmptyPayload = Field(default_factory=EmptyPayload)


class ColumnBlock(_BlockBase):
    type: Literal["column"] = "column"
    column: EmptyPayload = Field(default_factory=EmptyPayload)


class LinkToPageBlock(_BlockBase):
    type: Literal["link_to_page"] = "link_to_page"
    link_to_page: LinkToPagePayload = Field(default_factory=LinkToPagePayload)


class UnsupportedBlock(_BlockBase):
    """Placeholder Notion itself sends for blocks its API cannot expose."""

    type: Literal["unsupported"] = "unsupported"
    unsupported: EmptyPayload = Field(default_factory=EmptyPayload)


KnownBlock = Annotated[
    Union[
        Heading1Block,
        Heading2Block,
        Heading3Block,
        ParagraphBlock,
        ToDoBlock,
        BulletedListItemBlock,
        NumberedListItemBlock,
        CalloutBlock,
        ToggleBlock,
        QuoteBlock,
        DividerBlock,
        CodeBlock,
        ImageBlock,
        VideoBlock,
        FileBlock,
        PdfBlock,
        EmbedBlock,
        BookmarkBlock,
        EquationBlock,
        TableBlock,
        TableRowBlock,
        ChildPageBlock,
        ChildDatabaseBlock,
        ColumnListBlock,
        ColumnBlock,
        LinkToPageBlock,
        UnsupportedBlock,
    ],
    Field(discriminator="type"),
]

KNOWN_BLOCK_TYPES = {
    "heading_1",
    "heading_2",
    "heading_3",
    "paragraph",
    "to_do",
    "bulleted_list_item",
    "numbered_list_item",
    "callout",
    "toggle",
    "quote",
    "divider",
    "code",
    "image",
    "video",
    "file",
    "pdf",
    "embed",
    "bookmark",
    "equation",
    "table",
    "table_row",
    "child_page",
    "child_database",
    "column_list",
    "column",
    "link_to_page",
    "unsupported",
}


class UnknownBlock(_BlockBase):
    """Any block whose `type` is not in KNOWN_BLOCK_TYPES (e.g. synced_block)."""

    model_config = ConfigDict(extra="allow")

    type: str
    payload: Optional[JsonValue] = None

    @model_validator(mode="before")
    @classmethod
    def _capture_payload(cls, obj):
        if isinstance(obj, dict) and "payload" not in obj:
            t = obj.get("type")
            if isinstance(t, str) and t in obj:
                return {**obj, "payload": obj[t]}
        return obj


Block = Union[KnownBlock, UnknownBlock]

_KNOWN_ADAPTER: TypeAdapter = TypeAdapter(KnownBlock)


def parse_block(obj: Any) -> Block:
    """Dispatch a raw block dict to its typed model."""
    if isinstance(obj, _BlockBase):
        return obj  # type: ignore[return-value]
    t = obj.get("type") if isinstance(obj, dict) else None
    if t in KNOWN_BLOCK_TYPES:
        return _KNOWN_ADAPTER.validate_python(obj)
    return UnknownBlock.model_validate(obj)


def parse_blocks(items: List[Dict[str, Any]]) -> List[Block]:
    return [parse_block(item) for item in items]


__all__ = [
    "Block",
    "BookmarkBlock",
    "BulletedListItemBlock",
    "CalloutBlock",
    "ChildDatabaseBlock",
    "ChildPageBlock",
    "CodeBlock",
    "ColumnBlock",
    "ColumnListBlock",
    "DividerBlock",
    "EmbedBlock",
    "EquationBlock",
    "FileBlock",
    "Heading1Block",
    "Heading2Block",
    "Heading3Block",
    "ImageBlock",
    "KNOWN_BLOCK_TYPES",
    "KnownBlock",
    "LinkToPageBlock",
    "NumberedListItemBlock",
    "ParagraphBlock",
    "PdfBlock",
    "QuoteBlock",
    "TableBlock",
    "TableRowBlock",
    "ToDoBlock",
    "ToggleBlock",
    "UnknownBlock",
    "UnsupportedBlock",
    "VideoBlock",
    "parse_block",
    "parse_blocks",
]
