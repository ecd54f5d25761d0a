"""
Block tree to Obsidian Markdown.

Converts a list of typed Notion blocks into Markdown. The only I/O is
through the injected `BlockSource` (children of blocks with
`has_children`) and `PageLinker` (inline page references).
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Type, get_args

from ..exceptions import UnsupportedBlockKind
from ..models.blocks import (
    Block,
    BookmarkBlock,
    BulletedListItemBlock,
    CalloutBlock,
    ChildDatabaseBlock,
    ChildPageBlock,
    CodeBlock,
    ColumnBlock,
    ColumnListBlock,
    DividerBlock,
    EmbedBlock,
    EquationBlock,
    FileBlock,
    FilePayload,
    Heading1Block,
    Heading2Block,
    Heading3Block,
    ImageBlock,
    KnownBlock,
    LinkToPageBlock,
    NumberedListItemBlock,
    ParagraphBlock,
    PdfBlock,
    QuoteBlock,
    TableBlock,
    TableRowBlock,
    ToDoBlock,
    ToggleBlock,
    UnsupportedBlock,
    VideoBlock,
)
from ..models.rich_text import RichText
from .renderer_iface import BlockSource, PageLinker
from .rich_text import render_rich_text

LOGGER = logging.getLogger(__name__)

INDENT = "\t"


class BlockRenderer:
    """
    Render blocks in order, recursing into children with one tab of indent.

    Raises `UnsupportedBlockKind` for a block kind it has no rule for and lets
    `FetchFailure` from the source propagate; either aborts the document.
    """

    def __init__(self, source: BlockSource, linker: Optional[PageLinker] = None):
        self._source = source
        self._linker = linker

    def render(self, blocks: List[Block], indent: bool = False) -> str:
        parts: List[str] = []
        for block in blocks:
            handler = _HANDLERS.get(type(block))
            if handler is None:
                raise UnsupportedBlockKind(
                    getattr(block, "type", type(block).__name__),
                    getattr(block, "id", None),
                )
            handler(self, block, parts, indent)
        return "".join(parts)

    # ----- helpers -----

    def _text(self, runs: List[RichText]) -> str:
        return render_rich_text(runs, self._linker)

    def _children(self, block: Block, parts: List[str]) -> None:
        if not block.has_children:
            return
        LOGGER.debug("Fetching children of %s block %s", block.type, block.id)
        children = self._source.fetch_children(block.id)
        parts.append(self.render(children, indent=True))

    def _line(self, parts: List[str], indent: bool, lead: str, runs: List[RichText]) -> None:
        parts.append((INDENT if indent else "") + lead + self._text(runs) + "\n")

    # ----- text blocks -----

    def _heading_1(self, block: Heading1Block, parts: List[str], indent: bool) -> None:
        self._line(parts, indent, "# ", block.heading_1.rich_text)
        self._children(block, parts)

    def _heading_2(self, block: Heading2Block, parts: List[str], indent: bool) -> None:
        self._line(parts, indent, "## ", block.heading_2.rich_text)
        self._children(block, parts)

    def _heading_3(self, block: Heading3Block, parts: List[str], indent: bool) -> None:
        self._line(parts, indent, "### ", block.heading_3.rich_text)
        self._children(block, parts)

    def _to_do(self, block: ToDoBlock, parts: List[str], indent: bool) -> None:
        box = "- [x] " if block.to_do.checked else "- [ ] "
        self._line(parts, indent, box, block.to_do.rich_text)
        self._children(block, parts)

    def _paragraph(self, block: ParagraphBlock, parts: List[str], indent: bool) -> None:
        runs = block.paragraph.rich_text
        if runs:
            self._line(parts, indent, "", runs)
        else:
            parts.append("\n")
        self._children(block, parts)

    def _bulleted(self, block: BulletedListItemBlock, parts: List[str], indent: bool) -> None:
        self._line(parts, indent, "- ", block.bulleted_list_item.rich_text)
        self._children(block, parts)

    def _numbered(self, block: NumberedListItemBlock, parts: List[str], indent: bool) -> None:
        # Obsidian renumbers; a plain bullet keeps nested lists aligned
        self._line(parts, indent, "- ", block.numbered_list_item.rich_text)
        self._children(block, parts)

    def _callout(self, block: CalloutBlock, parts: List[str], indent: bool) -> None:
        icon = block.callout.icon
        emoji = icon.emoji if icon is not None and icon.emoji else ""
        parts.append(
            (INDENT if indent else "")
            + "> [!"
            + emoji
            + self._text(block.callout.rich_text)
            + "]\n"
        )

    def _toggle(self, block: ToggleBlock, parts: List[str], indent: bool) -> None:
        self._line(parts, indent, "- ", block.toggle.rich_text)
        self._children(block, parts)

    def _quote(self, block: QuoteBlock, parts: List[str], indent: bool) -> None:
        self._line(parts, indent, "> ", block.quote.rich_text)
        self._children(block, parts)

    def _divider(self, block: DividerBlock, parts: List[str], indent: bool) -> None:
        parts.append("---\n")

    def _code(self, block: CodeBlock, parts: List[str], indent: bool) -> None:
        parts.append(
            "```" + block.code.language + "\n" + self._text(block.code.rich_text) + "\n```\n"
        )

    def _equation(self, block: EquationBlock, parts: List[str], indent: bool) -> None:
        parts.append((INDENT if indent else "") + f"$${block.equation.expression}$$\n")

    # ----- media -----

    def _media(self, url: Optional[str], parts: List[str], indent: bool) -> None:
        if url:
            parts.append((INDENT if indent else "") + f"![]({url})")
        parts.append("\n")

    def _file_like(self, payload: FilePayload, parts: List[str], indent: bool) -> None:
        self._media(payload.url, parts, indent)

    def _image(self, block: ImageBlock, parts: List[str], indent: bool) -> None:
        self._file_like(block.image, parts, indent)

    def _video(self, block: VideoBlock, parts: List[str], indent: bool) -> None:
        self._file_like(block.video, parts, indent)

    def _file(self, block: FileBlock, parts: List[str], indent: bool) -> None:
        self._file_like(block.file, parts, indent)

    def _pdf(self, block: PdfBlock, parts: List[str], indent: bool) -> None:
        self._file_like(block.pdf, parts, indent)

    def _embed(self, block: EmbedBlock, parts: List[str], indent: bool) -> None:
        self._media(block.embed.url, parts, indent)

    def _bookmark(self, block: BookmarkBlock, parts: List[str], indent: bool) -> None:
        self._media(block.bookmark.url, parts, indent)

    # ----- references -----

    def _child_page(self, block: ChildPageBlock, parts: List[str], indent: bool) -> None:
        # a child_page block shares its id with the page it embeds
        if self._linker is not None:
            token = self._linker.resolve(block.id)
        else:
            token = f"[[{block.child_page.title}]]"
        parts.append((INDENT if indent else "") + token + "\n")

    def _child_database(self, block: ChildDatabaseBlock, parts: List[str], indent: bool) -> None:
        parts.append((INDENT if indent else "") + block.child_database.title + "\n")

    def _link_to_page(self, block: LinkToPageBlock, parts: List[str], indent: bool) -> None:
        target = block.link_to_page
        token = ""
        if target.page_id and self._linker is not None:
            token = self._linker.resolve(target.page_id)
        elif not target.page_id:
            LOGGER.debug("link_to_page %s has no page target (%s)", block.id, target.type)
        parts.append(token + "\n")

    # ----- layout -----

    def _transparent(self, block: Block, parts: List[str], indent: bool) -> None:
        self._children(block, parts)

    def _unsupported(self, block: UnsupportedBlock, parts: List[str], indent: bool) -> None:
        LOGGER.debug("Skipping unsupported block %s", block.id)

    # ----- tables -----

    def _table(self, block: TableBlock, parts: List[str], indent: bool) -> None:
        if not block.has_children:
            return
        width = block.table.table_width
        rows = self._source.fetch_children(block.id)
        for row_index, row in enumerate(rows):
            if not isinstance(row, TableRowBlock):
                raise UnsupportedBlockKind(getattr(row, "type", "?"), row.id)
            cells = row.table_row.cells
            if len(cells) != width:
                LOGGER.warning(
                    "Table %s row %d has %d cells, table declares %d",
                    block.id,
                    row_index,
                    len(cells),
                    width,
                )
            self._row(cells, parts)
            if row_index == 0:
                parts.append("--|" * width + "\n")

    def _table_row(self, block: TableRowBlock, parts: List[str], indent: bool) -> None:
        self._row(block.table_row.cells, parts)

    def _row(self, cells: List[List[RichText]], parts: List[str]) -> None:
        parts.append("".join(self._text(cell) + "|" for cell in cells) + "\n")


_Handler = Callable[[BlockRenderer, Block, List[str], bool], None]

_HANDLERS: Dict[Type, _Handler] = {
    Heading1Block: BlockRenderer._heading_1,
    Heading2Block: BlockRenderer._heading_2,
    Heading3Block: BlockRenderer._heading_3,
    ParagraphBlock: BlockRenderer._paragraph,
    ToDoBlock: BlockRenderer._to_do,
    BulletedListItemBlock: BlockRenderer._bulleted,
    NumberedListItemBlock: BlockRenderer._numbered,
    CalloutBlock: BlockRenderer._callout,
    ToggleBlock: BlockRenderer._toggle,
    QuoteBlock: BlockRenderer._quote,
    DividerBlock: BlockRenderer._divider,
    CodeBlock: BlockRenderer._code,
    ImageBlock: BlockRenderer._image,
    VideoBlock: BlockRenderer._video,
    FileBlock: BlockRenderer._file,
    PdfBlock: BlockRenderer._pdf,
    EmbedBlock: BlockRenderer._embed,
    BookmarkBlock: BlockRenderer._bookmark,
    EquationBlock: BlockRenderer._equation,
    TableBlock: BlockRenderer._table,
    TableRowBlock: BlockRenderer._table_row,
    ChildPageBlock: BlockRenderer._child_page,
    ChildDatabaseBlock: BlockRenderer._child_database,
    ColumnListBlock: BlockRenderer._transparent,
    ColumnBlock: BlockRenderer._transparent,
    LinkToPageBlock: BlockRenderer._link_to_page,
    UnsupportedBlock: BlockRenderer._unsupported,
}


def _check_exhaustive() -> None:
    # KnownBlock is Annotated[Union[...], Field]; every member needs a rule
    union = get_args(KnownBlock)[0]
    missing = [cls.__name__ for cls in get_args(union) if cls not in _HANDLERS]
    if missing:
        raise TypeError(f"BlockRenderer has no rule for: {', '.join(missing)}")


_check_exhaustive()


__all__ = ["BlockRenderer", "INDENT"]
