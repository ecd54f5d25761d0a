"""
Rich text to Obsidian Markdown.

Each run is wrapped in its own delimiter (outermost first):
    bold+italic `***`, bold `**`, italic `_`, strikethrough `~~`,
    highlight (non-default color) `==`, code `` ` ``
and closed with the same delimiter reversed. Adjacent styled runs are then
joined so a shared boundary does not repeat its delimiters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ..models.rich_text import (
    DEFAULT_COLOR,
    Annotations,
    EquationRun,
    MentionRun,
    RichText,
    TextRun,
)
from .renderer_iface import PageLinker


@dataclass(frozen=True)
class _RenderedRun:
    text: str
    delimiter: str
    annotations: Annotations
    styled: bool


def delimiter_for(ann: Annotations) -> str:
    out = ""
    if ann.bold and ann.italic:
        out += "***"
    elif ann.bold:
        out += "**"
    elif ann.italic:
        out += "_"
    if ann.strikethrough:
        out += "~~"
    if ann.color != DEFAULT_COLOR:
        out += "=="
    if ann.code:
        out += "`"
    return out


def _run_content(run: RichText, delimiter: str, linker: Optional[PageLinker]) -> str:
    if isinstance(run, TextRun):
        link = run.text.link
        if link is None or "`" in delimiter:
            return run.text.content
        if link.url.startswith("/"):
            # internal page link
            return _resolve(linker, link.url[1:])
        return f"[{run.text.content}]({link.url})"

    if isinstance(run, MentionRun):
        m = run.mention
        if m.type == "page" and m.page is not None:
            return _resolve(linker, m.page.id)
        if m.type == "database":
            return f"[[{run.plain_text}]]"
        if m.type == "date" and m.date is not None:
            return f"[[{m.date.start_datetime.strftime('%Y-%m-%d')}]]"
        if m.type == "link_preview" and m.link_preview is not None:
            return m.link_preview.url
        # user, template_mention and anything newer
        return ""

    if isinstance(run, EquationRun):
        return f"$${run.equation.expression}$$"

    return ""


def _resolve(linker: Optional[PageLinker], page_id: str) -> str:
    if linker is None:
        return ""
    return linker.resolve(page_id)


def _render_run(run: RichText, linker: Optional[PageLinker]) -> _RenderedRun:
    ann = run.annotations
    styled = ann.has_style
    delimiter = delimiter_for(ann) if styled else ""
    body = _run_content(run, delimiter, linker)
    return _RenderedRun(
        text=delimiter + body + delimiter[::-1],
        delimiter=delimiter,
        annotations=ann,
        styled=styled,
    )


def _is_bold_only(ann: Annotations) -> bool:
    return ann.bold and not ann.italic


def _is_bold_italic(ann: Annotations) -> bool:
    return ann.bold and ann.italic


def render_rich_text(
    runs: List[RichText], linker: Optional[PageLinker] = None
) -> str:
    """
    Render an ordered list of runs as one Markdown string.

    `linker` resolves page mentions and internal links; without one they
    render as nothing. Only two boundary cases are handled: a bold run
    followed by a bold+italic run nests the italic part inside the bold, and
    any other pair of styled runs has the shared delimiter characters trimmed
    (character-set trimming, so `` `a ` `` + `` `b` `` gives `` `a b` ``).
    """
    rendered = [_render_run(run, linker) for run in runs]

    result = ""
    prev: Optional[_RenderedRun] = None
    for cur in rendered:
        if prev is None or not (prev.styled and cur.styled):
            result += cur.text
        elif _is_bold_only(prev.annotations) and _is_bold_italic(cur.annotations):
            result = result.rstrip("*")
            result += "_" + cur.text.strip("*") + "_**"
        else:
            result = result.rstrip(cur.delimiter[::-1])
            result += cur.text.lstrip(prev.delimiter)
        prev = cur
    return result


__all__ = ["delimiter_for", "render_rich_text"]
