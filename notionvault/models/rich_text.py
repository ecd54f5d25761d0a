"""
Rich text ("styled text run") models shared by blocks and properties.

A Notion rich text array is an ordered list of runs; each run carries its own
annotation set. Three run kinds exist on the wire: text, mention, equation.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from dateutil.parser import isoparse
from pydantic import Field, JsonValue, model_validator

from ._base import NotionModel

DEFAULT_COLOR = "default"


class Annotations(NotionModel):
    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False
    color: str = DEFAULT_COLOR

    @property
    def has_style(self) -> bool:
        # underline has no markdown form and does not count
        return (
            self.bold
            or self.italic
            or self.strikethrough
            or self.code
            or self.color != DEFAULT_COLOR
        )


class Link(NotionModel):
    url: str


class DateValue(NotionModel):
    """Date payload used by date properties, rollups and date mentions."""

    start: str
    end: Optional[str] = None
    time_zone: Optional[str] = None

    @property
    def has_time(self) -> bool:
        return "T" in self.start

    @property
    def start_datetime(self) -> datetime:
        return isoparse(self.start)


# ---------------------------------------------------------------------------
# Run payloads
# ---------------------------------------------------------------------------


class TextContent(NotionModel):
    content: str = ""
    link: Optional[Link] = None


class PageRef(NotionModel):
    id: str


class LinkPreview(NotionModel):
    url: str


class Mention(NotionModel):
    """
    Inline pointer. `type` selects which payload is populated:
    page, database, date, link_preview, user, template_mention.
    Unknown mention types keep their raw payload and render as nothing.
    """

    type: str
    page: Optional[PageRef] = None
    database: Optional[PageRef] = None
    date: Optional[DateValue] = None
    link_preview: Optional[LinkPreview] = None
    user: Optional[JsonValue] = None
    template_mention: Optional[JsonValue] = None


class Equation(NotionModel):
    expression: str


# ---------------------------------------------------------------------------
# Runs
# ---------------------------------------------------------------------------


class _RunBase(NotionModel):
    annotations: Annotations = Field(default_factory=Annotations)
    plain_text: str = ""
    href: Optional[str] = None


class TextRun(_RunBase):
    type: Literal["text"] = "text"
    text: TextContent = Field(default_factory=TextContent)

    @model_validator(mode="before")
    @classmethod
    def _default_plain_text(cls, data):
        # Hand-built runs often omit plain_text; the API always sends it.
        if isinstance(data, dict) and not data.get("plain_text"):
            text = data.get("text")
            content = None
            if isinstance(text, dict):
                content = text.get("content")
            elif isinstance(text, TextContent):
                content = text.content
            if content:
                data = {**data, "plain_text": content}
        return data


class MentionRun(_RunBase):
    type: Literal["mention"] = "mention"
    mention: Mention


class EquationRun(_RunBase):
    type: Literal["equation"] = "equation"
    equation: Equation


RichText = Annotated[
    Union[TextRun, MentionRun, EquationRun],
    Field(discriminator="type"),
]


def plain_text(runs: List[RichText]) -> str:
    """Concatenate the unstyled text of a run array."""
    return "".join(run.plain_text for run in runs)


__all__ = [
    "Annotations",
    "DateValue",
    "Equation",
    "EquationRun",
    "Link",
    "LinkPreview",
    "Mention",
    "MentionRun",
    "PageRef",
    "RichText",
    "TextContent",
    "TextRun",
    "plain_text",
]
