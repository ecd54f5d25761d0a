"""
Page property value models.

Each value is `{"id", "type", <type>: payload}`; exactly one payload is
populated and it matches `type`. Kinds this package does not know about are
kept as `UnknownProperty` and never reach the front matter.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import ConfigDict, Field, JsonValue, TypeAdapter

from ._base import NotionModel
from .rich_text import DateValue, RichText


class SelectOption(NotionModel):
    name: str
    id: Optional[str] = None
    color: Optional[str] = None


class User(NotionModel):
    id: str
    name: Optional[str] = None


class RollupValue(NotionModel):
    type: str
    number: Optional[float] = None
    date: Optional[DateValue] = None
    array: Optional[List[JsonValue]] = None
    function: Optional[str] = None


class _PropertyBase(NotionModel):
    id: Optional[str] = None


class TitleProperty(_PropertyBase):
    type: Literal["title"] = "title"
    title: List[RichText] = Field(default_factory=list)


class RichTextProperty(_PropertyBase):
    type: Literal["rich_text"] = "rich_text"
    rich_text: List[RichText] = Field(default_factory=list)


class NumberProperty(_PropertyBase):
    type: Literal["number"] = "number"
    number: Optional[float] = None


class SelectProperty(_PropertyBase):
    type: Literal["select"] = "select"
    select: Optional[SelectOption] = None


class MultiSelectProperty(_PropertyBase):
    type: Literal["multi_select"] = "multi_select"
    multi_select: List[SelectOption] = Field(default_factory=list)


class DateProperty(_PropertyBase):
    type: Literal["date"] = "date"
    date: Optional[DateValue] = None


class CheckboxProperty(_PropertyBase):
    type: Literal["checkbox"] = "checkbox"
    checkbox: bool = False


class UrlProperty(_PropertyBase):
    type: Literal["url"] = "url"
    url: Optional[str] = None


class EmailProperty(_PropertyBase):
    type: Literal["email"] = "email"
    email: Optional[str] = None


class PhoneNumberProperty(_PropertyBase):
    type: Literal["phone_number"] = "phone_number"
    phone_number: Optional[str] = None


class StatusProperty(_PropertyBase):
    type: Literal["status"] = "status"
    status: Optional[SelectOption] = None


class FormulaProperty(_PropertyBase):
    type: Literal["formula"] = "formula"
    formula: Optional[JsonValue] = None


class RelationProperty(_PropertyBase):
    type: Literal["relation"] = "relation"
    relation: List[JsonValue] = Field(default_factory=list)
    has_more: bool = False


class RollupProperty(_PropertyBase):
    type: Literal["rollup"] = "rollup"
    rollup: RollupValue


class CreatedTimeProperty(_PropertyBase):
    type: Literal["created_time"] = "created_time"
    created_time: datetime


class CreatedByProperty(_PropertyBase):
    type: Literal["created_by"] = "created_by"
    created_by: User


class LastEditedTimeProperty(_PropertyBase):
    type: Literal["last_edited_time"] = "last_edited_time"
    last_edited_time: datetime


class LastEditedByProperty(_PropertyBase):
    type: Literal["last_edited_by"] = "last_edited_by"
    last_edited_by: User


class PeopleProperty(_PropertyBase):
    type: Literal["people"] = "people"
    people: List[User] = Field(default_factory=list)


class FilesProperty(_PropertyBase):
    type: Literal["files"] = "files"
    files: List[JsonValue] = Field(default_factory=list)


KnownProperty = Annotated[
    Union[
        TitleProperty,
        RichTextProperty,
        NumberProperty,
        SelectProperty,
        MultiSelectProperty,
        DateProperty,
        CheckboxProperty,
        UrlProperty,
        EmailProperty,
        PhoneNumberProperty,
        StatusProperty,
        FormulaProperty,
        RelationProperty,
        RollupProperty,
        CreatedTimeProperty,
        CreatedByProperty,
        LastEditedTimeProperty,
        LastEditedByProperty,
        PeopleProperty,
        FilesProperty,
    ],
    Field(discriminator="type"),
]

KNOWN_PROPERTY_TYPES = {
    "title",
    "rich_text",
    "number",
    "select",
    "multi_select",
    "date",
    "checkbox",
    "url",
    "email",
    "phone_number",
    "status",
    "formula",
    "relation",
    "rollup",
    "created_time",
    "created_by",
    "last_edited_time",
    "last_edited_by",
    "people",
    "files",
}


class UnknownProperty(_PropertyBase):
    model_config = ConfigDict(extra="allow")

    type: str


PropertyValue = Union[KnownProperty, UnknownProperty]

_KNOWN_ADAPTER: TypeAdapter = TypeAdapter(KnownProperty)


def parse_property(obj: Any) -> PropertyValue:
    if isinstance(obj, _PropertyBase):
        return obj  # type: ignore[return-value]
    t = obj.get("type") if isinstance(obj, dict) else None
    if t in KNOWN_PROPERTY_TYPES:
        return _KNOWN_ADAPTER.validate_python(obj)
    return UnknownProperty.model_validate(obj)


__all__ = [
    "CheckboxProperty",
    "CreatedByProperty",
    "CreatedTimeProperty",
    "DateProperty",
    "EmailProperty",
    "FilesProperty",
    "FormulaProperty",
    "KNOWN_PROPERTY_TYPES",
    "KnownProperty",
    "LastEditedByProperty",
    "LastEditedTimeProperty",
    "MultiSelectProperty",
    "NumberProperty",
    "PeopleProperty",
    "PhoneNumberProperty",
    "PropertyValue",
    "RelationProperty",
    "RichTextProperty",
    "RollupProperty",
    "RollupValue",
    "SelectOption",
    "SelectProperty",
    "StatusProperty",
    "TitleProperty",
    "UnknownProperty",
    "UrlProperty",
    "User",
    "parse_property",
]
