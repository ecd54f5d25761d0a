"""
Database page properties as an Obsidian front matter block.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from ..models.properties import (
    CheckboxProperty,
    CreatedByProperty,
    CreatedTimeProperty,
    DateProperty,
    EmailProperty,
    LastEditedByProperty,
    LastEditedTimeProperty,
    MultiSelectProperty,
    NumberProperty,
    PhoneNumberProperty,
    PropertyValue,
    RichTextProperty,
    RollupProperty,
    SelectProperty,
    StatusProperty,
    TitleProperty,
    UrlProperty,
)
from ..models.rich_text import DateValue, plain_text
from .options import PropertyFilter

LOGGER = logging.getLogger(__name__)

DELIMITER = "---\n"


def format_date(value: DateValue) -> str:
    start = value.start_datetime
    if value.has_time:
        return start.strftime("%Y-%m-%dT%H:%M:%S")
    return start.strftime("%Y-%m-%d")


def format_number(value: float) -> str:
    return "%f" % value


def property_value(prop: PropertyValue) -> Optional[str]:
    """
    Front matter text for one property, or None when it is omitted.

    people, files, formula and relation are never emitted, nor is any kind
    this package does not model; nor are null payloads.
    """
    if isinstance(prop, TitleProperty):
        return plain_text(prop.title)
    if isinstance(prop, RichTextProperty):
        return plain_text(prop.rich_text)
    if isinstance(prop, NumberProperty):
        return None if prop.number is None else format_number(prop.number)
    if isinstance(prop, (SelectProperty, StatusProperty)):
        option = prop.select if isinstance(prop, SelectProperty) else prop.status
        return None if option is None else option.name
    if isinstance(prop, MultiSelectProperty):
        return "[" + ",".join(o.name for o in prop.multi_select) + "]"
    if isinstance(prop, DateProperty):
        return None if prop.date is None else format_date(prop.date)
    if isinstance(prop, CheckboxProperty):
        return "true" if prop.checkbox else "false"
    if isinstance(prop, UrlProperty):
        return prop.url
    if isinstance(prop, EmailProperty):
        return prop.email
    if isinstance(prop, PhoneNumberProperty):
        return prop.phone_number
    if isinstance(prop, RollupProperty):
        rollup = prop.rollup
        if rollup.type == "number" and rollup.number is not None:
            return format_number(rollup.number)
        if rollup.type == "date" and rollup.date is not None:
            return format_date(rollup.date)
        return None
    if isinstance(prop, CreatedTimeProperty):
        return prop.created_time.isoformat()
    if isinstance(prop, LastEditedTimeProperty):
        return prop.last_edited_time.isoformat()
    if isinstance(prop, CreatedByProperty):
        return prop.created_by.name
    if isinstance(prop, LastEditedByProperty):
        return prop.last_edited_by.name
    return None


def render_front_matter(
    properties: Dict[str, PropertyValue], property_filter: PropertyFilter
) -> str:
    """`---` delimited key/value block, or "" when the filter selects nothing."""
    selected = [(k, v) for k, v in properties.items() if property_filter.selects(k)]
    if not selected:
        return ""
    lines = [DELIMITER]
    for key, prop in selected:
        value = property_value(prop)
        if value is None:
            LOGGER.debug("Omitting %s property %r from front matter", prop.type, key)
            continue
        lines.append(f"{key}: {value}\n")
    lines.append(DELIMITER)
    return "".join(lines)


__all__ = ["format_date", "property_value", "render_front_matter"]
