"""
Vault file names for database pages.

A path spec is a comma separated list of `property[:strftime format]`
entries, e.g. `Date:%Y-%m-%d,Name`. Matching properties are concatenated in
spec order: title properties contribute their plain text and
date properties their start date formatted with the given format (nothing
when no format is given). Property names match case-insensitively.
"""

from __future__ import annotations

import os
import re
from typing import Dict, Optional

from ..exceptions import ConfigurationError
from ..models.pages import Page
from ..models.properties import DateProperty, TitleProperty
from ..models.rich_text import plain_text

PathSpec = Dict[str, str]


def parse_path_spec(spec: Optional[str]) -> PathSpec:
    out: PathSpec = {}
    if not spec:
        return out
    for entry in spec.split(","):
        name, _, fmt = entry.partition(":")
        name = name.strip()
        if not name:
            raise ConfigurationError(f"empty property name in path spec {spec!r}")
        out[name.lower()] = fmt
    return out


def _safe_name(s: Optional[str]) -> str:
    # keep titles intact so [[title]] links resolve; only path separators go
    if not s:
        return "untitled"
    s = re.sub(r"[/\\]+", "-", s).strip()
    return s or "untitled"


def page_file_name(page: Page, spec: PathSpec) -> str:
    """`<name>.md` for a database page under the given path spec."""
    if not spec:
        return f"{_safe_name(page.title())}.md"

    by_name = {key.lower(): (key, value) for key, value in page.properties.items()}
    name = ""
    for wanted, fmt in spec.items():
        if wanted not in by_name:
            continue
        key, value = by_name[wanted]
        if isinstance(value, TitleProperty):
            name += plain_text(value.title)
        elif isinstance(value, DateProperty):
            if fmt and value.date is not None:
                name += value.date.start_datetime.strftime(fmt)
        else:
            raise ConfigurationError(
                f"property {key!r} of type {value.type} cannot be used in a path"
            )
    return f"{_safe_name(name)}.md"


def page_destination(vault_path: str, page: Page, spec: PathSpec) -> str:
    return os.path.join(vault_path, page_file_name(page, spec))


def note_path(vault_path: str, title: str, folder: Optional[str] = None) -> str:
    """Destination of a referenced page: `<vault>[/<folder>]/<title>.md`."""
    parts = [vault_path]
    if folder:
        parts.append(_safe_name(folder))
    parts.append(f"{_safe_name(title)}.md")
    return os.path.join(*parts)


__all__ = [
    "PathSpec",
    "note_path",
    "page_destination",
    "page_file_name",
    "parse_path_spec",
]
