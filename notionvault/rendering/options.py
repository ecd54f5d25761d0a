"""
Export configuration for Notion to Markdown output.

Centralizes behavior flags so callers can tune defaults without touching
core logic. The CLI builds one of these from options and environment
variables (see notionvault.config).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional

from ..exceptions import ConfigurationError

DEFAULT_MAX_WORKERS = 4


@dataclass(frozen=True)
class PropertyFilter:
    """
    Which page properties become front matter.

    Names are compared case-insensitively. An include set and a skip set are
    mutually exclusive. With neither set nothing is selected, unless the
    filter was built with `PropertyFilter.all()`.
    """

    include: FrozenSet[str] = frozenset()
    skip: FrozenSet[str] = frozenset()
    select_all: bool = False

    def __post_init__(self) -> None:
        if self.include and self.skip:
            raise ConfigurationError(
                "property include and skip lists are mutually exclusive"
            )
        object.__setattr__(self, "include", frozenset(n.lower() for n in self.include))
        object.__setattr__(self, "skip", frozenset(n.lower() for n in self.skip))

    @classmethod
    def all(cls) -> "PropertyFilter":
        return cls(select_all=True)

    @classmethod
    def including(cls, names: Iterable[str]) -> "PropertyFilter":
        return cls(include=frozenset(names))

    @classmethod
    def skipping(cls, names: Iterable[str]) -> "PropertyFilter":
        return cls(skip=frozenset(names))

    def selects(self, name: str) -> bool:
        key = name.lower()
        if self.include:
            return key in self.include
        if self.skip:
            return key not in self.skip
        return self.select_all


@dataclass(frozen=True)
class ExportConfig:
    # Output root; every page file lands somewhere below it
    vault_path: str = "."

    # Database being migrated; its pages go directly under the vault root
    root_database_id: Optional[str] = None

    property_filter: PropertyFilter = field(default_factory=PropertyFilter)

    # "prop[:fmt],prop2[:fmt]" naming scheme for database pages; empty means title
    path_spec: str = ""

    max_workers: int = DEFAULT_MAX_WORKERS
    show_progress: bool = True

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ConfigurationError(
                f"max_workers must be at least 1, got {self.max_workers}"
            )
