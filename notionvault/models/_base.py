from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict

_EXTRA_MODES = ("allow", "forbid", "ignore")


def _env_extra_mode(default: str = "ignore") -> str:
    """Pydantic `extra` setting read from NOTIONVAULT_EXTRA; unknown values keep `default`."""
    raw = os.getenv("NOTIONVAULT_EXTRA", "").strip().lower()
    return raw if raw in _EXTRA_MODES else default


class NotionModel(BaseModel):
    """
    Immutable base for every Notion payload model.

    The API grows new keys without notice, so they are dropped unless
    NOTIONVAULT_EXTRA=forbid (useful when checking fixtures against the
    models) or allow is set before the package is imported.
    """

    model_config = ConfigDict(extra=_env_extra_mode(), frozen=True)


__all__ = ["NotionModel", "_env_extra_mode"]
