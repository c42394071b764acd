"""Typed payload for the ``plausible_query`` tool."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class QueryRequest(BaseModel):
    """Validated arguments for one Plausible Stats query.

    Only presence is checked. ``date_range`` is any non-empty string
    (``"7d"``, ``"30d"``, ``"month"`` ...); the upstream API rejects bad ones.
    """

    model_config = ConfigDict(frozen=True)

    site_id: str
    metrics: list[str]
    date_range: str
