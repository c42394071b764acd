"""Shared invocation and result envelope schemas."""

from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class Invocation(BaseModel):
    """One request to execute a named tool with an argument bag."""

    model_config = ConfigDict(frozen=True)

    name: str
    arguments: dict[str, Any] | None = None


class Success(BaseModel):
    """Tool ran and the upstream returned a JSON value."""

    ok: Literal[True] = True
    payload: Any = Field(None, description="Upstream JSON, passed through untouched")


class Failure(BaseModel):
    """Tool failed; ``message`` is the human-readable reason."""

    ok: Literal[False] = False
    message: str


ResultEnvelope = Union[Success, Failure]
