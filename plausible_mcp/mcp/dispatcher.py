"""Validate, route and envelope a single tool invocation."""

from __future__ import annotations

import json
import logging
import math
from typing import Any

from plausible_mcp.errors import ToolError, UnknownToolError, ValidationError
from plausible_mcp.mcp.tools import TOOL_HANDLERS
from plausible_mcp.plausible.client import PlausibleClient
from plausible_mcp.schemas.common import Failure, Invocation, ResultEnvelope, Success

logger = logging.getLogger("mcp.dispatcher")

ARGUMENTS_REQUIRED = "Arguments are required"


async def _route(invocation: Invocation, client: PlausibleClient) -> Any | ToolError:
    if not invocation.arguments:
        return ValidationError(ARGUMENTS_REQUIRED)

    handler = TOOL_HANDLERS.get(invocation.name)
    if handler is None:
        return UnknownToolError(invocation.name)

    return await handler(invocation.arguments, client)


def _failure_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


async def dispatch(invocation: Invocation, client: PlausibleClient) -> ResultEnvelope:
    """Run one invocation and collapse every outcome into a result envelope.

    Tool errors come back from the handlers as values; anything else that
    escapes is caught here. Nothing raised during dispatch reaches the caller.
    """
    try:
        outcome = await _route(invocation, client)
    except Exception as exc:
        logger.exception("Error executing tool %s", invocation.name)
        return Failure(message=_failure_message(exc))

    if isinstance(outcome, ToolError):
        logger.error("Error executing tool %s: %s", invocation.name, outcome)
        return Failure(message=_failure_message(outcome))

    return Success(payload=outcome)


def _json_safe(value: Any) -> Any:
    """Replace NaN and infinities with None, as JSON.stringify does."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    return value


def render_envelope(envelope: ResultEnvelope) -> str:
    """Serialize an envelope to the text sent back to the caller.

    Success is the upstream payload itself; failure is ``{"error": message}``.
    Compact separators so the text matches ``JSON.stringify`` output.
    """
    if isinstance(envelope, Success):
        body: Any = _json_safe(envelope.payload)
    else:
        body = {"error": envelope.message}
    return json.dumps(
        body, separators=(",", ":"), ensure_ascii=False, allow_nan=False, default=str
    )
