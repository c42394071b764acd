"""MCP tool catalog and handlers – the bridge between MCP protocol and the Plausible client."""

from __future__ import annotations

import logging
import time
from typing import Any, Mapping

from mcp.types import Tool

from plausible_mcp.errors import ToolError, UpstreamError, ValidationError
from plausible_mcp.plausible.client import PlausibleClient
from plausible_mcp.schemas.query import QueryRequest

logger = logging.getLogger("mcp.tools")

QUERY_TOOL_NAME = "plausible_query"

MISSING_QUERY_ARGUMENTS = "Missing required arguments: site_id, metrics, and date_range"

# ---------------------------------------------------------------------------
# Tool registry
# ---------------------------------------------------------------------------

TOOL_DEFINITIONS: list[Tool] = [
    Tool(
        name=QUERY_TOOL_NAME,
        description=(
            "Query analytics data from Plausible. Returns the raw Stats API response "
            "for the given site, metrics, and date range."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "site_id": {
                    "type": "string",
                    "description": "Domain of the site as registered in Plausible (e.g. example.com)",
                },
                "metrics": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": (
                        "Metrics to return, e.g. visitors, visits, pageviews, "
                        "bounce_rate, visit_duration"
                    ),
                },
                "date_range": {
                    "type": "string",
                    "description": "Date range such as 'day', '7d', '30d', 'month', '6mo', '12mo'",
                },
            },
            "required": ["site_id", "metrics", "date_range"],
        },
    ),
]


def list_tools() -> list[Tool]:
    """Return the static tool catalog. A fresh list on every call."""
    return list(TOOL_DEFINITIONS)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def parse_query_request(arguments: Mapping[str, Any]) -> QueryRequest | ValidationError:
    """Turn a raw argument bag into a ``QueryRequest``.

    Only presence is checked: every field must be present and truthy. Element
    types of ``metrics`` and the ``date_range`` format are left to the
    upstream API.
    """
    site_id = arguments.get("site_id")
    metrics = arguments.get("metrics")
    date_range = arguments.get("date_range")

    if not site_id or not metrics or not date_range:
        return ValidationError(MISSING_QUERY_ARGUMENTS)

    # model_construct: presence-only, values are forwarded as given.
    return QueryRequest.model_construct(site_id=site_id, metrics=metrics, date_range=date_range)


# ---------------------------------------------------------------------------
# Tool implementations
# ---------------------------------------------------------------------------


async def handle_plausible_query(
    arguments: Mapping[str, Any], client: PlausibleClient
) -> Any | ToolError:
    """Run one Plausible Stats query.

    Args:
        arguments: {"site_id": str, "metrics": list[str], "date_range": str}

    Returns the upstream JSON on success, or the ``ToolError`` describing why
    the call failed.
    """
    t0 = time.perf_counter()

    request = parse_query_request(arguments)
    if isinstance(request, ValidationError):
        return request

    try:
        payload = await client.query(request.site_id, request.metrics, request.date_range)
    except UpstreamError as exc:
        return exc

    elapsed = round((time.perf_counter() - t0) * 1000, 2)
    logger.info(
        "plausible_query site_id=%s date_range=%s ms=%.1f",
        request.site_id,
        request.date_range,
        elapsed,
    )
    return payload


TOOL_HANDLERS = {
    QUERY_TOOL_NAME: handle_plausible_query,
}
