"""Pydantic schemas for invocations, query payloads and result envelopes."""

from plausible_mcp.schemas.common import Failure, Invocation, ResultEnvelope, Success
from plausible_mcp.schemas.query import QueryRequest

__all__ = [
    "Failure",
    "Invocation",
    "ResultEnvelope",
    "Success",
    "QueryRequest",
]
