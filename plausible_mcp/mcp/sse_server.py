"""SSE (Server-Sent Events) transport for the Plausible MCP server.

This module exposes the same tool surface over HTTP using SSE, which
is useful for web-based MCP clients, testing, and scenarios where
stdio transport is not available.

Run with:
    python -m plausible_mcp.mcp.sse_server

The server starts on http://0.0.0.0:8000 by default.
SSE endpoint: GET  /sse
Message post: POST /messages
Health check: GET  /health
"""

from __future__ import annotations

import asyncio
import itertools
import json
import logging
from contextlib import asynccontextmanager
from typing import Any

import pydantic
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from sse_starlette.sse import EventSourceResponse

from plausible_mcp import __version__
from plausible_mcp.config import load_settings
from plausible_mcp.mcp.dispatcher import dispatch, render_envelope
from plausible_mcp.mcp.tools import list_tools
from plausible_mcp.plausible.client import PlausibleClient
from plausible_mcp.schemas.common import Invocation

logger = logging.getLogger("mcp.sse")

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "plausible-model-context-protocol-server"


# ---------------------------------------------------------------------------
# JSON-RPC routing
# ---------------------------------------------------------------------------


def _rpc_error(rpc_id: Any, code: int, message: str) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": rpc_id, "error": {"code": code, "message": message}}


async def handle_rpc(
    body: Any,
    client: PlausibleClient,
    server_name: str = SERVER_NAME,
    server_version: str = __version__,
) -> dict[str, Any]:
    """Answer one JSON-RPC request with the same semantics as the stdio server.

    Malformed requests get a JSON-RPC error instead of raising, so the
    session stream always receives a reply.
    """
    if not isinstance(body, dict):
        return _rpc_error(None, -32600, "Invalid Request: body must be a JSON object")

    method = body.get("method", "")
    params = body.get("params") or {}
    rpc_id = body.get("id")

    if not isinstance(params, dict):
        return _rpc_error(rpc_id, -32602, "Invalid params: params must be an object")

    if method == "tools/list":
        result: dict[str, Any] = {
            "tools": [t.model_dump(exclude_none=True) for t in list_tools()]
        }

    elif method == "tools/call":
        try:
            invocation = Invocation(name=params.get("name"), arguments=params.get("arguments"))
        except pydantic.ValidationError as exc:
            logger.warning("SSE tools/call rejected: %s", exc)
            return _rpc_error(
                rpc_id,
                -32602,
                "Invalid params: name must be a string and arguments an object",
            )
        envelope = await dispatch(invocation, client)
        result = {"content": [{"type": "text", "text": render_envelope(envelope)}]}

    elif method == "initialize":
        result = {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {"listChanged": False}},
            "serverInfo": {"name": server_name, "version": server_version},
        }

    else:
        return _rpc_error(rpc_id, -32601, f"Method '{method}' not found")

    return {"jsonrpc": "2.0", "id": rpc_id, "result": result}


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_sse_app(
    client: PlausibleClient | None = None,
    server_name: str = SERVER_NAME,
    server_version: str = __version__,
) -> FastAPI:
    """Build the SSE application.

    Without an injected client, one is built from the environment on startup
    and closed on shutdown; server name and version then come from settings.
    """
    # In-memory message queues keyed by session_id
    sessions: dict[str, asyncio.Queue] = {}
    session_ids = itertools.count(1)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.client is not None:
            yield
            sessions.clear()
            return

        settings = load_settings()
        app.state.server_name = settings.mcp_server_name
        app.state.server_version = settings.mcp_server_version
        logger.info(
            "MCP SSE transport starting on %s:%s",
            settings.fastapi_host,
            settings.fastapi_port,
        )
        async with PlausibleClient.from_settings(settings) as owned:
            app.state.client = owned
            yield
            logger.info("MCP SSE transport shutting down")
            app.state.client = None
        sessions.clear()

    app = FastAPI(
        title="Plausible MCP Server – SSE Transport",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.client = client
    app.state.server_name = server_name
    app.state.server_version = server_version
    app.state.sessions = sessions

    # ── Health ────────────────────────────────────────────────────────────

    @app.get("/health")
    async def health():
        return {"status": "ok", "transport": "sse", "version": app.state.server_version}

    # ── SSE endpoint ──────────────────────────────────────────────────────

    @app.get("/sse")
    async def sse_endpoint(request: Request):
        """Server-Sent Events stream for MCP protocol messages.

        The client opens this endpoint to receive messages from the MCP
        server.  The client posts requests to ``/messages?session_id=<id>``
        and reads the server responses from this stream.
        """
        session_id = f"session-{next(session_ids)}"
        queue: asyncio.Queue = asyncio.Queue()
        sessions[session_id] = queue

        async def event_generator():
            # First event: tell the client where to POST requests
            yield {
                "event": "endpoint",
                "data": f"/messages?session_id={session_id}",
            }

            try:
                while True:
                    if await request.is_disconnected():
                        break
                    try:
                        message = await asyncio.wait_for(queue.get(), timeout=30.0)
                        yield {
                            "event": "message",
                            "data": json.dumps(message, default=str),
                        }
                    except asyncio.TimeoutError:
                        yield {"comment": "keepalive"}
            finally:
                sessions.pop(session_id, None)

        return EventSourceResponse(event_generator())

    # ── Message endpoint (client → server) ────────────────────────────────

    @app.post("/messages")
    async def messages_endpoint(request: Request, session_id: str):
        """Receive a JSON-RPC request from the client, process it, and
        push the response onto the SSE stream for the matching session.
        """
        queue = sessions.get(session_id)
        if queue is None:
            return JSONResponse(
                status_code=404,
                content={"error": f"Session '{session_id}' not found. Connect to /sse first."},
            )

        try:
            body = await request.json()
        except ValueError:
            await queue.put(_rpc_error(None, -32700, "Parse error"))
            return Response(status_code=202, content="Accepted")
        logger.debug("SSE recv session=%s body=%s", session_id, body)

        state = request.app.state
        response = await handle_rpc(body, state.client, state.server_name, state.server_version)
        await queue.put(response)
        return Response(status_code=202, content="Accepted")

    return app


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    import uvicorn

    _settings = load_settings()
    logging.basicConfig(
        level=_settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    uvicorn.run(
        create_sse_app(),
        host=_settings.fastapi_host,
        port=_settings.fastapi_port,
    )
