"""Shared pytest fixtures – stub clients and a mocked Plausible upstream."""

from __future__ import annotations

import json
from typing import Any, Callable
from unittest.mock import AsyncMock

import httpx
import pytest
import pytest_asyncio

from plausible_mcp.plausible.client import PlausibleClient

API_URL = "https://plausible.test/api/v2"
API_KEY = "test-token"


@pytest.fixture
def stub_client():
    """A PlausibleClient stand-in whose ``query`` returns a canned payload."""
    client = AsyncMock(spec=PlausibleClient)
    client.query.return_value = {"results": [{"visitors": 42}]}
    return client


@pytest.fixture
def captured_requests() -> list[httpx.Request]:
    return []


@pytest_asyncio.fixture
async def make_client(captured_requests):
    """Factory for real PlausibleClients backed by ``httpx.MockTransport``.

    Every request the client sends is appended to ``captured_requests``.
    """
    clients: list[PlausibleClient] = []

    def factory(responder: Callable[[httpx.Request], httpx.Response]) -> PlausibleClient:
        def handler(request: httpx.Request) -> httpx.Response:
            captured_requests.append(request)
            return responder(request)

        client = PlausibleClient(API_URL, API_KEY, transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield factory

    for client in clients:
        await client.aclose()


def json_response(status_code: int, payload: Any) -> Callable[[httpx.Request], httpx.Response]:
    """Responder that always answers with ``payload`` as JSON."""

    def responder(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, content=json.dumps(payload).encode())

    return responder


@pytest.fixture
def respond_json():
    return json_response
