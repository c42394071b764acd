"""Thin async client for the Plausible Stats API."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx

from plausible_mcp.config import Settings
from plausible_mcp.errors import UpstreamError

logger = logging.getLogger("plausible.client")


class PlausibleClient:
    """Holds the static API configuration and one pooled ``httpx.AsyncClient``.

    No timeout is applied unless one is passed in: a hung upstream call stays
    pending for the caller.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            transport=transport,
            timeout=timeout,
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None
    ) -> "PlausibleClient":
        return cls(settings.plausible_api_url, settings.plausible_api_key, transport=transport)

    async def query(self, site_id: str, metrics: Sequence[str], date_range: str) -> Any:
        """POST ``/query`` and return the decoded JSON body.

        Raises:
            UpstreamError: non-2xx status or transport failure.
        """
        body = {"site_id": site_id, "metrics": metrics, "date_range": date_range}
        try:
            response = await self._client.post("/query", json=body)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Plausible API request failed: {exc}") from exc

        if not response.is_success:
            status_text = response.reason_phrase or str(response.status_code)
            logger.warning(
                "plausible query site_id=%s status=%d %s",
                site_id,
                response.status_code,
                status_text,
            )
            raise UpstreamError(
                f"Plausible API error: {status_text}",
                status_code=response.status_code,
                status_text=status_text,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamError(f"Plausible API returned invalid JSON: {exc}") from exc

        logger.info("plausible query site_id=%s status=%d", site_id, response.status_code)
        return payload

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "PlausibleClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
