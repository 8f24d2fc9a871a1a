from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from incident_analysis.config import BackendConfig
from incident_analysis.errors import TransportError
from incident_analysis.query.builder import SearchQuery

LOGGER = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


class SearchClient:
    """Posts aggregation queries to the search proxy's ``/search`` endpoint.

    One round trip per query, no retries. Network errors, timeouts, non-2xx
    statuses and undecodable bodies all surface as ``TransportError``.
    """

    def __init__(
        self,
        search_url: str,
        timeout_seconds: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.search_url = search_url
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    @classmethod
    def from_config(
        cls,
        config: BackendConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> SearchClient:
        return cls(
            search_url=config.search_url,
            timeout_seconds=config.timeout_seconds,
            transport=transport,
        )

    async def search(self, query: SearchQuery) -> dict[str, Any]:
        LOGGER.debug("POST %s index=%s", self.search_url, query.get("index"))
        try:
            async with asyncio.timeout(self.timeout_seconds):
                async with httpx.AsyncClient(
                    timeout=self.timeout_seconds, transport=self._transport
                ) as client:
                    response = await client.post(self.search_url, json=query, headers=JSON_HEADERS)
                    response.raise_for_status()
                    payload = response.json()
        except TimeoutError as exc:
            raise TransportError(
                f"OpenSearch query failed: no response within {self.timeout_seconds:g}s"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            message = str(exc) or type(exc).__name__
            raise TransportError(f"OpenSearch query failed: {message}") from exc
        if not isinstance(payload, dict):
            raise TransportError("OpenSearch query failed: response body is not a JSON object")
        return payload
