"""
Nominatim search transport.

Any ``async (query) -> list of records`` callable can drive the resolver;
:class:`NominatimSearch` is the default one, backed by ``httpx.AsyncClient``::

    async with NominatimSearch(user_agent="my-app/1.0") as search:
        records = await search("SW1A, United Kingdom")

Transport errors, non-2xx responses and payloads that are not a JSON list
are all raised as UpstreamUnavailable, so callers only handle one failure
type per query.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Mapping, Sequence

import httpx

from ukboundary.exceptions import UpstreamUnavailable

logger = logging.getLogger(__name__)

SearchFunction = Callable[[str], Awaitable[Sequence[Mapping[str, Any]]]]

DEFAULT_BASE_URL = "https://nominatim.openstreetmap.org"
DEFAULT_USER_AGENT = "ukboundary/0.1"


class NominatimSearch:
    """Async client for the Nominatim ``/search`` endpoint."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 10.0,
        limit: int = 10,
        country_codes: str = "gb",
    ) -> None:
        self._limit = limit
        self._country_codes = country_codes
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"User-Agent": user_agent, "Accept": "application/json"},
            timeout=httpx.Timeout(timeout),
        )

    async def __aenter__(self) -> "NominatimSearch":
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def __call__(self, query: str) -> list[dict]:
        params = {
            "q": query,
            "format": "jsonv2",
            "polygon_geojson": 1,
            "addressdetails": 1,
            "countrycodes": self._country_codes,
            "limit": self._limit,
        }
        try:
            response = await self._client.get("/search", params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise UpstreamUnavailable(
                query, f"HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamUnavailable(query, f"{type(exc).__name__}: {exc}") from exc
        except ValueError as exc:
            raise UpstreamUnavailable(query, "response was not valid JSON") from exc

        if not isinstance(payload, list):
            raise UpstreamUnavailable(
                query, f"expected a JSON list, got {type(payload).__name__}"
            )
        logger.debug("Search %r returned %d records", query, len(payload))
        return payload
