"""Asynchronous MUNI API client -- mirrors :class:`~munimcp.client.sync_client.SyncMuniClient`.

This module provides :class:`MuniClient`, the client held by the MCP server.
It wraps :class:`httpx.AsyncClient` and offers the same feature set as the
blocking client -- caching, error mapping and prediction flattening -- but
awaits the network so that several tool calls can be in flight at once.

Cancelling the task awaiting a fetch aborts the in-flight HTTP request;
the cancellation propagates to the caller as :class:`asyncio.CancelledError`.
The cache is shared by all concurrent calls.  Two concurrent misses on the
same key both go to the network and the later result wins.

See Also:
    :class:`~munimcp.client.sync_client.SyncMuniClient` for the blocking
    equivalent.
"""

from __future__ import annotations

from typing import Optional

import httpx

from munimcp.client.base import (
    REQUEST_HEADERS,
    REQUEST_TIMEOUT_SECONDS,
    BaseMuniClient,
    require_ids,
)
from munimcp.client.response import (
    PREDICTION_ENVELOPES,
    ROUTE_DETAILS,
    ROUTE_LIST,
    check_status,
    decode_body,
    flatten_predictions,
)
from munimcp.exceptions import TransportError
from munimcp.models import CacheConfig, Prediction, RouteDetails, RouteInfo
from munimcp.output import get_output


class MuniClient(BaseMuniClient):
    """Asynchronous client for the SF MUNI API.

    Args:
        base_url: Root of the MUNI API.
        api_key: Optional key, carried but not sent.
        config: Cache settings (TTL, initially enabled or not).
        transport: Optional httpx async transport, e.g.
            :class:`httpx.MockTransport` in tests.

    Example::

        async with MuniClient(base_url) as client:
            details = await client.get_route_details("N")
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        config: Optional[CacheConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(base_url, api_key=api_key, config=config)
        self._http = httpx.AsyncClient(timeout=REQUEST_TIMEOUT_SECONDS, transport=transport)

    async def __aenter__(self) -> MuniClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP transport."""
        await self._http.aclose()

    # ------------------------------------------------------------------ #
    # Fetch operations
    # ------------------------------------------------------------------ #

    async def get_all_routes(self) -> list[RouteInfo]:
        """Return every route, from the cache when fresh.

        Raises:
            UnexpectedStatusError: Upstream answered with a non-200 status.
            TransportError: The request failed or timed out.
            DecodeError: The body was not a JSON route list.
        """
        cached = self._cached_routes()
        if cached is not None:
            get_output().debug("Cache hit: all routes")
            return cached

        response = await self._get(self._routes_url())
        routes = decode_body(response, ROUTE_LIST)
        self._store_routes(routes)
        return routes

    async def get_route_details(self, route_id: str) -> RouteDetails:
        """Return stops, directions and geometry for *route_id*.

        Raises:
            RouteIDRequiredError: *route_id* is empty.
            UnexpectedStatusError: Upstream answered with a non-200 status.
            TransportError: The request failed or timed out.
            DecodeError: The body was not a JSON route document.
        """
        require_ids(route_id)

        cached = self._cached_route_details(route_id)
        if cached is not None:
            get_output().debug(f"Cache hit: route {route_id}")
            return cached

        response = await self._get(self._route_details_url(route_id))
        details = decode_body(response, ROUTE_DETAILS)
        self._store_route_details(route_id, details)
        return details

    async def get_predictions(self, route_id: str, stop_id: str) -> list[Prediction]:
        """Return live predictions for *stop_id* on *route_id*.  Never cached.

        Raises:
            RouteIDRequiredError: *route_id* is empty.
            StopIDRequiredError: *stop_id* is empty.
            UnexpectedStatusError: Upstream answered with a non-200 status.
            TransportError: The request failed or timed out.
            DecodeError: The body was not a list of prediction envelopes.
        """
        require_ids(route_id, stop_id, need_stop=True)

        response = await self._get(self._predictions_url(route_id, stop_id))
        return flatten_predictions(decode_body(response, PREDICTION_ENVELOPES))

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    async def _get(self, url: str) -> httpx.Response:
        get_output().debug(f"GET {url}")
        try:
            response = await self._http.get(url, headers=REQUEST_HEADERS)
        except httpx.HTTPError as exc:
            raise TransportError(f"request to {url} failed: {exc}") from exc
        check_status(response)
        return response
