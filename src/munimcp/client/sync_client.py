"""Blocking MUNI API client used by the one-shot CLI commands.

This module provides :class:`SyncMuniClient`, the blocking counterpart to
:class:`~munimcp.client.async_client.MuniClient`.  It wraps
:class:`httpx.Client` and layers on:

- **Response caching** -- route lists and route details are served from the
  client's :class:`~munimcp.cache.TTLCache` while fresh.
- **Error mapping** -- transport failures, non-200 statuses and malformed
  bodies become :class:`~munimcp.exceptions.MuniError` subclasses.
- **Normalization** -- prediction envelopes are flattened into
  :class:`~munimcp.models.Prediction` records.

Nothing is retried; retry policy belongs to the caller.
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


class SyncMuniClient(BaseMuniClient):
    """Blocking client for the SF MUNI API.

    Args:
        base_url: Root of the MUNI API.
        api_key: Optional key, carried but not sent.
        config: Cache settings (TTL, initially enabled or not).
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`
            in tests.

    Example::

        with SyncMuniClient("https://api.prd-1.iq.live.umoiq.com") as client:
            for route in client.get_all_routes():
                print(route.id, route.title)
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        config: Optional[CacheConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        super().__init__(base_url, api_key=api_key, config=config)
        self._http = httpx.Client(timeout=REQUEST_TIMEOUT_SECONDS, transport=transport)

    def __enter__(self) -> SyncMuniClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP transport."""
        self._http.close()

    # ------------------------------------------------------------------ #
    # Fetch operations
    # ------------------------------------------------------------------ #

    def get_all_routes(self) -> list[RouteInfo]:
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

        response = self._get(self._routes_url())
        routes = decode_body(response, ROUTE_LIST)
        self._store_routes(routes)
        return routes

    def get_route_details(self, route_id: str) -> RouteDetails:
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

        response = self._get(self._route_details_url(route_id))
        details = decode_body(response, ROUTE_DETAILS)
        self._store_route_details(route_id, details)
        return details

    def get_predictions(self, route_id: str, stop_id: str) -> list[Prediction]:
        """Return live predictions for *stop_id* on *route_id*.  Never cached.

        Raises:
            RouteIDRequiredError: *route_id* is empty.
            StopIDRequiredError: *stop_id* is empty.
            UnexpectedStatusError: Upstream answered with a non-200 status.
            TransportError: The request failed or timed out.
            DecodeError: The body was not a list of prediction envelopes.
        """
        require_ids(route_id, stop_id, need_stop=True)

        response = self._get(self._predictions_url(route_id, stop_id))
        return flatten_predictions(decode_body(response, PREDICTION_ENVELOPES))

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _get(self, url: str) -> httpx.Response:
        get_output().debug(f"GET {url}")
        try:
            response = self._http.get(url, headers=REQUEST_HEADERS)
        except httpx.HTTPError as exc:
            raise TransportError(f"request to {url} failed: {exc}") from exc
        check_status(response)
        return response
