"""State and URL building shared by the async and blocking transit clients.

:class:`BaseMuniClient` owns the response cache and knows the MUNI endpoint
layout and cache keys.  Subclasses add the transport: an
:class:`httpx.AsyncClient` in :class:`~munimcp.client.async_client.MuniClient`
and an :class:`httpx.Client` in
:class:`~munimcp.client.sync_client.SyncMuniClient`.
"""

from __future__ import annotations

import copy
from typing import Any, Optional

from munimcp.cache import TTLCache
from munimcp.exceptions import RouteIDRequiredError, StopIDRequiredError
from munimcp.models import CacheConfig, RouteDetails, RouteInfo

AGENCY_PATH = "/v2.0/riders/agencies/sfmta-cis"
REQUEST_TIMEOUT_SECONDS = 10.0
REQUEST_HEADERS = {"Accept": "application/json"}

ALL_ROUTES_KEY = "all_routes"


def route_details_key(route_id: str) -> str:
    return f"route_details:{route_id}"


def require_ids(route_id: str, stop_id: Optional[str] = None, *, need_stop: bool = False) -> None:
    """Check required ids before any cache or network access.

    The route id is checked first.

    Raises:
        RouteIDRequiredError: *route_id* is empty.
        StopIDRequiredError: *need_stop* is set and *stop_id* is empty.
    """
    if not route_id:
        raise RouteIDRequiredError()
    if need_stop and not stop_id:
        raise StopIDRequiredError()


class BaseMuniClient:
    """Cache ownership, endpoint URLs and cache controls for a MUNI client.

    Args:
        base_url: Root of the MUNI API, e.g.
            ``https://api.prd-1.iq.live.umoiq.com``.
        api_key: Optional key.  Carried for callers; the public endpoints
            do not require it.
        config: Cache settings.  Defaults to a 5 minute TTL, enabled.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        config: Optional[CacheConfig] = None,
    ) -> None:
        config = config or CacheConfig()
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._cache: TTLCache[Any] = TTLCache(
            ttl_seconds=config.ttl_seconds, enabled=config.enabled
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def api_key(self) -> Optional[str]:
        return self._api_key

    @property
    def cache(self) -> TTLCache[Any]:
        """The response cache owned by this client."""
        return self._cache

    # ------------------------------------------------------------------ #
    # Cache controls
    # ------------------------------------------------------------------ #

    def clear_cache(self) -> None:
        """Drop every cached response."""
        self._cache.clear()

    def enable_cache(self) -> None:
        self._cache.enable()

    def disable_cache(self) -> None:
        """Stop serving and storing cached responses.  Entries are kept."""
        self._cache.disable()

    # ------------------------------------------------------------------ #
    # Endpoint URLs
    # ------------------------------------------------------------------ #

    def _routes_url(self) -> str:
        return f"{self._base_url}{AGENCY_PATH}/routes"

    def _route_details_url(self, route_id: str) -> str:
        return f"{self._base_url}{AGENCY_PATH}/routes/{route_id}"

    def _predictions_url(self, route_id: str, stop_id: str) -> str:
        return f"{self._base_url}{AGENCY_PATH}/nstops/{route_id}:{stop_id}/predictions"

    # ------------------------------------------------------------------ #
    # Typed cache access
    # ------------------------------------------------------------------ #

    def _cached_routes(self) -> Optional[list[RouteInfo]]:
        routes, found = self._cache.get(ALL_ROUTES_KEY, kind=list)
        if not found or not all(isinstance(r, RouteInfo) for r in routes):
            return None
        return routes

    def _cached_route_details(self, route_id: str) -> Optional[RouteDetails]:
        details, found = self._cache.get(route_details_key(route_id), kind=RouteDetails)
        return details if found else None

    # The caller keeps the fetched object, so the cache holds its own copy.

    def _store_routes(self, routes: list[RouteInfo]) -> None:
        self._cache.set(ALL_ROUTES_KEY, copy.deepcopy(routes))

    def _store_route_details(self, route_id: str, details: RouteDetails) -> None:
        self._cache.set(route_details_key(route_id), copy.deepcopy(details))
