"""Tool handlers -- the six MUNI tools, independent of the MCP wiring.

:class:`MuniTools` maps each named tool to one call on an explicitly
constructed :class:`~munimcp.client.MuniClient` and serializes the result
to text.  A failed fetch never escapes as a raw exception: every
:class:`~munimcp.exceptions.MuniError` is re-raised as a
:class:`~mcp.server.fastmcp.exceptions.ToolError`, which the MCP server
reports to the calling LLM client as a tool result with ``isError`` set.

:mod:`munimcp.server` registers these handlers with FastMCP.
"""

from __future__ import annotations

import json
from typing import Any

from mcp.server.fastmcp.exceptions import ToolError

from munimcp.client import MuniClient
from munimcp.exceptions import MuniError
from munimcp.output import debug

HEALTHY_MESSAGE = "SF MUNI API server is healthy and running!"
CACHE_CLEARED_MESSAGE = "MUNI API cache has been cleared"
CACHE_ENABLED_MESSAGE = "MUNI API caching is now enabled"
CACHE_DISABLED_MESSAGE = "MUNI API caching is now disabled"


def to_json(data: Any) -> str:
    """Serialize a JSON-compatible document compactly."""
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


class MuniTools:
    """Tool-level operations over one shared :class:`MuniClient`.

    Args:
        client: The process-wide transit client.
    """

    def __init__(self, client: MuniClient) -> None:
        self._client = client

    @property
    def client(self) -> MuniClient:
        return self._client

    async def health_check(self) -> str:
        """Probe the upstream API with an all-routes fetch."""
        try:
            await self._client.get_all_routes()
        except MuniError as exc:
            raise ToolError(f"MUNI API health check failed: {exc}") from exc
        return HEALTHY_MESSAGE

    async def list_all_routes(self) -> str:
        try:
            routes = await self._client.get_all_routes()
        except MuniError as exc:
            raise ToolError(f"Failed to fetch routes: {exc}") from exc
        return to_json([route.to_wire() for route in routes])

    async def get_route_details(self, route_id: str) -> str:
        try:
            details = await self._client.get_route_details(route_id)
        except MuniError as exc:
            raise ToolError(f"Failed to fetch route details: {exc}") from exc
        return to_json(details.to_wire())

    async def get_predictions(self, route_id: str, stop_id: str) -> str:
        try:
            predictions = await self._client.get_predictions(route_id, stop_id)
        except MuniError as exc:
            raise ToolError(f"Failed to fetch predictions: {exc}") from exc
        return to_json([p.model_dump(mode="json") for p in predictions])

    def toggle_cache(self, enabled: bool) -> str:
        if enabled:
            self._client.enable_cache()
            debug("Cache enabled")
            return CACHE_ENABLED_MESSAGE
        self._client.disable_cache()
        debug("Cache disabled")
        return CACHE_DISABLED_MESSAGE

    def clear_cache(self) -> str:
        self._client.clear_cache()
        debug("Cache cleared")
        return CACHE_CLEARED_MESSAGE
