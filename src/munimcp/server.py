"""MCP server wiring -- registers the MUNI tools with FastMCP over stdio.

:func:`create_server` builds a :class:`~mcp.server.fastmcp.FastMCP` instance
whose tools close over a :class:`~munimcp.tools.MuniTools` handed in by the
caller, so the transit client is an explicit object rather than a module
global.  :func:`serve` owns the client for the lifetime of the stdio session.

stdout carries the protocol; diagnostics go to stderr through
:mod:`munimcp.output`.
"""

import asyncio
from typing import Annotated

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from munimcp import __version__
from munimcp.client import MuniClient
from munimcp.models import ServerConfig
from munimcp.output import info
from munimcp.tools import MuniTools

SERVER_NAME = "SF MUNI API Server"

RouteID = Annotated[str, Field(description="ID of the route (e.g., 'N' for N-Judah)")]
StopID = Annotated[str, Field(description="ID of the stop (e.g., '7142')")]


def create_server(tools: MuniTools) -> FastMCP:
    """Build the FastMCP server exposing the six MUNI tools."""
    server = FastMCP(
        SERVER_NAME,
        instructions="San Francisco MUNI routes, route details and real-time predictions",
    )

    @server.tool(name="health_check", description="Check if the MUNI API server is healthy")
    async def health_check() -> str:
        return await tools.health_check()

    @server.tool(
        name="list_all_routes",
        description="Get a list of all MUNI routes with detailed information",
    )
    async def list_all_routes() -> str:
        return await tools.list_all_routes()

    @server.tool(
        name="get_route_details",
        description="Get detailed information about a specific MUNI route",
    )
    async def get_route_details(route_id: RouteID) -> str:
        return await tools.get_route_details(route_id)

    @server.tool(
        name="get_predictions",
        description="Get real-time arrival/departure predictions for a specific stop on a route",
    )
    async def get_predictions(route_id: RouteID, stop_id: StopID) -> str:
        return await tools.get_predictions(route_id, stop_id)

    @server.tool(name="clear_cache", description="Clear the cached MUNI API responses")
    def clear_cache() -> str:
        return tools.clear_cache()

    @server.tool(
        name="toggle_cache",
        description="Enable or disable caching of MUNI API responses",
    )
    def toggle_cache(
        enabled: Annotated[
            bool, Field(description="Set to true to enable caching, false to disable")
        ],
    ) -> str:
        return tools.toggle_cache(enabled)

    return server


async def serve(config: ServerConfig) -> None:
    """Run the MCP server on stdin/stdout until the host closes the session."""
    async with MuniClient(config.base_url, api_key=config.api_key, config=config.cache) as client:
        server = create_server(MuniTools(client))
        info(f"Starting SF MUNI MCP server {__version__} ({config.base_url})...")
        await server.run_stdio_async()


def run(config: ServerConfig) -> None:
    """Blocking entry point used by ``muni-mcp serve``."""
    asyncio.run(serve(config))
