"""Tests for the tool handlers and their FastMCP registration."""

from __future__ import annotations

import json

import httpx
import pytest
import pytest_asyncio
from mcp.server.fastmcp.exceptions import ToolError

from conftest import AGENCY, BASE_URL, UpstreamStub
from munimcp.client import MuniClient
from munimcp.server import SERVER_NAME, create_server
from munimcp.tools import (
    CACHE_CLEARED_MESSAGE,
    CACHE_DISABLED_MESSAGE,
    CACHE_ENABLED_MESSAGE,
    HEALTHY_MESSAGE,
    MuniTools,
)


@pytest_asyncio.fixture
async def tools(upstream: UpstreamStub):
    client = MuniClient(BASE_URL, transport=upstream.transport())
    yield MuniTools(client)
    await client.aclose()


def _failing_tools(exc: Exception) -> MuniTools:
    stub = UpstreamStub()
    stub.fail_with(exc)
    return MuniTools(MuniClient(BASE_URL, transport=stub.transport()))


@pytest.mark.asyncio
class TestHealthCheck:
    async def test_healthy(self, tools: MuniTools, upstream: UpstreamStub) -> None:
        assert await tools.health_check() == HEALTHY_MESSAGE
        assert upstream.calls_to(f"{AGENCY}/routes") == 1

    async def test_unhealthy(self) -> None:
        tools = _failing_tools(httpx.ConnectError("API connection error"))
        with pytest.raises(ToolError, match="MUNI API health check failed: .*API connection error"):
            await tools.health_check()


@pytest.mark.asyncio
class TestRouteTools:
    async def test_list_all_routes_json(self, tools: MuniTools, routes_payload) -> None:
        text = await tools.list_all_routes()
        assert json.loads(text) == routes_payload

    async def test_list_all_routes_failure(self) -> None:
        stub = UpstreamStub()
        stub.add(f"{AGENCY}/routes", [], status_code=503)
        tools = MuniTools(MuniClient(BASE_URL, transport=stub.transport()))
        with pytest.raises(ToolError, match="Failed to fetch routes: unexpected status code: 503"):
            await tools.list_all_routes()

    async def test_get_route_details_json(self, tools: MuniTools) -> None:
        data = json.loads(await tools.get_route_details("N"))
        assert data["id"] == "N"
        assert data["boundingBox"]["lonMin"] == pytest.approx(-122.5089)
        assert [s["id"] for s in data["stops"]] == ["1234", "7142"]

    async def test_get_route_details_missing_id(self, tools: MuniTools, upstream: UpstreamStub) -> None:
        with pytest.raises(ToolError, match="Failed to fetch route details: route ID is required"):
            await tools.get_route_details("")
        assert upstream.call_count == 0


@pytest.mark.asyncio
class TestPredictionTool:
    async def test_predictions_json(self, tools: MuniTools) -> None:
        data = json.loads(await tools.get_predictions("N", "1234"))
        assert data == [
            {
                "vehicle_id": "1234",
                "minutes": 5,
                "direction": "Inbound",
                "destination_name": "Downtown",
                "timestamp": "2024-03-20T12:00:00Z",
                "vehicle_type": "LRV4",
                "is_departure": False,
            }
        ]

    async def test_bad_timestamp_reported_with_prefix(self) -> None:
        stub = UpstreamStub()
        stub.add(f"{AGENCY}/nstops/N:1234/predictions", [{"values": [{"timestamp": 10**17}]}])
        tools = MuniTools(MuniClient(BASE_URL, transport=stub.transport()))
        with pytest.raises(ToolError, match="Failed to fetch predictions: malformed prediction timestamp"):
            await tools.get_predictions("N", "1234")

    async def test_missing_stop(self, tools: MuniTools) -> None:
        with pytest.raises(ToolError, match="Failed to fetch predictions: stop ID is required"):
            await tools.get_predictions("N", "")


@pytest.mark.asyncio
class TestCacheTools:
    async def test_toggle_cache(self, tools: MuniTools, upstream: UpstreamStub) -> None:
        assert tools.toggle_cache(False) == CACHE_DISABLED_MESSAGE
        assert tools.client.cache.is_enabled is False
        await tools.list_all_routes()
        await tools.list_all_routes()
        assert upstream.call_count == 2

        assert tools.toggle_cache(True) == CACHE_ENABLED_MESSAGE
        await tools.list_all_routes()
        await tools.list_all_routes()
        assert upstream.call_count == 3

    async def test_clear_cache(self, tools: MuniTools, upstream: UpstreamStub) -> None:
        await tools.list_all_routes()
        assert tools.clear_cache() == CACHE_CLEARED_MESSAGE
        await tools.list_all_routes()
        assert upstream.call_count == 2


@pytest.mark.asyncio
class TestServerRegistration:
    async def test_six_tools_registered(self, tools: MuniTools) -> None:
        server = create_server(tools)
        assert server.name == SERVER_NAME
        registered = {tool.name: tool for tool in await server.list_tools()}
        assert set(registered) == {
            "health_check",
            "list_all_routes",
            "get_route_details",
            "get_predictions",
            "toggle_cache",
            "clear_cache",
        }

    async def test_required_arguments(self, tools: MuniTools) -> None:
        server = create_server(tools)
        registered = {tool.name: tool for tool in await server.list_tools()}

        details_schema = registered["get_route_details"].inputSchema
        assert details_schema["required"] == ["route_id"]
        assert details_schema["properties"]["route_id"]["type"] == "string"

        predictions_schema = registered["get_predictions"].inputSchema
        assert set(predictions_schema["required"]) == {"route_id", "stop_id"}

        toggle_schema = registered["toggle_cache"].inputSchema
        assert toggle_schema["required"] == ["enabled"]
        assert toggle_schema["properties"]["enabled"]["type"] == "boolean"

        assert not registered["health_check"].inputSchema.get("required")
