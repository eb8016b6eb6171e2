"""Query commands -- one-shot MUNI lookups printed to stdout.

Provides ``muni-mcp routes``, ``muni-mcp route`` and ``muni-mcp predictions``.
Each builds a :class:`~munimcp.client.SyncMuniClient` from the resolved
configuration, performs a single fetch and renders the normalized result
with the active output format.  They call the same client code the MCP tools
use, which makes them handy for checking the upstream API by hand.

Errors propagate as :class:`~munimcp.exceptions.MuniError` and are turned
into exit codes by :func:`munimcp.app.main`.
"""

from __future__ import annotations

import typer

from munimcp.client import SyncMuniClient
from munimcp.config import resolve_config
from munimcp.output import OutputFormat, format_response, get_output, info, print_table


def _client_from_context(ctx: typer.Context) -> SyncMuniClient:
    opts = ctx.obj or {}
    config = resolve_config(
        base_url=opts.get("base_url"),
        api_key=opts.get("api_key"),
        cache_ttl=opts.get("cache_ttl"),
        no_cache=opts.get("no_cache", False),
    )
    return SyncMuniClient(config.base_url, api_key=config.api_key, config=config.cache)


def routes_command(ctx: typer.Context) -> None:
    """List all MUNI routes.

    Example::

        muni-mcp routes
        muni-mcp --json routes
    """
    with _client_from_context(ctx) as client:
        routes = client.get_all_routes()

    info(f"{len(routes)} routes")
    if get_output().format == OutputFormat.JSON:
        format_response([route.to_wire() for route in routes])
        return
    print_table(
        ["id", "title", "description", "color"],
        [[r.id, r.title, r.description, r.color] for r in routes],
        title="MUNI routes",
    )


def route_command(
    ctx: typer.Context,
    route_id: str = typer.Argument(help="ID of the route (e.g., 'N' for N-Judah)."),
) -> None:
    """Show stops, directions and geometry for one route.

    Example::

        muni-mcp route N
    """
    with _client_from_context(ctx) as client:
        details = client.get_route_details(route_id)

    info(f"{details.title}: {len(details.stops)} stops, {len(details.directions)} directions")
    format_response(details.to_wire())


def predictions_command(
    ctx: typer.Context,
    route_id: str = typer.Argument(help="ID of the route (e.g., 'N')."),
    stop_id: str = typer.Argument(help="ID of the stop (e.g., '7142')."),
) -> None:
    """Show real-time arrival/departure predictions for a stop on a route.

    Example::

        muni-mcp predictions N 7142
    """
    with _client_from_context(ctx) as client:
        predictions = client.get_predictions(route_id, stop_id)

    if not predictions:
        info("No predictions available")
    if get_output().format == OutputFormat.JSON:
        format_response([p.model_dump(mode="json") for p in predictions])
        return
    print_table(
        ["minutes", "direction", "destination", "vehicle", "type", "departure"],
        [
            [
                str(p.minutes),
                p.direction,
                p.destination_name,
                p.vehicle_id,
                p.vehicle_type,
                "yes" if p.is_departure else "no",
            ]
            for p in predictions
        ],
        title=f"Predictions for {route_id} at stop {stop_id}",
    )
