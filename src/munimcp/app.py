"""Typer application and CLI entry point for muni-mcp.

This module wires together the top-level Typer application: the ``serve``
command that runs the MCP server over stdio, the one-shot query commands
(``routes``, ``route``, ``predictions``) and the ``config`` group.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``.  :class:`~munimcp.exceptions.MuniError` instances
escaping a command are printed to stderr and turned into their exit code.

See Also:
    :mod:`munimcp.config`: Flag and environment resolution.
    :mod:`munimcp.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import sys
from typing import Optional

import typer

from munimcp import __version__
from munimcp.commands.config import config_app
from munimcp.commands.query import predictions_command, route_command, routes_command
from munimcp.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="muni-mcp",
    help="SF MUNI transit data as Model Context Protocol tools.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("routes")(routes_command)
app.command("route")(route_command)
app.command("predictions")(predictions_command)
app.add_typer(config_app, name="config", help="Configuration inspection.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"muni-mcp {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="MUNI API base URL (overrides MUNI_API_BASE_URL)."
    ),
    api_key: Optional[str] = typer.Option(
        None, "--api-key", help="MUNI API key (overrides MUNI_API_KEY)."
    ),
    cache_ttl: Optional[str] = typer.Option(
        None, "--cache-ttl", help="Cache TTL such as 90s or 5m (overrides MUNI_CACHE_TTL)."
    ),
    no_cache: bool = typer.Option(
        False, "--no-cache", help="Start with response caching disabled."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output on stderr."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~munimcp.output.OutputManager` from the
    output flags and stores the connection flags in ``ctx.obj`` for the
    sub-commands to resolve.
    """
    from munimcp.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["base_url"] = base_url
    ctx.obj["api_key"] = api_key
    ctx.obj["cache_ttl"] = cache_ttl
    ctx.obj["no_cache"] = no_cache


@app.command("serve")
def serve_command(ctx: typer.Context) -> None:
    """Run the MCP server on stdin/stdout.

    Example::

        MUNI_CACHE_TTL=2m muni-mcp serve
    """
    from munimcp.config import resolve_config
    from munimcp.server import run

    opts = ctx.obj or {}
    config = resolve_config(
        base_url=opts.get("base_url"),
        api_key=opts.get("api_key"),
        cache_ttl=opts.get("cache_ttl"),
        no_cache=opts.get("no_cache", False),
    )
    run(config)


def main() -> None:
    """CLI entry point invoked by the ``muni-mcp`` console script.

    Unhandled :class:`~munimcp.exceptions.MuniError` instances cause a clean
    exit with the error's ``exit_code``.  Any other exception is reported on
    stderr and exits with :data:`~munimcp.exit_codes.EXIT_GENERIC_FAILURE`.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from munimcp.exceptions import MuniError
        from munimcp.output import error

        if isinstance(exc, MuniError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc!r}")
        sys.exit(EXIT_GENERIC_FAILURE)
