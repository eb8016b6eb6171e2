"""Config commands -- inspect the effective configuration.

Provides the ``muni-mcp config`` sub-command group.  ``show`` prints the
configuration a ``serve`` or query command would run with after merging CLI
flags, ``MUNI_*`` environment variables and defaults.  The API key is masked.
"""

from __future__ import annotations

import typer

from munimcp.config import resolve_config
from munimcp.output import format_response


config_app = typer.Typer(no_args_is_help=True)


def _mask(secret: str) -> str:
    if len(secret) <= 4:
        return "****"
    return f"{'*' * (len(secret) - 4)}{secret[-4:]}"


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the effective configuration.

    Example::

        MUNI_CACHE_TTL=30s muni-mcp config show
        muni-mcp --no-cache --json config show
    """
    opts = ctx.obj or {}
    config = resolve_config(
        base_url=opts.get("base_url"),
        api_key=opts.get("api_key"),
        cache_ttl=opts.get("cache_ttl"),
        no_cache=opts.get("no_cache", False),
    )
    data = config.model_dump(mode="json")
    if config.api_key:
        data["api_key"] = _mask(config.api_key)
    format_response(data)
