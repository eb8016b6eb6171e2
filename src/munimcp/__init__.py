"""munimcp -- SF MUNI transit data as MCP tools.

This package exposes the San Francisco MUNI public transit API (routes, route
details and real-time arrival predictions) as Model Context Protocol tools
served over stdin/stdout, for consumption by LLM-hosting clients.

Typical usage::

    muni-mcp serve                      # run the MCP server on stdio
    muni-mcp routes                     # one-shot query, printed to stdout
    muni-mcp predictions N 7142

Modules:
    app: Typer application and console entry point.
    server: FastMCP wiring for the six tools.
    tools: Tool handlers over an explicit client instance.
    client: Async and blocking MUNI API clients.
    cache: In-memory TTL cache with runtime enable/disable.
    models: Pydantic models for upstream shapes and configuration.
    config: Environment and flag resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr discipline with Rich support.
"""

__version__ = "0.2.0"
