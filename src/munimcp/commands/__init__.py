"""Built-in CLI sub-commands for muni-mcp.

Modules:
    query: ``routes``, ``route`` and ``predictions`` one-shot lookups.
    config: ``config show`` for the effective configuration.
"""
