"""MUNI API clients for munimcp.

Provides asynchronous and blocking clients that wrap :mod:`httpx` with
response caching, status/decoding error mapping, and prediction
normalization.

Classes:
    :class:`MuniClient` -- non-blocking client backed by :class:`httpx.AsyncClient`,
    held by the MCP server.
    :class:`SyncMuniClient` -- blocking client backed by :class:`httpx.Client`,
    used by the one-shot CLI commands.

Both own a :class:`~munimcp.cache.TTLCache`, apply a fixed 10 second request
timeout, and accept an optional ``transport`` for testing.

Example::

    from munimcp.client import SyncMuniClient

    with SyncMuniClient(base_url) as client:
        predictions = client.get_predictions("N", "7142")
"""

from munimcp.client.async_client import MuniClient
from munimcp.client.sync_client import SyncMuniClient

__all__ = ["MuniClient", "SyncMuniClient"]
