"""In-memory response caching for munimcp.

This package provides :class:`TTLCache`, the cache owned by every transit
client.  Decoded route lists and route details are stored under fixed keys
(``all_routes``, ``route_details:<id>``) with a uniform TTL; predictions are
never cached.  The cache can be switched off and on at runtime without losing
its contents.

The cache is consumed by :class:`~munimcp.client.MuniClient` and
:class:`~munimcp.client.SyncMuniClient` and is configured through
:class:`~munimcp.models.CacheConfig`.
"""

from munimcp.cache.cache import CacheEntry, TTLCache
from munimcp.cache.lock import ReadWriteLock

__all__ = ["CacheEntry", "ReadWriteLock", "TTLCache"]
