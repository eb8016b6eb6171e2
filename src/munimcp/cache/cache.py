"""In-memory TTL cache for decoded MUNI API responses.

Entries live only for the lifetime of the process.  Every entry gets the
same time-to-live, measured on a monotonic clock from the moment it was
stored.  A global enabled switch hides entries without purging them: while
the cache is disabled ``get`` always misses and ``set`` does nothing, and
re-enabling makes any still-unexpired entries visible again.

Hits are returned as deep copies so callers can never mutate cached state
through a returned reference.

See Also:
    :class:`~munimcp.models.CacheConfig` -- the Pydantic model that
    controls ``enabled`` and ``ttl_seconds``.
"""

from __future__ import annotations

import copy
import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from munimcp.cache.lock import ReadWriteLock
from munimcp.models import DEFAULT_CACHE_TTL_SECONDS

V = TypeVar("V")


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    """A stored value and the monotonic instant at which it expires."""

    value: V
    expires_at: float

    def is_live(self, now: float) -> bool:
        return now < self.expires_at


class TTLCache(Generic[V]):
    """Thread-safe key/value cache with per-entry expiry and an on/off switch.

    Lookups take a shared lock and never block each other; ``set``,
    ``clear``, ``enable`` and ``disable`` take it exclusively.  No operation
    performs I/O.

    Args:
        ttl_seconds: Lifetime applied to every new entry.
        enabled: Initial state of the enabled switch.
        clock: Monotonic clock returning seconds.  Injectable for tests.

    Example::

        cache: TTLCache[list[RouteInfo]] = TTLCache(ttl_seconds=300)
        cache.set("all_routes", routes)
        routes, found = cache.get("all_routes")
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        enabled: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._enabled = enabled
        self._clock = clock
        self._items: dict[str, CacheEntry[V]] = {}
        self._lock = ReadWriteLock()

    @property
    def ttl(self) -> float:
        """Lifetime in seconds applied to new entries."""
        return self._ttl

    @property
    def is_enabled(self) -> bool:
        with self._lock.read():
            return self._enabled

    def get(self, key: str, kind: Optional[type] = None) -> tuple[Optional[V], bool]:
        """Look up *key*.

        Args:
            key: The cache key.
            kind: When given, a stored value that is not an instance of
                this type counts as a miss.

        Returns:
            ``(copy_of_value, True)`` on a hit, ``(None, False)`` when the
            cache is disabled, the key is absent or expired, or the stored
            value is unusable.
        """
        with self._lock.read():
            if not self._enabled:
                return None, False
            entry = self._items.get(key)

        if entry is None or not entry.is_live(self._clock()):
            return None, False
        if kind is not None and not isinstance(entry.value, kind):
            return None, False

        # A value that cannot be cloned is treated like a miss so the caller
        # falls back to fetching it again.
        try:
            return copy.deepcopy(entry.value), True
        except (TypeError, copy.Error, RecursionError):
            return None, False

    def set(self, key: str, value: V) -> None:
        """Store *value* under *key*, replacing any previous entry.

        Does nothing while the cache is disabled.
        """
        with self._lock.write():
            if not self._enabled:
                return
            self._items[key] = CacheEntry(value=value, expires_at=self._clock() + self._ttl)

    def clear(self) -> None:
        """Remove all entries, whether or not the cache is enabled."""
        with self._lock.write():
            self._items = {}

    def enable(self) -> None:
        with self._lock.write():
            self._enabled = True

    def disable(self) -> None:
        with self._lock.write():
            self._enabled = False

    def stats(self) -> dict[str, Any]:
        """Return ``enabled``, ``size`` (stored entries, live or not) and ``ttl_seconds``."""
        with self._lock.read():
            return {
                "enabled": self._enabled,
                "size": len(self._items),
                "ttl_seconds": self._ttl,
            }

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._items)
