"""Configuration resolution from CLI flags, environment variables and defaults.

Precedence, highest first:

1. CLI flags passed to ``muni-mcp serve`` or a query command.
2. Environment variables:

   * ``MUNI_API_BASE_URL`` -- upstream base URL.
   * ``MUNI_API_KEY`` -- optional API key.
   * ``MUNI_CACHE_TTL`` -- cache TTL as a duration string such as ``90s``,
     ``5m``, ``1h30m`` or ``250ms``.  A value that does not parse is ignored
     and the 5 minute default applies.
   * ``MUNI_CACHE_DISABLED`` -- ``1``/``true``/``yes``/``on`` starts the
     process with the cache switched off.

3. Built-in defaults from :class:`~munimcp.models.ServerConfig`.
"""

from __future__ import annotations

import os
import re
from typing import Optional

from munimcp.exceptions import ConfigError
from munimcp.models import DEFAULT_BASE_URL, DEFAULT_CACHE_TTL_SECONDS, CacheConfig, ServerConfig
from munimcp.output import debug

ENV_BASE_URL = "MUNI_API_BASE_URL"
ENV_API_KEY = "MUNI_API_KEY"
ENV_CACHE_TTL = "MUNI_CACHE_TTL"
ENV_CACHE_DISABLED = "MUNI_CACHE_DISABLED"

_TRUTHY = {"1", "true", "yes", "on"}

_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(text: str) -> float:
    """Parse a duration string into seconds.

    Accepts a signed sequence of decimal numbers, each with a unit suffix
    (``ns``, ``us``, ``ms``, ``s``, ``m``, ``h``), e.g. ``"300ms"``,
    ``"1.5h"``, ``"2h45m"``.  A bare ``"0"`` is zero.

    Raises:
        ValueError: *text* is not a valid duration.
    """
    s = text.strip()
    sign = 1.0
    if s[:1] in ("+", "-"):
        sign = -1.0 if s[0] == "-" else 1.0
        s = s[1:]
    if s == "0":
        return 0.0
    if not s:
        raise ValueError(f"invalid duration {text!r}")

    total = 0.0
    pos = 0
    while pos < len(s):
        match = _DURATION_PART.match(s, pos)
        if match is None:
            raise ValueError(f"invalid duration {text!r}")
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        pos = match.end()
    return sign * total


def _env_cache_ttl() -> Optional[float]:
    raw = os.environ.get(ENV_CACHE_TTL)
    if not raw:
        return None
    try:
        return parse_duration(raw)
    except ValueError:
        debug(f"Ignoring {ENV_CACHE_TTL}={raw!r}; using {DEFAULT_CACHE_TTL_SECONDS:g}s")
        return None


def resolve_config(
    base_url: Optional[str] = None,
    api_key: Optional[str] = None,
    cache_ttl: Optional[str] = None,
    no_cache: bool = False,
) -> ServerConfig:
    """Merge CLI flags, environment and defaults into a :class:`ServerConfig`.

    Args:
        base_url: ``--base-url`` flag value.
        api_key: ``--api-key`` flag value.
        cache_ttl: ``--cache-ttl`` flag value (duration string).
        no_cache: ``--no-cache`` flag; starts with the cache disabled.

    Raises:
        ConfigError: The ``--cache-ttl`` flag does not parse, or the
            resolved base URL is blank.
    """
    resolved_url = base_url or os.environ.get(ENV_BASE_URL) or DEFAULT_BASE_URL
    if not resolved_url.strip():
        raise ConfigError("MUNI API base URL must not be empty")

    if cache_ttl is not None:
        try:
            ttl = parse_duration(cache_ttl)
        except ValueError as exc:
            raise ConfigError(f"Invalid --cache-ttl: {exc}") from exc
    else:
        ttl = _env_cache_ttl()
        if ttl is None:
            ttl = DEFAULT_CACHE_TTL_SECONDS

    disabled = no_cache or os.environ.get(ENV_CACHE_DISABLED, "").strip().lower() in _TRUTHY

    return ServerConfig(
        base_url=resolved_url,
        api_key=api_key or os.environ.get(ENV_API_KEY) or None,
        cache=CacheConfig(enabled=not disabled, ttl_seconds=ttl),
    )
