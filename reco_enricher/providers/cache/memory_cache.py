"""In-memory cache provider built on cachetools.

One instance per cached operation: the Wikipedia provider holds a search
cache and a content cache with a 24h TTL, the Knowledge Graph provider holds
a search cache whose entries never expire.  Expired entries are purged lazily
on the next access; there is no background eviction.
"""

from __future__ import annotations

import math
import time
from collections.abc import Callable
from typing import Any

import structlog
from cachetools import Cache, TTLCache

from reco_enricher.interfaces.cache_provider import ICacheProvider

logger = structlog.get_logger(logger_name=__name__)


class MemoryCacheProvider(ICacheProvider):
    """In-memory cache backed by ``cachetools.TTLCache`` or ``cachetools.Cache``.

    Parameters
    ----------
    max_size:
        Maximum number of entries; when full the oldest entry is evicted to
        make room.  ``0`` means unbounded.
    ttl:
        Time-to-live in seconds.  An entry stored at ``t`` is served while
        ``timer() - t < ttl``.  ``0`` means entries never expire.
    timer:
        Clock used for expiry.  Tests inject a fake clock.
    name:
        Label included in debug log events to tell caches apart.
    """

    def __init__(
        self,
        max_size: int = 1000,
        ttl: int | float = 3600,
        timer: Callable[[], float] = time.monotonic,
        name: str = "cache",
    ) -> None:
        self._name = name
        self._ttl = ttl
        maxsize = max_size if max_size > 0 else math.inf
        if ttl > 0:
            self._cache: Cache = TTLCache(maxsize=maxsize, ttl=ttl, timer=timer)
        else:
            self._cache = Cache(maxsize=maxsize)

    @property
    def ttl(self) -> int | float:
        return self._ttl

    @property
    def name(self) -> str:
        return self._name

    def _purge_expired(self) -> None:
        if isinstance(self._cache, TTLCache):
            self._cache.expire()

    # ------------------------------------------------------------------
    # ICacheProvider implementation
    # ------------------------------------------------------------------

    async def get(self, key: str) -> Any | None:
        """Retrieve the cached value for *key*, or ``None`` if missing/expired."""
        self._purge_expired()
        value = self._cache.get(key)
        if value is not None:
            logger.debug("cache_hit", cache=self._name, key=key)
        else:
            logger.debug("cache_miss", cache=self._name, key=key)
        return value

    async def set(self, key: str, value: Any) -> None:
        """Store *value* under *key*, stamping it with the current time."""
        self._cache[key] = value
        logger.debug("cache_set", cache=self._name, key=key)

    def size(self) -> int:
        return len(self._cache)
