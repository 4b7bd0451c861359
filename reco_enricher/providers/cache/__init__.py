"""Cache providers.

In-memory caches placed in front of upstream API calls so that repeated
queries within the process lifetime do not hit the network again.

MemoryCacheProvider is process-local. For multi-worker deployments, swap in
a Redis adapter implementing ICacheProvider without changing provider code.
"""

from reco_enricher.providers.cache.memory_cache import MemoryCacheProvider

__all__ = ["MemoryCacheProvider"]
