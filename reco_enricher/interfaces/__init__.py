"""Public interface definitions for external service providers.

Every upstream API is accessed through the abstract base classes defined in
this package.  Concrete adapters implement them and are injected at runtime,
so tests can substitute fakes and the recommendation service can try sources
in priority order.

CONCRETE PROVIDER MAP:
    Interface                  →  Concrete implementations
    ─────────────────────────────────────────────────────────────────────
    IRecommendationProvider    →  GoogleKnowledgeGraphProvider,
                                  WikipediaProvider
    ICacheProvider             →  MemoryCacheProvider
"""

from reco_enricher.interfaces.cache_provider import ICacheProvider
from reco_enricher.interfaces.recommendation_provider import IRecommendationProvider

__all__ = [
    "ICacheProvider",
    "IRecommendationProvider",
]
