"""reco-enricher domain models — re-exports all public model classes.

The models are organized by upstream concern:
    - knowledge_graph.py — Google Knowledge Graph entity shapes
    - wikipedia.py       — MediaWiki search hits and page extracts
    - recommendation.py  — Normalized recommendation items and results
    - results.py         — LookupResult success/empty-with-reason wrapper
"""

from __future__ import annotations

from reco_enricher.models.knowledge_graph import (
    CategorizedEntity,
    DetailedDescription,
    EntityImage,
    KnowledgeGraphEntity,
)
from reco_enricher.models.recommendation import (
    RecommendationItem,
    RecommendationResult,
    RecommendationSource,
)
from reco_enricher.models.results import FailureReason, LookupResult
from reco_enricher.models.wikipedia import (
    WikipediaPage,
    WikipediaSearchHit,
    WikipediaThumbnail,
)

__all__ = [
    "CategorizedEntity",
    "DetailedDescription",
    "EntityImage",
    "FailureReason",
    "KnowledgeGraphEntity",
    "LookupResult",
    "RecommendationItem",
    "RecommendationResult",
    "RecommendationSource",
    "WikipediaPage",
    "WikipediaSearchHit",
    "WikipediaThumbnail",
]
