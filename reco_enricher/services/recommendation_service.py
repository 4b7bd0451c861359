"""Recommendation facade over the Knowledge Graph and Wikipedia providers.

Chooses which upstream answers a query, clamps the requested limit, wraps
the provider's :class:`LookupResult` into a :class:`RecommendationResult`
and keeps the shared image URL memo map bounded.

Source selection
----------------
``knowledge_graph``
    Knowledge Graph only.  A missing API key raises
    :class:`ConfigurationError` to the caller.
``wikipedia``
    Wikipedia only.
``auto``
    Knowledge Graph when it is configured and returns at least one item,
    otherwise Wikipedia (unless ``fallback_to_wikipedia`` is disabled and
    the Knowledge Graph was tried).
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from enum import Enum

import structlog

from reco_enricher.config.settings import Settings
from reco_enricher.models.knowledge_graph import CategorizedEntity
from reco_enricher.models.recommendation import (
    RecommendationItem,
    RecommendationResult,
    RecommendationSource,
)
from reco_enricher.models.results import LookupResult
from reco_enricher.providers.knowledge_graph.google_kg_provider import (
    GoogleKnowledgeGraphProvider,
    determine_category,
)
from reco_enricher.providers.wikipedia.wikipedia_provider import WikipediaProvider
from reco_enricher.utils.image_urls import ImageUrlBuilder
from reco_enricher.utils.logging import get_logger

_DEFAULT_MAX_LIMIT = 20
_DEFAULT_TMDB_SIZE = "w500"


class ImageKind(str, Enum):
    """Kinds of raw image reference accepted by :meth:`resolve_image_url`."""

    PROXY = "proxy"
    TMDB = "tmdb"
    WIKIDATA = "wikidata"


class RecommendationService:
    """Routes recommendation queries to the right upstream provider.

    Parameters
    ----------
    knowledge_graph:
        Primary source; needs an API key.
    wikipedia:
        Keyless fallback source.
    image_urls:
        The builder shared with the Knowledge Graph provider.  Its memo map
        is trimmed to ``settings.image_url_cache_max_size`` after every
        :meth:`recommend` call.
    settings:
        Supplies the default limit and the image URL cache bound.
    fallback_to_wikipedia:
        Whether ``auto`` mode falls back to Wikipedia after the Knowledge
        Graph came back empty.
    max_limit:
        Upper bound applied to any requested limit.
    """

    def __init__(
        self,
        knowledge_graph: GoogleKnowledgeGraphProvider,
        wikipedia: WikipediaProvider,
        image_urls: ImageUrlBuilder,
        settings: Settings,
        fallback_to_wikipedia: bool = True,
        max_limit: int = _DEFAULT_MAX_LIMIT,
    ) -> None:
        self._knowledge_graph = knowledge_graph
        self._wikipedia = wikipedia
        self._image_urls = image_urls
        self._default_limit = settings.default_limit
        self._image_cache_max_size = settings.image_url_cache_max_size
        self._fallback_to_wikipedia = fallback_to_wikipedia
        self._max_limit = max(max_limit, 1)
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Recommendations
    # ------------------------------------------------------------------

    async def recommend(
        self,
        query: str,
        types: Sequence[str] = (),
        limit: int | None = None,
        source: RecommendationSource | str = RecommendationSource.AUTO,
    ) -> RecommendationResult:
        """Return recommendation items for *query* from the selected source.

        Raises
        ------
        ConfigurationError
            When ``source`` is ``knowledge_graph`` and no API key is set.
        ValueError
            When ``source`` is not a known :class:`RecommendationSource`.
        """
        requested = RecommendationSource(source)
        effective_limit = self._clamp_limit(limit)

        try:
            if requested is RecommendationSource.KNOWLEDGE_GRAPH:
                used = RecommendationSource.KNOWLEDGE_GRAPH
                result = await self._knowledge_graph.get_recommendations(
                    query, effective_limit, types
                )
            elif requested is RecommendationSource.WIKIPEDIA:
                used = RecommendationSource.WIKIPEDIA
                result = await self._wikipedia.get_recommendations(query, effective_limit)
            else:
                used, result = await self._recommend_auto(query, types, effective_limit)
        finally:
            self._image_urls.limit_cache_size(self._image_cache_max_size)

        self._logger.info(
            "recommendations_complete",
            query=query,
            requested_source=requested.value,
            source=used.value,
            item_count=len(result.value),
            failure_reason=result.reason.value if result.reason else None,
        )
        return RecommendationResult(
            query=query,
            source=used,
            items=list(result.value),
            failure_reason=result.reason.value if result.reason else None,
            generated_at=datetime.now(tz=timezone.utc),  # noqa: UP017
        )

    async def _recommend_auto(
        self,
        query: str,
        types: Sequence[str],
        limit: int,
    ) -> tuple[RecommendationSource, LookupResult[list[RecommendationItem]]]:
        if self._knowledge_graph.is_available():
            kg_result = await self._knowledge_graph.get_recommendations(query, limit, types)
            if kg_result.value or not self._fallback_to_wikipedia:
                return RecommendationSource.KNOWLEDGE_GRAPH, kg_result
            self._logger.info(
                "knowledge_graph_empty_fallback",
                query=query,
                reason=kg_result.reason.value if kg_result.reason else None,
            )
        else:
            self._logger.debug("knowledge_graph_unconfigured_fallback", query=query)

        wiki_result = await self._wikipedia.get_recommendations(query, limit)
        return RecommendationSource.WIKIPEDIA, wiki_result

    # ------------------------------------------------------------------
    # Entity search
    # ------------------------------------------------------------------

    async def search_entities(
        self,
        query: str,
        types: Sequence[str] = (),
        limit: int | None = None,
    ) -> LookupResult[list[CategorizedEntity]]:
        """Knowledge Graph entity search with each entity's shelf attached.

        Raises :class:`ConfigurationError` when no API key is configured.
        """
        search = await self._knowledge_graph.search_entities(
            query, types, self._clamp_limit(limit)
        )
        categorized = [
            CategorizedEntity(entity=entity, category=determine_category(entity))
            for entity in search.value
        ]
        if search.ok:
            return LookupResult.success(categorized, from_cache=search.from_cache)
        return LookupResult.failure(categorized, search.reason, search.detail)

    # ------------------------------------------------------------------
    # Image URLs
    # ------------------------------------------------------------------

    def resolve_image_url(
        self,
        kind: ImageKind | str,
        ref: str | None,
        size: str | None = None,
    ) -> str:
        """Build a displayable URL for a raw image reference.

        ``proxy`` rewrites a remote URL through the image proxy, ``tmdb``
        builds a TMDb poster URL at *size* and ``wikidata`` builds a proxied
        Wikimedia Commons file-path URL.  Absent *ref* gives the placeholder.
        """
        image_kind = ImageKind(kind)
        if image_kind is ImageKind.PROXY:
            return self._image_urls.get_proxied_image_url(ref)
        if image_kind is ImageKind.TMDB:
            return self._image_urls.get_tmdb_image_url(ref, size or _DEFAULT_TMDB_SIZE)
        return self._image_urls.get_wikipedia_image_url(ref)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _clamp_limit(self, limit: int | None) -> int:
        if limit is None or limit < 1:
            limit = self._default_limit
        return min(limit, self._max_limit)
