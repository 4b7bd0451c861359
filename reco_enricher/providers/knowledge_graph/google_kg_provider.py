"""Google Knowledge Graph Search API provider implementing IRecommendationProvider.

Searches ``kgsearch.googleapis.com`` for entities matching a free-text query
(Japanese first, English second), classifies each entity onto a
recommendation shelf, resolves its best image and maps it into a
:class:`RecommendationItem`.

Image resolution order:

1. ``image.contentUrl`` — proxied.
2. ``image.url`` — proxied.
3. A Wikidata id embedded in ``@id`` — the Wikipedia provider is asked for
   that page's thumbnail, which is proxied if present.
4. The placeholder.

Legacy Freebase ids (``kg:/m/0abc``) are recognised but there is no lookup
for them.

Requires ``GOOGLE_KNOWLEDGE_GRAPH_API_KEY``; without it every search raises
:class:`ConfigurationError` before touching the cache or the network.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import ValidationError

from reco_enricher.config.domain_knowledge import EntityCategory, classify_type_tags
from reco_enricher.config.settings import Settings
from reco_enricher.interfaces.cache_provider import ICacheProvider
from reco_enricher.interfaces.recommendation_provider import IRecommendationProvider
from reco_enricher.models.knowledge_graph import KnowledgeGraphEntity
from reco_enricher.models.recommendation import RecommendationItem
from reco_enricher.models.results import FailureReason, LookupResult, failure_reason_for
from reco_enricher.providers.wikipedia.wikipedia_provider import WikipediaProvider
from reco_enricher.utils.errors import ConfigurationError, DataShapeError, UpstreamError
from reco_enricher.utils.http import get_json
from reco_enricher.utils.image_urls import ImageUrlBuilder
from reco_enricher.utils.logging import get_logger

_WIKIDATA_ID_PATTERN = re.compile(r"wikidata\.org/entity/(Q\d+)")
_FREEBASE_ID_PATTERN = re.compile(r"/m/([a-zA-Z0-9_]+)")
_TYPE_NAMESPACE_PATTERN = re.compile(r"^[a-z]+:")
_MAX_TYPE_FEATURES = 3
_OFFICIAL_SITE_FEATURE = "公式サイトあり"


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


def extract_wikidata_id(entity_id: str | None) -> str | None:
    """Return the ``Q<digits>`` Wikidata id embedded in *entity_id*, if any."""
    if not entity_id:
        return None
    match = _WIKIDATA_ID_PATTERN.search(entity_id)
    return match.group(1) if match else None


def extract_freebase_id(entity_id: str | None) -> str | None:
    """Return the legacy Freebase token from a ``/m/<token>`` id, if any."""
    if not entity_id:
        return None
    match = _FREEBASE_ID_PATTERN.search(entity_id)
    return match.group(1) if match else None


def determine_category(entity: KnowledgeGraphEntity) -> EntityCategory:
    """Classify *entity* onto a recommendation shelf from its type tags."""
    return classify_type_tags(entity.types)


def strip_type_namespace(type_tag: str) -> str:
    """Drop a leading lower-case ``namespace:`` prefix, e.g. ``schema:Person``."""
    return _TYPE_NAMESPACE_PATTERN.sub("", type_tag)


class GoogleKnowledgeGraphProvider(IRecommendationProvider):
    """Recommendation source backed by the Google Knowledge Graph Search API.

    Parameters
    ----------
    http_client:
        Shared ``httpx.AsyncClient``.
    settings:
        Supplies the API key, endpoint and language preference.
    cache:
        Cache for ``search_entities`` results.  Entries never expire by
        default (``knowledge_graph_cache_ttl=0``).
    wikipedia:
        Used to look up thumbnails for entities that only carry a
        Wikidata id.
    image_urls:
        Builds proxied image URLs.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: Settings,
        cache: ICacheProvider,
        wikipedia: WikipediaProvider,
        image_urls: ImageUrlBuilder,
    ) -> None:
        self._http = http_client
        self._api_key = settings.google_knowledge_graph_api_key.strip()
        self._api_url = settings.knowledge_graph_api_url
        self._languages = settings.knowledge_graph_languages
        self._cache = cache
        self._wikipedia = wikipedia
        self._image_urls = image_urls
        self._logger = get_logger(__name__)

    def _get_api_key(self) -> str:
        if not self._api_key:
            raise ConfigurationError(
                message="Google Knowledge Graph API key is not set in environment variables",
                provider_name=self.get_provider_name(),
            )
        return self._api_key

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def search_entities(
        self,
        query: str,
        types: Sequence[str] = (),
        limit: int = 10,
    ) -> LookupResult[list[KnowledgeGraphEntity]]:
        """Search for entities matching *query*, optionally filtered by *types*.

        Raises
        ------
        ConfigurationError
            If no API key is configured.  Raised before any cache lookup
            or network call.
        """
        api_key = self._get_api_key()

        types_str = ",".join(types)
        cache_key = f"{query}_{types_str}_{limit}"
        cached = await self._cache.get(cache_key)
        if cached is not None:
            return LookupResult.success(cached, from_cache=True)

        params: dict[str, Any] = {
            "query": query,
            "key": api_key,
            "limit": limit,
            "indent": "true",
        }
        if types:
            params["types"] = types_str
        params["languages"] = self._languages

        try:
            data = await get_json(
                self._http,
                self._api_url,
                params=params,
                provider_name=self.get_provider_name(),
            )
            entities = self._parse_entities(data)
        except (UpstreamError, DataShapeError) as exc:
            # Failures are not cached so the next call retries upstream.
            self._logger.warning(
                "knowledge_graph_search_failed",
                query=query,
                types=types_str,
                error=str(exc),
            )
            return LookupResult.failure([], failure_reason_for(exc), str(exc))

        await self._cache.set(cache_key, entities)
        self._logger.info(
            "knowledge_graph_search_complete",
            query=query,
            types=types_str,
            result_count=len(entities),
        )
        return LookupResult.success(entities)

    # ------------------------------------------------------------------
    # Classification / conversion
    # ------------------------------------------------------------------

    @staticmethod
    def determine_category(entity: KnowledgeGraphEntity) -> EntityCategory:
        return determine_category(entity)

    async def resolve_image_url(self, entity: KnowledgeGraphEntity) -> str:
        """Pick the best displayable image URL for *entity*."""
        if entity.image is not None and entity.image.content_url:
            self._logger.debug(
                "knowledge_graph_image", source="content_url", url=entity.image.content_url
            )
            return self._image_urls.get_proxied_image_url(entity.image.content_url)

        if entity.image is not None and entity.image.url:
            self._logger.debug("knowledge_graph_image", source="url", url=entity.image.url)
            return self._image_urls.get_proxied_image_url(entity.image.url)

        wikidata_id = extract_wikidata_id(entity.id)
        if wikidata_id:
            content = await self._wikipedia.get_wikipedia_content(wikidata_id)
            page = content.value
            if page is not None and page.thumbnail is not None and page.thumbnail.source:
                self._logger.debug(
                    "knowledge_graph_image",
                    source="wikipedia",
                    wikidata_id=wikidata_id,
                    url=page.thumbnail.source,
                )
                return self._image_urls.get_proxied_image_url(page.thumbnail.source)
        else:
            freebase_id = extract_freebase_id(entity.id)
            if freebase_id:
                self._logger.debug(
                    "knowledge_graph_freebase_id_unused",
                    entity=entity.name,
                    freebase_id=freebase_id,
                )

        return self._image_urls.placeholder_url

    async def convert_to_recommendation_item(
        self, entity: KnowledgeGraphEntity
    ) -> RecommendationItem:
        """Map *entity* into a :class:`RecommendationItem`."""
        image_url = await self.resolve_image_url(entity)
        detailed = entity.detailed_description

        reason = (
            (detailed.article_body if detailed else "")
            or entity.description
            or f"{entity.name}に関する情報です。"
        )

        features = [
            strip_type_namespace(type_tag) for type_tag in entity.types[:_MAX_TYPE_FEATURES]
        ]
        if entity.url:
            features.append(_OFFICIAL_SITE_FEATURE)

        official_url = entity.url or (detailed.url if detailed else "") or "#"

        return RecommendationItem(
            name=entity.name,
            reason=reason,
            features=features,
            image_url=image_url,
            official_url=official_url,
            api_data={
                "type": "knowledge_graph",
                "id": entity.id,
                "entityTypes": list(entity.types),
                "imageSource": "knowledge_graph",
                "category": determine_category(entity).value,
            },
        )

    # ------------------------------------------------------------------
    # IRecommendationProvider implementation
    # ------------------------------------------------------------------

    async def get_recommendations(
        self,
        query: str,
        limit: int,
        types: Sequence[str] = (),
    ) -> LookupResult[list[RecommendationItem]]:
        """Search and convert every returned entity concurrently."""
        search = await self.search_entities(query, types, limit)
        if not search.value:
            if search.ok:
                return LookupResult.failure([], FailureReason.NO_RESULTS)
            return LookupResult.failure([], search.reason, search.detail)

        items = await asyncio.gather(
            *(self.convert_to_recommendation_item(entity) for entity in search.value[:limit])
        )
        return LookupResult.success(list(items), from_cache=search.from_cache)

    def get_provider_name(self) -> str:
        return "knowledge_graph"

    def is_available(self) -> bool:
        """Available when an API key is configured."""
        return bool(self._api_key)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _parse_entities(self, data: dict[str, Any]) -> list[KnowledgeGraphEntity]:
        elements = data.get("itemListElement")
        if elements is None:
            return []
        if not isinstance(elements, list):
            raise DataShapeError(
                message="'itemListElement' is not a list",
                provider_name=self.get_provider_name(),
            )

        entities: list[KnowledgeGraphEntity] = []
        for element in elements:
            raw = element.get("result") if isinstance(element, dict) else None
            if not raw:
                continue
            try:
                entities.append(KnowledgeGraphEntity.model_validate(raw))
            except ValidationError:
                self._logger.debug("knowledge_graph_entity_skipped", raw=raw)
        return entities
