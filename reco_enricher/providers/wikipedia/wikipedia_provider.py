"""Japanese Wikipedia provider implementing IRecommendationProvider.

Uses the MediaWiki Action API (``/w/api.php``) for two calls:

* ``list=search`` — full-text search returning page ids and titles.
* ``prop=extracts|pageimages`` — plain-text intro extract plus a 500px
  thumbnail for a single page id.

Each call has its own cache (24h TTL by default).  Content for the top
search hits is fetched concurrently and mapped into recommendation items;
hits whose content fetch fails are dropped without affecting the others.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import ValidationError

from reco_enricher.config.settings import Settings
from reco_enricher.interfaces.cache_provider import ICacheProvider
from reco_enricher.interfaces.recommendation_provider import IRecommendationProvider
from reco_enricher.models.recommendation import RecommendationItem
from reco_enricher.models.results import FailureReason, LookupResult, failure_reason_for
from reco_enricher.models.wikipedia import WikipediaPage, WikipediaSearchHit
from reco_enricher.utils.errors import DataShapeError, UpstreamError
from reco_enricher.utils.http import get_json
from reco_enricher.utils.logging import get_logger

_EXTRACT_PREVIEW_CHARS = 100
_THUMBNAIL_SIZE = 500
_NO_EXTRACT_FEATURE = "詳細情報はWikipediaをご覧ください。"
_FIXED_FEATURES = ("信頼性の高い情報源", "幅広いトピックをカバー")
_ARTICLE_URL = "https://ja.wikipedia.org/?curid={pageid}"


class WikipediaProvider(IRecommendationProvider):
    """Recommendation source backed by ja.wikipedia.org.

    Parameters
    ----------
    http_client:
        Shared ``httpx.AsyncClient``.
    settings:
        Supplies the API URL, User-Agent and placeholder image URL.
    search_cache:
        Cache for ``search_wikipedia`` results.
    content_cache:
        Cache for ``get_wikipedia_content`` results.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: Settings,
        search_cache: ICacheProvider,
        content_cache: ICacheProvider,
    ) -> None:
        self._http = http_client
        self._api_url = settings.wikipedia_api_url
        self._headers = {"User-Agent": settings.wikipedia_user_agent}
        self._placeholder_url = settings.placeholder_image_url
        self._search_cache = search_cache
        self._content_cache = content_cache
        self._logger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def search_wikipedia(
        self, query: str, limit: int = 5
    ) -> LookupResult[list[WikipediaSearchHit]]:
        """Full-text search for *query*, returning at most *limit* hits."""
        cache_key = f"search_{query}_{limit}"
        cached = await self._search_cache.get(cache_key)
        if cached is not None:
            return LookupResult.success(cached, from_cache=True)

        params = {
            "action": "query",
            "list": "search",
            "srsearch": query,
            "format": "json",
            "srlimit": limit,
            "origin": "*",
        }
        try:
            data = await get_json(
                self._http,
                self._api_url,
                params=params,
                headers=self._headers,
                provider_name=self.get_provider_name(),
            )
            hits = self._parse_search_hits(data)
        except (UpstreamError, DataShapeError) as exc:
            self._logger.warning(
                "wikipedia_search_failed",
                query=query,
                error=str(exc),
            )
            return LookupResult.failure([], failure_reason_for(exc), str(exc))

        await self._search_cache.set(cache_key, hits)
        self._logger.debug("wikipedia_search", query=query, result_count=len(hits))
        return LookupResult.success(hits)

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    async def get_wikipedia_content(
        self, page_id: int | str
    ) -> LookupResult[WikipediaPage | None]:
        """Fetch the intro extract and thumbnail for *page_id*."""
        cache_key = f"content_{page_id}"
        cached = await self._content_cache.get(cache_key)
        if cached is not None:
            return LookupResult.success(cached, from_cache=True)

        params = {
            "action": "query",
            "prop": "extracts|pageimages",
            "exintro": 1,
            "explaintext": 1,
            "pageids": page_id,
            "format": "json",
            "pithumbsize": _THUMBNAIL_SIZE,
            "origin": "*",
        }
        try:
            data = await get_json(
                self._http,
                self._api_url,
                params=params,
                headers=self._headers,
                provider_name=self.get_provider_name(),
            )
            page = self._parse_page(data, page_id)
        except (UpstreamError, DataShapeError) as exc:
            self._logger.warning(
                "wikipedia_content_failed",
                page_id=page_id,
                error=str(exc),
            )
            return LookupResult.failure(None, failure_reason_for(exc), str(exc))

        await self._content_cache.set(cache_key, page)
        return LookupResult.success(page)

    # ------------------------------------------------------------------
    # Recommendations
    # ------------------------------------------------------------------

    async def get_wikipedia_recommendations(
        self, query: str, limit: int = 5
    ) -> LookupResult[list[RecommendationItem]]:
        """Search for *query* and turn the top *limit* hits into items."""
        search = await self.search_wikipedia(query, limit)
        if not search.value:
            if search.ok:
                return LookupResult.failure([], FailureReason.NO_RESULTS)
            return LookupResult.failure([], search.reason, search.detail)

        top_hits = search.value[:limit]
        contents = await asyncio.gather(
            *(self.get_wikipedia_content(hit.pageid) for hit in top_hits)
        )

        items = [
            self._page_to_item(query, result.value)
            for result in contents
            if result.value is not None
        ]
        dropped = len(top_hits) - len(items)
        if dropped:
            self._logger.info(
                "wikipedia_content_dropped",
                query=query,
                dropped=dropped,
                kept=len(items),
            )
        if not items:
            return LookupResult.failure(
                [], FailureReason.NO_RESULTS, "no page content could be fetched"
            )
        return LookupResult.success(items)

    async def get_recommendations(
        self,
        query: str,
        limit: int,
        types: Sequence[str] = (),
    ) -> LookupResult[list[RecommendationItem]]:
        """IRecommendationProvider entry point; *types* is not supported."""
        return await self.get_wikipedia_recommendations(query, limit)

    def get_provider_name(self) -> str:
        return "wikipedia"

    def is_available(self) -> bool:
        """Always available — the MediaWiki API is public and keyless."""
        return True

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _parse_search_hits(self, data: dict[str, Any]) -> list[WikipediaSearchHit]:
        query_block = data.get("query")
        if not isinstance(query_block, dict):
            raise DataShapeError(
                message="search response has no 'query' block",
                provider_name=self.get_provider_name(),
            )

        hits: list[WikipediaSearchHit] = []
        for raw in query_block.get("search") or []:
            try:
                hits.append(WikipediaSearchHit.model_validate(raw))
            except ValidationError:
                self._logger.debug("wikipedia_search_hit_skipped", raw=raw)
        return hits

    def _parse_page(self, data: dict[str, Any], page_id: int | str) -> WikipediaPage:
        try:
            raw_page = data["query"]["pages"][str(page_id)]
            return WikipediaPage.model_validate(raw_page)
        except (KeyError, TypeError, ValidationError) as exc:
            raise DataShapeError(
                message=f"content response has no usable page {page_id}",
                provider_name=self.get_provider_name(),
            ) from exc

    def _page_to_item(self, query: str, page: WikipediaPage) -> RecommendationItem:
        if page.extract:
            summary = page.extract[:_EXTRACT_PREVIEW_CHARS] + "..."
        else:
            summary = _NO_EXTRACT_FEATURE

        return RecommendationItem(
            name=page.title,
            reason=f"Wikipediaで「{query}」に関連する情報として見つかりました。",
            features=[summary, *_FIXED_FEATURES],
            image_url=(
                page.thumbnail.source
                if page.thumbnail and page.thumbnail.source
                else self._placeholder_url
            ),
            official_url=_ARTICLE_URL.format(pageid=page.pageid),
            api_data={
                "type": "wikipedia",
                "id": page.pageid,
                "extract": page.extract,
            },
        )
