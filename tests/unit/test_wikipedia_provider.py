"""Unit tests for the Wikipedia provider adapter."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from reco_enricher.models.results import FailureReason
from reco_enricher.providers.cache.memory_cache import MemoryCacheProvider
from reco_enricher.providers.wikipedia.wikipedia_provider import WikipediaProvider


def _content_for(wikipedia_content, json_response):  # noqa: ANN001, ANN202
    """Route content requests by ``pageids`` to canned page payloads."""

    def _respond(url, params=None, headers=None):  # noqa: ANN001, ANN202
        page_id = params["pageids"]
        return json_response(
            wikipedia_content(
                int(page_id),
                f"Page {page_id}",
                extract="あ" * 150,
                thumbnail=f"https://upload.wikimedia.org/{page_id}.png",
            )
        )

    return _respond


# ======================================================================
# Identity
# ======================================================================


class TestIdentity:
    def test_get_provider_name(self, wikipedia_provider: WikipediaProvider) -> None:
        assert wikipedia_provider.get_provider_name() == "wikipedia"

    def test_is_available(self, wikipedia_provider: WikipediaProvider) -> None:
        assert wikipedia_provider.is_available() is True


# ======================================================================
# search_wikipedia
# ======================================================================


class TestSearchWikipedia:
    @pytest.mark.asyncio
    async def test_search_success(
        self,
        wikipedia_provider: WikipediaProvider,
        mock_http_client: AsyncMock,
        json_response,
        wikipedia_search_payload,
    ) -> None:
        mock_http_client.get.return_value = json_response(wikipedia_search_payload)

        result = await wikipedia_provider.search_wikipedia("初音ミク", limit=2)

        assert result.ok
        assert result.from_cache is False
        assert [hit.pageid for hit in result.value] == [1234, 5678]
        assert result.value[0].title == "初音ミク"

        _, kwargs = mock_http_client.get.call_args
        assert kwargs["params"] == {
            "action": "query",
            "list": "search",
            "srsearch": "初音ミク",
            "format": "json",
            "srlimit": 2,
            "origin": "*",
        }
        assert kwargs["headers"]["User-Agent"].startswith("MyApp/1.0")

    @pytest.mark.asyncio
    async def test_search_within_ttl_uses_cache(
        self,
        wikipedia_provider: WikipediaProvider,
        mock_http_client: AsyncMock,
        json_response,
        wikipedia_search_payload,
        fake_timer,
    ) -> None:
        mock_http_client.get.return_value = json_response(wikipedia_search_payload)

        await wikipedia_provider.search_wikipedia("初音ミク")
        fake_timer.advance(86399)
        second = await wikipedia_provider.search_wikipedia("初音ミク")

        assert mock_http_client.get.await_count == 1
        assert second.from_cache is True
        assert len(second.value) == 2

    @pytest.mark.asyncio
    async def test_search_after_ttl_refetches(
        self,
        wikipedia_provider: WikipediaProvider,
        mock_http_client: AsyncMock,
        json_response,
        wikipedia_search_payload,
        fake_timer,
    ) -> None:
        mock_http_client.get.return_value = json_response(wikipedia_search_payload)

        await wikipedia_provider.search_wikipedia("初音ミク")
        fake_timer.advance(86400)
        second = await wikipedia_provider.search_wikipedia("初音ミク")

        assert mock_http_client.get.await_count == 2
        assert second.from_cache is False

    @pytest.mark.asyncio
    async def test_limit_is_part_of_cache_key(
        self,
        wikipedia_provider: WikipediaProvider,
        mock_http_client: AsyncMock,
        json_response,
        wikipedia_search_payload,
    ) -> None:
        mock_http_client.get.return_value = json_response(wikipedia_search_payload)

        await wikipedia_provider.search_wikipedia("初音ミク", limit=5)
        await wikipedia_provider.search_wikipedia("初音ミク", limit=3)

        assert mock_http_client.get.await_count == 2

    @pytest.mark.asyncio
    async def test_search_http_error_returns_empty(
        self,
        wikipedia_provider: WikipediaProvider,
        mock_http_client: AsyncMock,
        json_response,
    ) -> None:
        mock_http_client.get.return_value = json_response({}, status_code=503)

        result = await wikipedia_provider.search_wikipedia("初音ミク")

        assert result.value == []
        assert result.reason is FailureReason.HTTP_STATUS
        assert "503" in (result.detail or "")

    @pytest.mark.asyncio
    async def test_search_network_error_returns_empty(
        self,
        wikipedia_provider: WikipediaProvider,
        mock_http_client: AsyncMock,
    ) -> None:
        mock_http_client.get.side_effect = httpx.ConnectError("connection refused")

        result = await wikipedia_provider.search_wikipedia("初音ミク")

        assert result.value == []
        assert result.reason is FailureReason.NETWORK

    @pytest.mark.asyncio
    async def test_failure_is_not_cached(
        self,
        wikipedia_provider: WikipediaProvider,
        mock_http_client: AsyncMock,
        json_response,
        wikipedia_search_payload,
    ) -> None:
        mock_http_client.get.side_effect = [
            httpx.ReadTimeout("timed out"),
            json_response(wikipedia_search_payload),
        ]

        first = await wikipedia_provider.search_wikipedia("初音ミク")
        second = await wikipedia_provider.search_wikipedia("初音ミク")

        assert first.reason is FailureReason.NETWORK
        assert second.ok
        assert len(second.value) == 2

    @pytest.mark.asyncio
    async def test_missing_query_block_is_malformed(
        self,
        wikipedia_provider: WikipediaProvider,
        mock_http_client: AsyncMock,
        json_response,
    ) -> None:
        mock_http_client.get.return_value = json_response({"error": {"code": "badparam"}})

        result = await wikipedia_provider.search_wikipedia("初音ミク")

        assert result.value == []
        assert result.reason is FailureReason.MALFORMED_RESPONSE

    @pytest.mark.asyncio
    async def test_invalid_json_is_malformed(
        self,
        wikipedia_provider: WikipediaProvider,
        mock_http_client: AsyncMock,
    ) -> None:
        response = MagicMock()
        response.raise_for_status = MagicMock()
        response.json = MagicMock(side_effect=ValueError("Expecting value"))
        mock_http_client.get.return_value = response

        result = await wikipedia_provider.search_wikipedia("初音ミク")

        assert result.reason is FailureReason.MALFORMED_RESPONSE

    @pytest.mark.asyncio
    async def test_hits_without_pageid_are_skipped(
        self,
        wikipedia_provider: WikipediaProvider,
        mock_http_client: AsyncMock,
        json_response,
    ) -> None:
        mock_http_client.get.return_value = json_response(
            {"query": {"search": [{"title": "broken"}, {"title": "ok", "pageid": 1}]}}
        )

        result = await wikipedia_provider.search_wikipedia("x")

        assert [hit.title for hit in result.value] == ["ok"]


# ======================================================================
# get_wikipedia_content
# ======================================================================


class TestGetWikipediaContent:
    @pytest.mark.asyncio
    async def test_content_success(
        self,
        wikipedia_provider: WikipediaProvider,
        mock_http_client: AsyncMock,
        json_response,
        wikipedia_content,
    ) -> None:
        mock_http_client.get.return_value = json_response(
            wikipedia_content(1234, "初音ミク", "初音ミクは音声合成ソフトウェア。", "https://upload.wikimedia.org/m.png")
        )

        result = await wikipedia_provider.get_wikipedia_content(1234)

        assert result.ok
        assert result.value is not None
        assert result.value.title == "初音ミク"
        assert result.value.thumbnail is not None
        assert result.value.thumbnail.source == "https://upload.wikimedia.org/m.png"

        _, kwargs = mock_http_client.get.call_args
        assert kwargs["params"]["prop"] == "extracts|pageimages"
        assert kwargs["params"]["pageids"] == 1234
        assert kwargs["params"]["pithumbsize"] == 500

    @pytest.mark.asyncio
    async def test_content_is_cached(
        self,
        wikipedia_provider: WikipediaProvider,
        mock_http_client: AsyncMock,
        json_response,
        wikipedia_content,
    ) -> None:
        mock_http_client.get.return_value = json_response(wikipedia_content(1234, "初音ミク"))

        await wikipedia_provider.get_wikipedia_content(1234)
        second = await wikipedia_provider.get_wikipedia_content(1234)

        assert mock_http_client.get.await_count == 1
        assert second.from_cache is True

    @pytest.mark.asyncio
    async def test_missing_page_is_malformed(
        self,
        wikipedia_provider: WikipediaProvider,
        mock_http_client: AsyncMock,
        json_response,
    ) -> None:
        mock_http_client.get.return_value = json_response({"query": {"pages": {}}})

        result = await wikipedia_provider.get_wikipedia_content(1234)

        assert result.value is None
        assert result.reason is FailureReason.MALFORMED_RESPONSE

    @pytest.mark.asyncio
    async def test_http_error_returns_none(
        self,
        wikipedia_provider: WikipediaProvider,
        mock_http_client: AsyncMock,
        json_response,
    ) -> None:
        mock_http_client.get.return_value = json_response({}, status_code=500)

        result = await wikipedia_provider.get_wikipedia_content(1234)

        assert result.value is None
        assert result.reason is FailureReason.HTTP_STATUS


# ======================================================================
# get_wikipedia_recommendations
# ======================================================================


class TestGetWikipediaRecommendations:
    @pytest.mark.asyncio
    async def test_items_are_built_from_pages(
        self,
        wikipedia_provider: WikipediaProvider,
        mock_http_client: AsyncMock,
        json_response,
        wikipedia_search_payload,
        wikipedia_content,
    ) -> None:
        content = _content_for(wikipedia_content, json_response)

        async def _get(url, params=None, headers=None):  # noqa: ANN001, ANN202
            if params.get("list") == "search":
                return json_response(wikipedia_search_payload)
            return content(url, params, headers)

        mock_http_client.get.side_effect = _get

        result = await wikipedia_provider.get_wikipedia_recommendations("初音ミク", limit=2)

        assert result.ok
        assert [item.name for item in result.value] == ["Page 1234", "Page 5678"]

        item = result.value[0]
        assert item.reason == "Wikipediaで「初音ミク」に関連する情報として見つかりました。"
        assert item.features == ["あ" * 100 + "...", "信頼性の高い情報源", "幅広いトピックをカバー"]
        assert item.image_url == "https://upload.wikimedia.org/1234.png"
        assert item.official_url == "https://ja.wikipedia.org/?curid=1234"
        assert item.api_data == {"type": "wikipedia", "id": 1234, "extract": "あ" * 150}

    @pytest.mark.asyncio
    async def test_page_without_extract_or_thumbnail(
        self,
        wikipedia_provider: WikipediaProvider,
        mock_http_client: AsyncMock,
        json_response,
        wikipedia_content,
        settings,
    ) -> None:
        mock_http_client.get.side_effect = [
            json_response({"query": {"search": [{"title": "空", "pageid": 42}]}}),
            json_response(wikipedia_content(42, "空")),
        ]

        result = await wikipedia_provider.get_wikipedia_recommendations("空", limit=1)

        item = result.value[0]
        assert item.features[0] == "詳細情報はWikipediaをご覧ください。"
        assert item.image_url == settings.placeholder_image_url

    @pytest.mark.asyncio
    async def test_empty_thumbnail_uses_configured_placeholder(
        self,
        mock_http_client: AsyncMock,
        json_response,
        settings,
    ) -> None:
        provider = WikipediaProvider(
            http_client=mock_http_client,
            settings=settings.model_copy(update={"placeholder_image_url": "/custom.png"}),
            search_cache=MemoryCacheProvider(),
            content_cache=MemoryCacheProvider(),
        )
        page = {"pageid": 7, "title": "q", "extract": "", "thumbnail": {"source": ""}}
        mock_http_client.get.side_effect = [
            json_response({"query": {"search": [{"title": "q", "pageid": 7}]}}),
            json_response({"query": {"pages": {"7": page}}}),
        ]

        result = await provider.get_wikipedia_recommendations("q", 1)

        assert result.value[0].image_url == "/custom.png"

    @pytest.mark.asyncio
    async def test_failed_content_is_dropped_without_affecting_others(
        self,
        wikipedia_provider: WikipediaProvider,
        mock_http_client: AsyncMock,
        json_response,
        wikipedia_search_payload,
        wikipedia_content,
    ) -> None:
        async def _get(url, params=None, headers=None):  # noqa: ANN001, ANN202
            if params.get("list") == "search":
                return json_response(wikipedia_search_payload)
            if params["pageids"] == 1234:
                raise httpx.ConnectError("reset")
            return json_response(wikipedia_content(5678, "鏡音リン・レン", "双子"))

        mock_http_client.get.side_effect = _get

        result = await wikipedia_provider.get_wikipedia_recommendations("ボカロ", limit=2)

        assert result.ok
        assert [item.name for item in result.value] == ["鏡音リン・レン"]

    @pytest.mark.asyncio
    async def test_empty_search_is_no_results(
        self,
        wikipedia_provider: WikipediaProvider,
        mock_http_client: AsyncMock,
        json_response,
    ) -> None:
        mock_http_client.get.return_value = json_response({"query": {"search": []}})

        result = await wikipedia_provider.get_wikipedia_recommendations("zzzz")

        assert result.value == []
        assert result.reason is FailureReason.NO_RESULTS
        assert mock_http_client.get.await_count == 1

    @pytest.mark.asyncio
    async def test_search_failure_reason_is_propagated(
        self,
        wikipedia_provider: WikipediaProvider,
        mock_http_client: AsyncMock,
    ) -> None:
        mock_http_client.get.side_effect = httpx.ConnectError("down")

        result = await wikipedia_provider.get_recommendations("初音ミク", limit=5)

        assert result.value == []
        assert result.reason is FailureReason.NETWORK

    @pytest.mark.asyncio
    async def test_all_content_failing_is_no_results(
        self,
        wikipedia_provider: WikipediaProvider,
        mock_http_client: AsyncMock,
        json_response,
        wikipedia_search_payload,
    ) -> None:
        async def _get(url, params=None, headers=None):  # noqa: ANN001, ANN202
            if params.get("list") == "search":
                return json_response(wikipedia_search_payload)
            return json_response({}, status_code=500)

        mock_http_client.get.side_effect = _get

        result = await wikipedia_provider.get_wikipedia_recommendations("初音ミク")

        assert result.value == []
        assert result.reason is FailureReason.NO_RESULTS
