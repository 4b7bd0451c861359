"""Shared pytest fixtures for the reco-enricher test suite."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from reco_enricher.config.settings import Settings
from reco_enricher.providers.cache.memory_cache import MemoryCacheProvider
from reco_enricher.providers.knowledge_graph.google_kg_provider import (
    GoogleKnowledgeGraphProvider,
)
from reco_enricher.providers.wikipedia.wikipedia_provider import WikipediaProvider
from reco_enricher.utils.image_urls import ImageUrlBuilder

# ---------------------------------------------------------------------------
# Clock / HTTP doubles
# ---------------------------------------------------------------------------


class FakeTimer:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _json_response(payload: Any, status_code: int = 200) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json = MagicMock(return_value=payload)
    if status_code >= 400:
        response.raise_for_status = MagicMock(
            side_effect=httpx.HTTPStatusError(
                f"{status_code} error",
                request=MagicMock(),
                response=response,
            )
        )
    else:
        response.raise_for_status = MagicMock()
    return response


@pytest.fixture
def fake_timer() -> FakeTimer:
    return FakeTimer()


@pytest.fixture
def json_response() -> Callable[..., MagicMock]:
    """Factory for mocked ``httpx.Response`` objects carrying a JSON body."""
    return _json_response


@pytest.fixture
def mock_http_client() -> AsyncMock:
    """An ``httpx.AsyncClient`` stand-in; tests set ``get`` behaviour."""
    client = AsyncMock(spec=httpx.AsyncClient)
    client.get = AsyncMock()
    return client


# ---------------------------------------------------------------------------
# Settings / wiring
# ---------------------------------------------------------------------------


@pytest.fixture
def settings() -> Settings:
    """Settings with a Knowledge Graph key, independent of the environment."""
    return Settings(
        _env_file=None,
        google_knowledge_graph_api_key="test-key",
        knowledge_graph_api_url="https://kgsearch.googleapis.com/v1/entities:search",
        knowledge_graph_languages="ja,en",
        wikipedia_api_url="https://ja.wikipedia.org/w/api.php",
        image_proxy_path="/api/image-proxy",
        placeholder_image_url="/placeholder.svg?height=400&width=400",
        image_url_cache_max_size=100,
        default_limit=5,
    )


@pytest.fixture
def settings_without_key(settings: Settings) -> Settings:
    return settings.model_copy(update={"google_knowledge_graph_api_key": ""})


@pytest.fixture
def image_urls(settings: Settings) -> ImageUrlBuilder:
    return ImageUrlBuilder(
        proxy_path=settings.image_proxy_path,
        placeholder_url=settings.placeholder_image_url,
    )


@pytest.fixture
def wikipedia_provider(
    mock_http_client: AsyncMock, settings: Settings, fake_timer: FakeTimer
) -> WikipediaProvider:
    return WikipediaProvider(
        http_client=mock_http_client,
        settings=settings,
        search_cache=MemoryCacheProvider(max_size=100, ttl=86400, timer=fake_timer),
        content_cache=MemoryCacheProvider(max_size=100, ttl=86400, timer=fake_timer),
    )


@pytest.fixture
def kg_provider(
    mock_http_client: AsyncMock,
    settings: Settings,
    wikipedia_provider: WikipediaProvider,
    image_urls: ImageUrlBuilder,
) -> GoogleKnowledgeGraphProvider:
    return GoogleKnowledgeGraphProvider(
        http_client=mock_http_client,
        settings=settings,
        cache=MemoryCacheProvider(max_size=0, ttl=0),
        wikipedia=wikipedia_provider,
        image_urls=image_urls,
    )


# ---------------------------------------------------------------------------
# Sample upstream payloads
# ---------------------------------------------------------------------------


@pytest.fixture
def kg_entity_payload() -> dict[str, Any]:
    """A single Knowledge Graph ``result`` object with an image."""
    return {
        "@id": "kg:/m/0abc12",
        "name": "初音ミク",
        "@type": ["MusicGroup", "Person", "Thing"],
        "description": "Vocaloid",
        "detailedDescription": {
            "articleBody": "初音ミクは、クリプトン・フューチャー・メディアから発売された音声合成ソフトウェア。",
            "url": "https://ja.wikipedia.org/wiki/初音ミク",
            "license": "https://en.wikipedia.org/wiki/Wikipedia:Text_of_Creative_Commons_Attribution-ShareAlike_3.0_Unported_License",
        },
        "image": {
            "contentUrl": "https://upload.wikimedia.org/miku.png",
            "url": "https://commons.wikimedia.org/wiki/File:miku.png",
        },
        "url": "https://piapro.net/",
    }


@pytest.fixture
def kg_search_payload(kg_entity_payload: dict[str, Any]) -> dict[str, Any]:
    return {
        "@context": {"@vocab": "http://schema.org/"},
        "@type": "ItemList",
        "itemListElement": [
            {"@type": "EntitySearchResult", "result": kg_entity_payload, "resultScore": 1200.5},
        ],
    }


@pytest.fixture
def wikipedia_search_payload() -> dict[str, Any]:
    return {
        "batchcomplete": "",
        "query": {
            "searchinfo": {"totalhits": 2},
            "search": [
                {"ns": 0, "title": "初音ミク", "pageid": 1234, "snippet": "バーチャル・シンガー"},
                {"ns": 0, "title": "鏡音リン・レン", "pageid": 5678, "snippet": "音声合成"},
            ],
        },
    }


def wikipedia_content_payload(
    page_id: int, title: str, extract: str = "", thumbnail: str | None = None
) -> dict[str, Any]:
    page: dict[str, Any] = {"pageid": page_id, "ns": 0, "title": title, "extract": extract}
    if thumbnail:
        page["thumbnail"] = {"source": thumbnail, "width": 500, "height": 500}
    return {"batchcomplete": "", "query": {"pages": {str(page_id): page}}}


@pytest.fixture
def wikipedia_content() -> Callable[..., dict[str, Any]]:
    """Factory for ``prop=extracts|pageimages`` responses for one page."""
    return wikipedia_content_payload
