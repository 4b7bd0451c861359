"""reco-enricher FastAPI application entry point.

Wires together caches, providers and the recommendation service via
dependency injection.  Loads configuration from ``.env`` and
``config/config.yaml`` and configures structured logging.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from reco_enricher import __version__
from reco_enricher.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from reco_enricher.api.routes import router as api_router
from reco_enricher.config.loader import load_config
from reco_enricher.config.settings import Settings
from reco_enricher.providers.cache.memory_cache import MemoryCacheProvider
from reco_enricher.providers.knowledge_graph.google_kg_provider import (
    GoogleKnowledgeGraphProvider,
)
from reco_enricher.providers.wikipedia.wikipedia_provider import WikipediaProvider
from reco_enricher.services.recommendation_service import RecommendationService
from reco_enricher.utils.image_urls import ImageUrlBuilder
from reco_enricher.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings=settings)

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Dependency wiring
# ---------------------------------------------------------------------------


def _build_all(
    app_settings: Settings,
    app_config: dict[str, Any] | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> dict[str, Any]:
    """Construct every provider and service the application needs.

    Returns a flat dict that the lifespan copies onto ``app.state`` and the
    CLI uses directly.  Pass *http_client* to share an existing client.
    """
    s = app_settings
    cfg = app_config or {}
    recommendations_cfg = cfg.get("recommendations", {})

    if http_client is None:
        http_client = httpx.AsyncClient(timeout=s.http_timeout)

    wikipedia_search_cache = MemoryCacheProvider(
        max_size=s.wikipedia_cache_max_size,
        ttl=s.wikipedia_cache_ttl,
        name="wikipedia_search",
    )
    wikipedia_content_cache = MemoryCacheProvider(
        max_size=s.wikipedia_cache_max_size,
        ttl=s.wikipedia_cache_ttl,
        name="wikipedia_content",
    )
    knowledge_graph_cache = MemoryCacheProvider(
        max_size=s.knowledge_graph_cache_max_size,
        ttl=s.knowledge_graph_cache_ttl,
        name="knowledge_graph",
    )

    image_urls = ImageUrlBuilder(
        proxy_path=s.image_proxy_path,
        placeholder_url=s.placeholder_image_url,
    )

    wikipedia = WikipediaProvider(
        http_client=http_client,
        settings=s,
        search_cache=wikipedia_search_cache,
        content_cache=wikipedia_content_cache,
    )
    knowledge_graph = GoogleKnowledgeGraphProvider(
        http_client=http_client,
        settings=s,
        cache=knowledge_graph_cache,
        wikipedia=wikipedia,
        image_urls=image_urls,
    )

    recommendation_service = RecommendationService(
        knowledge_graph=knowledge_graph,
        wikipedia=wikipedia,
        image_urls=image_urls,
        settings=s,
        fallback_to_wikipedia=recommendations_cfg.get("fallback_to_wikipedia", True),
        max_limit=recommendations_cfg.get("max_limit", 20),
    )

    provider_registry: dict[str, bool] = {
        knowledge_graph.get_provider_name(): knowledge_graph.is_available(),
        wikipedia.get_provider_name(): wikipedia.is_available(),
        "cache": True,
    }
    provider_list: list[dict[str, Any]] = [
        {
            "name": type(knowledge_graph).__name__,
            "type": "recommendation",
            "available": knowledge_graph.is_available(),
        },
        {
            "name": type(wikipedia).__name__,
            "type": "recommendation",
            "available": wikipedia.is_available(),
        },
        {"name": type(knowledge_graph_cache).__name__, "type": "cache", "available": True},
    ]

    return {
        "http_client": http_client,
        "wikipedia_search_cache": wikipedia_search_cache,
        "wikipedia_content_cache": wikipedia_content_cache,
        "knowledge_graph_cache": knowledge_graph_cache,
        "image_urls": image_urls,
        "wikipedia": wikipedia,
        "knowledge_graph": knowledge_graph,
        "recommendation_service": recommendation_service,
        "provider_registry": provider_registry,
        "provider_list": provider_list,
        "settings": s,
    }


def _cache_entries(components: dict[str, Any]) -> dict[str, int]:
    """Entry counts of the upstream response caches, keyed by cache name."""
    return {
        cache.name: cache.size()
        for cache in (
            components["wikipedia_search_cache"],
            components["wikipedia_content_cache"],
            components["knowledge_graph_cache"],
        )
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers and services on startup, clean up on shutdown."""
    components = _build_all(settings, config)

    for key, value in components.items():
        setattr(application.state, key, value)

    _logger.info(
        "app_startup",
        version=__version__,
        environment=settings.app_env,
        knowledge_graph=components["provider_registry"]["knowledge_graph"],
        providers=len(components["provider_list"]),
    )

    yield

    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    _logger.info(
        "app_shutdown",
        message="HTTP client closed",
        cache_entries=_cache_entries(components),
    )


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="reco-enricher API",
        version=__version__,
        description=(
            "Turn a free-text query into enriched recommendation cards using "
            "the Google Knowledge Graph Search API, with Japanese Wikipedia "
            "as a keyless fallback."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application)

    application.include_router(api_router)

    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "reco_enricher.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
