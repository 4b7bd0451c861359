"""FastAPI API routes for reco-enricher.

Provides REST endpoints for recommendations, Knowledge Graph entity search,
image URL resolution, health checks, and provider listing.  Service
dependencies are resolved from ``app.state`` via FastAPI's ``Depends``
using the ``Annotated`` pattern.

# ─── API ROUTE MAP ────────────────────────────────────────────────────
#
# Endpoint                  Method  Description
# ─────────────────────────────────────────────────────────────────────
# /api/v1/recommendations   GET     query → recommendation items
# /api/v1/entities          GET     Knowledge Graph entity search
# /api/v1/images/url        GET     raw image reference → display URL
# /api/v1/health            GET     Health check + provider status
# /api/v1/providers         GET     List all configured providers
#
# Application errors raised by a handler are turned into JSON error bodies
# by ErrorHandlingMiddleware (ConfigurationError → 503).
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, Query, Request

from reco_enricher import __version__
from reco_enricher.api.schemas import (
    EntityResponse,
    EntitySearchResponse,
    ErrorResponse,
    HealthResponse,
    ImageUrlResponse,
    ProvidersResponse,
    RecommendationsResponse,
)
from reco_enricher.models.knowledge_graph import KnowledgeGraphEntity
from reco_enricher.models.recommendation import RecommendationSource
from reco_enricher.services.recommendation_service import ImageKind, RecommendationService
from reco_enricher.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api/v1")

_MAX_QUERY_LENGTH = 200


def _get_recommendation_service(request: Request) -> RecommendationService:
    """Return the recommendation service from application state."""
    return request.app.state.recommendation_service


RecommendationServiceDep = Annotated[
    RecommendationService, Depends(_get_recommendation_service)
]


def _raw_image_url(entity: KnowledgeGraphEntity) -> str | None:
    if entity.image is None:
        return None
    return entity.image.content_url or entity.image.url or None


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------


@router.get(
    "/recommendations",
    response_model=RecommendationsResponse,
    responses={503: {"model": ErrorResponse}},
    summary="Recommendations for a free-text query",
)
async def get_recommendations(
    service: RecommendationServiceDep,
    query: Annotated[str, Query(min_length=1, max_length=_MAX_QUERY_LENGTH)],
    limit: Annotated[int | None, Query(ge=1)] = None,
    source: RecommendationSource = RecommendationSource.AUTO,
    types: Annotated[list[str] | None, Query()] = None,
) -> RecommendationsResponse:
    """Return enriched recommendation items for *query*.

    ``source=knowledge_graph`` without a configured API key answers 503.
    """
    result = await service.recommend(
        query=query.strip(),
        types=types or [],
        limit=limit,
        source=source,
    )
    return RecommendationsResponse(
        query=result.query,
        source=result.source.value,
        count=len(result.items),
        items=result.items,
        failure_reason=result.failure_reason,
        generated_at=result.generated_at,
    )


# ---------------------------------------------------------------------------
# Entity search
# ---------------------------------------------------------------------------


@router.get(
    "/entities",
    response_model=EntitySearchResponse,
    responses={503: {"model": ErrorResponse}},
    summary="Knowledge Graph entity search",
)
async def search_entities(
    service: RecommendationServiceDep,
    query: Annotated[str, Query(min_length=1, max_length=_MAX_QUERY_LENGTH)],
    limit: Annotated[int | None, Query(ge=1)] = None,
    types: Annotated[list[str] | None, Query()] = None,
) -> EntitySearchResponse:
    """Return Knowledge Graph entities for *query* with their categories."""
    result = await service.search_entities(query.strip(), types or [], limit)

    entities = [
        EntityResponse(
            id=match.entity.id,
            name=match.entity.name,
            types=list(match.entity.types),
            description=match.entity.description,
            url=match.entity.url,
            image_url=_raw_image_url(match.entity),
            category=match.category.value,
        )
        for match in result.value
    ]
    return EntitySearchResponse(
        query=query,
        count=len(entities),
        entities=entities,
        failure_reason=result.reason.value if result.reason else None,
    )


# ---------------------------------------------------------------------------
# Image URLs
# ---------------------------------------------------------------------------


@router.get(
    "/images/url",
    response_model=ImageUrlResponse,
    summary="Resolve a raw image reference to a displayable URL",
)
async def resolve_image_url(
    service: RecommendationServiceDep,
    kind: ImageKind,
    ref: str | None = None,
    size: str | None = None,
) -> ImageUrlResponse:
    """Build a proxied / TMDb / Commons image URL; placeholder when *ref* is empty.

    *size* only applies to ``kind=tmdb``.
    """
    url = service.resolve_image_url(kind, ref, size)
    return ImageUrlResponse(kind=kind.value, ref=ref, url=url)


# ---------------------------------------------------------------------------
# System endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Application health check",
)
async def health_check(request: Request) -> HealthResponse:
    """Return application health, version, and provider availability.

    ``degraded`` means only the keyless Wikipedia source is usable.
    """
    providers: dict[str, Any] = {}
    if hasattr(request.app.state, "provider_registry"):
        providers = dict(request.app.state.provider_registry)

    if providers.get("knowledge_graph", False) and providers.get("wikipedia", False):
        status = "healthy"
    elif providers.get("wikipedia", False):
        status = "degraded"
    else:
        status = "unhealthy"

    return HealthResponse(
        status=status,
        version=__version__,
        providers=providers,
    )


@router.get(
    "/providers",
    response_model=ProvidersResponse,
    summary="List configured providers",
)
async def list_providers(request: Request) -> ProvidersResponse:
    """List all configured providers, their types, and availability status."""
    providers: list[dict[str, Any]] = []
    if hasattr(request.app.state, "provider_list"):
        providers = request.app.state.provider_list

    return ProvidersResponse(providers=providers)
