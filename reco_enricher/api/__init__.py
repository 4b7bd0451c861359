"""reco-enricher API layer — routes, schemas, and middleware."""

from reco_enricher.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from reco_enricher.api.routes import router
from reco_enricher.api.schemas import (
    EntityResponse,
    EntitySearchResponse,
    ErrorResponse,
    HealthResponse,
    ImageUrlResponse,
    ProvidersResponse,
    RecommendationsResponse,
)

__all__ = [
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "configure_cors",
    "router",
    "EntityResponse",
    "EntitySearchResponse",
    "ErrorResponse",
    "HealthResponse",
    "ImageUrlResponse",
    "ProvidersResponse",
    "RecommendationsResponse",
]
