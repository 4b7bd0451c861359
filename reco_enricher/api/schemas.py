"""Pydantic response schemas for the reco-enricher API.

Defines the public contract for every REST endpoint: recommendations,
entity search, image URL resolution, health and provider listing.

# ─── HOW SCHEMAS WORK ─────────────────────────────────────────────────
#
# FastAPI serialises each route's return value through its
# ``response_model``, *by alias*.  Recommendation items therefore go out
# with the camelCase keys the front-end card component reads
# (``imageUrl``, ``officialUrl``, ``apiData``).
#
# Convention: response schemas end with "Response".
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from reco_enricher.models.recommendation import RecommendationItem


class RecommendationsResponse(BaseModel):
    """Recommendation items for one query."""

    query: str
    source: str
    count: int = 0
    items: list[RecommendationItem] = Field(default_factory=list)
    failure_reason: str | None = None
    generated_at: datetime | None = None


class EntityResponse(BaseModel):
    """A Knowledge Graph entity flattened for the API, with its shelf."""

    id: str
    name: str
    types: list[str] = Field(default_factory=list)
    description: str | None = None
    url: str | None = None
    image_url: str | None = None
    category: str


class EntitySearchResponse(BaseModel):
    """Knowledge Graph entity search results."""

    query: str
    count: int = 0
    entities: list[EntityResponse] = Field(default_factory=list)
    failure_reason: str | None = None


class ImageUrlResponse(BaseModel):
    """A resolved displayable image URL."""

    kind: str
    ref: str | None = None
    url: str


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    providers: dict[str, Any]


class ProvidersResponse(BaseModel):
    """List of configured providers and their availability."""

    providers: list[dict[str, Any]]


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None
