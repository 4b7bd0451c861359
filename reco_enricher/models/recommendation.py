"""Recommendation models shared by every provider.

Defines the normalized :class:`RecommendationItem` produced by both the
Knowledge Graph and Wikipedia providers, and the :class:`RecommendationResult`
envelope returned by the recommendation service.  All models are frozen.

The JSON shape uses camelCase keys (``imageUrl``, ``officialUrl``,
``apiData``) because that is what the front-end card component consumes;
Python code uses the snake_case attribute names.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RecommendationSource(str, Enum):
    """Which upstream a recommendation list came from (or should come from)."""

    AUTO = "auto"
    KNOWLEDGE_GRAPH = "knowledge_graph"
    WIKIPEDIA = "wikipedia"


# ---------------------------------------------------------------------------
# RecommendationItem: one suggestion card.
# ---------------------------------------------------------------------------
class RecommendationItem(BaseModel):
    """A single enriched suggestion.

    Invariants enforced on construction:
      * ``features`` never contains empty strings (they are dropped).
      * ``image_url`` is required and non-empty; callers resolve the
        placeholder themselves so the configured one is used.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    # Human-readable description / why this item was suggested.
    reason: str
    # Short bullet strings shown under the card title, in display order.
    features: list[str] = Field(default_factory=list)
    image_url: str = Field(alias="imageUrl", min_length=1)
    official_url: str = Field(default="#", alias="officialUrl")
    # Provider-specific raw metadata (type, id, category, ...).
    api_data: dict[str, Any] = Field(default_factory=dict, alias="apiData")

    @field_validator("features", mode="before")
    @classmethod
    def _drop_empty_features(cls, value: object) -> object:
        if isinstance(value, (list, tuple)):
            return [feature for feature in value if feature]
        return value


# ---------------------------------------------------------------------------
# RecommendationResult: the service-level response envelope.
# ---------------------------------------------------------------------------
class RecommendationResult(BaseModel):
    """Items for one query plus where they came from.

    ``failure_reason`` is set when ``items`` is empty because every
    attempted source failed or found nothing.
    """

    model_config = ConfigDict(frozen=True)

    query: str
    source: RecommendationSource
    items: list[RecommendationItem] = Field(default_factory=list)
    failure_reason: str | None = None
    generated_at: datetime | None = None
