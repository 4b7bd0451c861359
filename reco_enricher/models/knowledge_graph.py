"""Pydantic models for Google Knowledge Graph Search API entities.

The API speaks JSON-LD, so several keys are not valid Python identifiers
(``@id``, ``@type``) or are camelCase (``detailedDescription``).  Each field
declares the wire name as its alias; ``populate_by_name`` lets tests and
callers construct models with the Python names too.

Upstream responses are only loosely validated: every field except ``name``
has a default and unknown keys are ignored, mirroring the duck-typed access
the rest of the code relies on.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from reco_enricher.config.domain_knowledge import EntityCategory


class DetailedDescription(BaseModel):
    """Long-form description block, usually sourced from Wikipedia."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    article_body: str = Field(default="", alias="articleBody")
    url: str = ""
    license: str = ""


class EntityImage(BaseModel):
    """Image reference attached to an entity."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    content_url: str = Field(default="", alias="contentUrl")
    url: str = ""
    license: str = ""


class KnowledgeGraphEntity(BaseModel):
    """A single ``itemListElement[].result`` entry from the search API."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    # e.g. "kg:/m/0dl567" or "https://www.wikidata.org/entity/Q12345"
    id: str = Field(default="", alias="@id")
    name: str
    # Ordered type tags, e.g. ["MusicGroup", "Person", "Thing"]
    types: list[str] = Field(default_factory=list, alias="@type")
    description: str | None = None
    detailed_description: DetailedDescription | None = Field(
        default=None, alias="detailedDescription"
    )
    image: EntityImage | None = None
    url: str | None = None

    @field_validator("types", mode="before")
    @classmethod
    def _coerce_types(cls, value: object) -> object:
        # JSON-LD allows a bare string where a list is expected.
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value


class CategorizedEntity(BaseModel):
    """An entity paired with the recommendation shelf it belongs on."""

    model_config = ConfigDict(frozen=True)

    entity: KnowledgeGraphEntity
    category: EntityCategory
