"""Abstract base class for recommendation sources.

A recommendation source turns a free-text query into normalized
:class:`~reco_enricher.models.recommendation.RecommendationItem` objects.
Both the Knowledge Graph and the Wikipedia providers implement it, which
lets the recommendation service try them in priority order.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from reco_enricher.models.recommendation import RecommendationItem
from reco_enricher.models.results import LookupResult


class IRecommendationProvider(ABC):
    """Contract for upstream services that produce recommendation items."""

    @abstractmethod
    async def get_recommendations(
        self,
        query: str,
        limit: int,
        types: Sequence[str] = (),
    ) -> LookupResult[list[RecommendationItem]]:
        """Search for *query* and map up to *limit* hits into items.

        Parameters
        ----------
        query:
            Free-text entity name, e.g. ``"初音ミク"``.
        limit:
            Maximum number of items to return.
        types:
            Optional upstream type filter.  Providers that cannot filter by
            type ignore it.

        Returns
        -------
        LookupResult[list[RecommendationItem]]
            Items on success; an empty list with a failure reason otherwise.
            Upstream failures never raise.

        Raises
        ------
        reco_enricher.utils.errors.ConfigurationError
            If the provider requires credentials that are not configured.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier, e.g. ``"knowledge_graph"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured for use."""
