"""Utility modules for reco-enricher.

- **errors** -- Exception hierarchy rooted at RecoEnricherError; only
  ConfigurationError escapes the provider boundary.
- **image_urls** -- ImageUrlBuilder: proxy, TMDb, Spotify and Wikimedia
  Commons image URLs with an insertion-ordered memo map.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
"""

from reco_enricher.utils.errors import (
    ConfigurationError,
    DataShapeError,
    RecoEnricherError,
    UpstreamError,
)
from reco_enricher.utils.image_urls import ImageUrlBuilder, encode_uri_component
from reco_enricher.utils.logging import configure_logging, get_logger

__all__ = [
    "ConfigurationError",
    "DataShapeError",
    "ImageUrlBuilder",
    "RecoEnricherError",
    "UpstreamError",
    "configure_logging",
    "encode_uri_component",
    "get_logger",
]
