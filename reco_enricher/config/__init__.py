"""Configuration module — exports Settings, load_config, and category keywords."""

from reco_enricher.config.domain_knowledge import EntityCategory, classify_type_tags
from reco_enricher.config.loader import load_config
from reco_enricher.config.settings import DEFAULT_PLACEHOLDER_IMAGE_URL, Settings

__all__ = [
    "DEFAULT_PLACEHOLDER_IMAGE_URL",
    "EntityCategory",
    "Settings",
    "classify_type_tags",
    "load_config",
]
