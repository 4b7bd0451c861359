"""Google Knowledge Graph provider and its pure entity helpers."""

from reco_enricher.providers.knowledge_graph.google_kg_provider import (
    GoogleKnowledgeGraphProvider,
    determine_category,
    extract_freebase_id,
    extract_wikidata_id,
    strip_type_namespace,
)

__all__ = [
    "GoogleKnowledgeGraphProvider",
    "determine_category",
    "extract_freebase_id",
    "extract_wikidata_id",
    "strip_type_namespace",
]
