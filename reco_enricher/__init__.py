"""reco-enricher: recommendation enrichment from Google Knowledge Graph and Wikipedia."""

__version__ = "0.1.0"
