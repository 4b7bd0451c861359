"""Wikipedia provider (ja.wikipedia.org MediaWiki Action API)."""

from reco_enricher.providers.wikipedia.wikipedia_provider import WikipediaProvider

__all__ = ["WikipediaProvider"]
