"""Allow ``python -m reco_enricher.cli`` execution."""

from reco_enricher.cli.recommend import main

main()
