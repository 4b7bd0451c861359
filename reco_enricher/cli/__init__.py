"""Command-line tools for reco-enricher.

- ``python -m reco_enricher.cli <query>`` — run one recommendation query
  and print a text report or JSON (see :mod:`reco_enricher.cli.recommend`).
"""
