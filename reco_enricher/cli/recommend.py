# =============================================================================
# reco_enricher/cli/recommend.py: recommend command
# =============================================================================
#
# Runs one recommendation query from the command line without starting the
# API server:
#
#   python -m reco_enricher.cli 初音ミク
#   python -m reco_enricher.cli "Daft Punk" --source knowledge_graph --limit 3
#   python -m reco_enricher.cli Nike --type Organization --json
#
# Output modes:
#   - Text (default): numbered report of recommendation cards
#   - JSON (--json): the RecommendationResult with camelCase item keys
#
# Log lines always go to stderr so stdout only ever carries the results.
# --quiet (implied by --json) raises the log level to WARNING.
#
# Exit codes: 0 success (including "nothing found"), 2 configuration error
# (e.g. --source knowledge_graph without an API key).
# =============================================================================

"""Standalone CLI for querying the recommendation service.

Usage::

    python -m reco_enricher.cli <query> [--source auto|knowledge_graph|wikipedia]
        [--limit N] [--type T ...] [--json] [--quiet]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Sequence

import httpx

from reco_enricher.config.loader import load_config
from reco_enricher.config.settings import Settings
from reco_enricher.models.recommendation import RecommendationResult, RecommendationSource
from reco_enricher.utils.errors import ConfigurationError
from reco_enricher.utils.logging import configure_logging

EXIT_OK = 0
EXIT_CONFIGURATION_ERROR = 2


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def _format_text_output(result: RecommendationResult) -> str:
    """Format a recommendation result as a human-readable text report."""
    lines: list[str] = []
    sep = "=" * 60

    lines.append(sep)
    lines.append(f"  reco-enricher — Recommendations for: {result.query}")
    lines.append(sep)
    lines.append(f"Source: {result.source.value}  |  Items: {len(result.items)}")
    lines.append("")

    if not result.items:
        lines.append(f"No recommendations found ({result.failure_reason or 'no_results'}).")
        return "\n".join(lines)

    for index, item in enumerate(result.items, start=1):
        lines.append(f"{index}. {item.name}")
        lines.append(f"   {item.reason}")
        for feature in item.features:
            lines.append(f"   - {feature}")
        lines.append(f"   Image: {item.image_url}")
        lines.append(f"   URL:   {item.official_url}")
        category = item.api_data.get("category")
        if category:
            lines.append(f"   Category: {category}")
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"


def _format_json_output(result: RecommendationResult) -> str:
    """Serialize the result to JSON, items keyed the way the API returns them."""
    payload = {
        "query": result.query,
        "source": result.source.value,
        "count": len(result.items),
        "items": [item.model_dump(mode="json", by_alias=True) for item in result.items],
        "failure_reason": result.failure_reason,
        "generated_at": result.generated_at.isoformat() if result.generated_at else None,
    }
    return json.dumps(payload, ensure_ascii=False, indent=2)


# ---------------------------------------------------------------------------
# Running
# ---------------------------------------------------------------------------


async def _run(args: argparse.Namespace, settings: Settings) -> int:
    """Run one query and print the result.  Returns the process exit code."""
    # Deferred import: reco_enricher.main builds the FastAPI app and
    # configures server logging on import, so the CLI's own logging setup
    # has to come after it.
    from reco_enricher.main import _build_all

    # JSON mode implies quiet: log lines never mix into machine-readable output.
    quiet = args.quiet or args.json_output
    configure_logging(
        log_level="WARNING" if quiet else settings.log_level,
        stream=sys.stderr,
    )

    config = load_config(settings=settings)
    async with httpx.AsyncClient(timeout=settings.http_timeout) as http_client:
        service = _build_all(settings, config, http_client=http_client)[
            "recommendation_service"
        ]
        try:
            result = await service.recommend(
                query=args.query,
                types=args.types or [],
                limit=args.limit,
                source=args.source,
            )
        except ConfigurationError as exc:
            print(f"Error: {exc.message}", file=sys.stderr)
            return EXIT_CONFIGURATION_ERROR

    if args.json_output:
        print(_format_json_output(result))
    else:
        print(_format_text_output(result))
    return EXIT_OK


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the recommend CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m reco_enricher.cli",
        description=(
            "Look up recommendations for a query using the Google Knowledge "
            "Graph, falling back to Japanese Wikipedia."
        ),
    )
    parser.add_argument("query", type=str, help="Free-text query, e.g. 初音ミク.")
    parser.add_argument(
        "--source",
        choices=[source.value for source in RecommendationSource],
        default=RecommendationSource.AUTO.value,
        help="Which upstream to ask (default: auto).",
    )
    parser.add_argument(
        "--limit", "-n",
        type=int,
        default=None,
        help="Maximum number of items (default: DEFAULT_LIMIT setting).",
    )
    parser.add_argument(
        "--type", "-t",
        action="append",
        dest="types",
        default=None,
        help="Knowledge Graph type filter; repeat for several.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output results as JSON instead of formatted text.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log warnings and errors.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point: parse arguments, run, exit."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = Settings()
    exit_code = asyncio.run(_run(args, settings))
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
