"""CLI entry point for candidate discovery."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from candidate_discovery.core.config import Settings, UpstreamCredentials
from candidate_discovery.core.errors import ConfigurationMissing, PipelineError, TimedOut
from candidate_discovery.core.locations import AVAILABLE_LOCATIONS, resolve_geo_codes
from candidate_discovery.core.schemas import DEFAULT_LIMIT, SearchRequest, SearchStatus
from candidate_discovery.pipeline.orchestrator import (
    discover_candidates,
    export_candidates_json,
    rank,
)
from candidate_discovery.upstream.client import RapidApiSearchClient

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Candidate discovery - search, normalize and rank candidate profiles",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- search subcommand ---
    search_parser = subparsers.add_parser("search", help="Search for candidates")
    search_parser.add_argument(
        "--keywords",
        required=True,
        help="Main search terms (e.g. 'React developer')",
    )
    search_parser.add_argument(
        "--title",
        action="append",
        default=[],
        dest="title_keywords",
        help="Job title keyword (repeatable)",
    )
    search_parser.add_argument(
        "--current-company",
        action="append",
        default=[],
        dest="current_company_names",
        help="Current employer name (repeatable)",
    )
    search_parser.add_argument(
        "--past-company",
        action="append",
        default=[],
        dest="past_company_names",
        help="Past employer name (repeatable)",
    )
    search_parser.add_argument(
        "--location",
        action="append",
        default=[],
        dest="locations",
        help="Location name or numeric geo code (repeatable; see 'locations')",
    )
    search_parser.add_argument(
        "--limit",
        type=int,
        default=DEFAULT_LIMIT,
        help=f"Max candidates to return (default: {DEFAULT_LIMIT}, capped at 30)",
    )
    search_parser.add_argument(
        "--narrative-file",
        help="Text file whose mentions of candidates drive presentation order",
    )
    search_parser.add_argument(
        "--config",
        help="Path to settings YAML file (optional; built-in defaults otherwise)",
    )
    search_parser.add_argument(
        "--output",
        help="Also write the ranked candidates as a JSON array to this file",
    )
    search_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the upstream request body without calling the upstream",
    )
    search_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    # --- locations subcommand ---
    locations_parser = subparsers.add_parser(
        "locations",
        help="List named locations and their geo codes",
    )
    locations_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help=argparse.SUPPRESS,
    )

    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def build_request(args: argparse.Namespace) -> SearchRequest:
    return SearchRequest(
        keywords=args.keywords,
        title_keywords=args.title_keywords,
        current_company_names=args.current_company_names,
        past_company_names=args.past_company_names,
        geo_codes=resolve_geo_codes(args.locations),
        limit=args.limit,
    )


def _log_progress(status: SearchStatus, attempt: int) -> None:
    logger.info(
        "Attempt %d: %s, %d profiles scraped so far",
        attempt, status.state.value, status.employees_scraped_so_far,
    )


async def run(
    request: SearchRequest,
    credentials: UpstreamCredentials,
    settings: Settings,
    narrative: str | None,
    output_path: str | None = None,
) -> str:
    """Run discovery against the real upstream and return the JSON payload."""
    async with RapidApiSearchClient(credentials, settings.upstream) as client:
        result = await discover_candidates(
            request, client, settings, on_progress=_log_progress,
        )

    ranked = rank(result.candidates, narrative, settings.ranking)
    if output_path:
        Path(output_path).write_text(export_candidates_json(ranked), encoding="utf-8")
        logger.info("Wrote %d candidates to %s", len(ranked), output_path)
    payload = result.model_copy(update={"candidates": ranked}).to_payload()
    return json.dumps(payload, indent=2, ensure_ascii=False)


def cmd_locations() -> None:
    for name, code in AVAILABLE_LOCATIONS.items():
        print(f"{name}: {code}")


def cmd_search(args: argparse.Namespace) -> None:
    try:
        settings = Settings.from_yaml(args.config) if args.config else Settings()
        request = build_request(args)
        narrative = Path(args.narrative_file).read_text() if args.narrative_file else None
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.dry_run:
        print("[DRY RUN] Would send to upstream:")
        print(json.dumps(request.to_upstream_body(), indent=2))
        print(
            f"[DRY RUN] Polling every {settings.polling.interval_seconds}s, "
            f"up to {settings.polling.max_attempts} attempts"
        )
        return

    # Credentials are checked before any network call.
    try:
        credentials = UpstreamCredentials.from_env()
    except ConfigurationMissing as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(2)

    try:
        output = asyncio.run(run(request, credentials, settings, narrative, args.output))
    except TimedOut as e:
        print(f"Error: {e}. The search may just be slow - try again.", file=sys.stderr)
        sys.exit(1)
    except PipelineError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(f"Error: could not write output: {e}", file=sys.stderr)
        sys.exit(1)
    print(output)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)

    if args.command == "locations":
        cmd_locations()
    else:
        cmd_search(args)


if __name__ == "__main__":
    main()
