"""Command-line interface for the node catalog.

Usage:
    node-atlas search "send slack message" --max-results 10
    node-atlas category database
    node-atlas intent "send notification"
    node-atlas chains "notify the team" --fast
    node-atlas stats --json
    node-atlas validate
    node-atlas refresh --force
"""
import argparse
import asyncio
import sys
from typing import Any, Optional

import structlog
from pydantic import TypeAdapter

from node_atlas.catalog.errors import CatalogError, RefreshUnavailableError
from node_atlas.catalog.service import NodeCatalog
from node_atlas.config import get_settings
from node_atlas.factory import build_catalog, build_refresher
from node_atlas.log_setup import configure_logging
from node_atlas.models.catalog import SearchOptions, WorkflowIntent, WorkflowPreferences
from node_atlas.utils import printer

logger = structlog.get_logger()

_JSON = TypeAdapter(Any)


def _emit(value: Any, as_json: bool, text: str) -> None:
    if as_json:
        print(_JSON.dump_json(value, indent=2).decode())
    else:
        print(text)


def cmd_search(catalog: NodeCatalog, args: argparse.Namespace) -> int:
    options = SearchOptions(
        categories=args.category or [],
        tags=args.tag or [],
        max_results=args.max_results if args.max_results is not None else catalog.search_engine.default_max_results,
        fuzzy_search=not args.exact,
        include_ai_optimized=not args.no_ai,
        include_regular=not args.ai_only,
    )
    result = catalog.search_nodes(args.query, options)
    _emit(result, args.json, printer.print_search_result(result))
    return 0


def cmd_category(catalog: NodeCatalog, args: argparse.Namespace) -> int:
    nodes = catalog.discover_by_category(args.label)
    _emit(nodes, args.json, printer.print_nodes(nodes, f"CATEGORY: {args.label}"))
    return 0


def cmd_intent(catalog: NodeCatalog, args: argparse.Namespace) -> int:
    nodes = catalog.discover_by_intent(args.phrase)
    _emit(nodes, args.json, printer.print_nodes(nodes, f"INTENT: {args.phrase}"))
    return 0


def cmd_chains(catalog: NodeCatalog, args: argparse.Namespace) -> int:
    preferences = WorkflowPreferences(speed="fast") if args.fast else None
    suggestions = catalog.suggest_chains(WorkflowIntent(text=args.intent, preferences=preferences))
    _emit(suggestions, args.json, printer.print_chains(suggestions, args.intent))
    return 0


def cmd_stats(catalog: NodeCatalog, args: argparse.Namespace) -> int:
    stats = catalog.statistics()
    _emit(stats, args.json, printer.print_statistics(stats))
    return 0


def cmd_validate(catalog: NodeCatalog, args: argparse.Namespace) -> int:
    issues = catalog.validate()
    _emit(issues, args.json, printer.print_issues(issues))
    return 1 if issues else 0


def cmd_refresh(catalog: NodeCatalog, args: argparse.Namespace) -> int:
    refresher = build_refresher(catalog.store, get_settings())
    refresher.restore()
    try:
        outcome = asyncio.run(refresher.refresh(force=args.force))
    except RefreshUnavailableError as e:
        print(f"Refresh failed: {e}", file=sys.stderr)
        return 2
    _emit(outcome, args.json, printer.print_refresh_outcome(outcome))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="node-atlas", description="Discover and search n8n nodes")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    subparsers = parser.add_subparsers(dest="command", required=True)

    search = subparsers.add_parser("search", help="Free-text search with fuzzy matching")
    search.add_argument("query")
    search.add_argument("--category", action="append", help="Restrict to a category (repeatable)")
    search.add_argument("--tag", action="append", help="Restrict to a tag (repeatable)")
    search.add_argument("--max-results", type=int, default=None)
    search.add_argument("--exact", action="store_true", help="Disable fuzzy matching")
    search.add_argument("--no-ai", action="store_true", help="Exclude AI nodes")
    search.add_argument("--ai-only", action="store_true", help="Only AI nodes")
    search.set_defaults(handler=cmd_search)

    category = subparsers.add_parser("category", help="Nodes for a category group or alias")
    category.add_argument("label")
    category.set_defaults(handler=cmd_category)

    intent = subparsers.add_parser("intent", help="Nodes for a natural-language intent")
    intent.add_argument("phrase")
    intent.set_defaults(handler=cmd_intent)

    chains = subparsers.add_parser("chains", help="Suggest node chains for an intent")
    chains.add_argument("intent")
    chains.add_argument("--fast", action="store_true", help="Prefer simpler chains")
    chains.set_defaults(handler=cmd_chains)

    stats = subparsers.add_parser("stats", help="Catalog statistics")
    stats.set_defaults(handler=cmd_stats)

    validate = subparsers.add_parser("validate", help="Report catalog data-quality issues")
    validate.set_defaults(handler=cmd_validate)

    refresh = subparsers.add_parser("refresh", help="Refresh the catalog from the n8n repository")
    refresh.add_argument("--force", action="store_true", help="Rebuild even if the revision is unchanged")
    refresh.set_defaults(handler=cmd_refresh)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings)

    catalog = build_catalog(settings)
    try:
        return args.handler(catalog, args)
    except CatalogError as e:
        logger.error("cli_command_failed", command=args.command, error=str(e), phase=e.phase)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
